"""SQLite user repository (local development and tests)."""

from sqlalchemy.exc import IntegrityError

from crudkit.repositories.orm import SqlAlchemyUserRepository


class SqliteUserRepository(SqlAlchemyUserRepository):
    backend = "sqlite"

    def is_unique_violation(self, exc: IntegrityError) -> bool:
        return str(exc.orig).startswith("UNIQUE constraint failed")
