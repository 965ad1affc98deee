"""PostgreSQL and CockroachDB user repositories."""

from sqlalchemy.exc import IntegrityError

from crudkit.repositories.orm import SqlAlchemyUserRepository

# SQLSTATE for unique_violation; CockroachDB reports the same code.
UNIQUE_VIOLATION = "23505"


def _sqlstate(exc: IntegrityError) -> str | None:
    orig = exc.orig
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


class PostgresUserRepository(SqlAlchemyUserRepository):
    backend = "postgres"

    def is_unique_violation(self, exc: IntegrityError) -> bool:
        return _sqlstate(exc) == UNIQUE_VIOLATION


class CockroachUserRepository(PostgresUserRepository):
    backend = "cockroach"
