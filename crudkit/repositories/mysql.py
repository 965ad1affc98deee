"""MySQL user repository."""

from sqlalchemy.exc import IntegrityError

from crudkit.repositories.orm import SqlAlchemyUserRepository

# ER_DUP_ENTRY
DUPLICATE_ENTRY = 1062


class MysqlUserRepository(SqlAlchemyUserRepository):
    backend = "mysql"

    def is_unique_violation(self, exc: IntegrityError) -> bool:
        args = getattr(exc.orig, "args", ())
        return bool(args) and args[0] == DUPLICATE_ENTRY
