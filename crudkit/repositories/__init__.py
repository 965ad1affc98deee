"""User persistence: one repository implementation per supported database backend."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Engine

from crudkit.core.database import build_engine
from crudkit.repositories.base import UserRepository
from crudkit.repositories.mysql import MysqlUserRepository
from crudkit.repositories.orm import SqlAlchemyUserRepository
from crudkit.repositories.postgres import CockroachUserRepository, PostgresUserRepository
from crudkit.repositories.sqlite import SqliteUserRepository

if TYPE_CHECKING:
    from crudkit.core.config import Settings

REPOSITORIES: dict[str, type[SqlAlchemyUserRepository]] = {
    "postgres": PostgresUserRepository,
    "cockroach": CockroachUserRepository,
    "mysql": MysqlUserRepository,
    "sqlite": SqliteUserRepository,
}


def build_user_repository(settings: Settings, engine: Engine | None = None) -> UserRepository:
    """Select the repository for settings.DATABASE, creating the engine unless one is given."""
    repository_class = REPOSITORIES[settings.DATABASE]
    return repository_class(engine if engine is not None else build_engine(settings))


__all__ = [
    "REPOSITORIES",
    "CockroachUserRepository",
    "MysqlUserRepository",
    "PostgresUserRepository",
    "SqlAlchemyUserRepository",
    "SqliteUserRepository",
    "UserRepository",
    "build_user_repository",
]
