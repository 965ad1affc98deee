"""Shared builders for tests: in-memory SQLite settings, app factory, seeded users, fake Redis."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

from fastapi import FastAPI
from redis.exceptions import ConnectionError as RedisConnectionError

from crudkit.core.config import Settings
from crudkit.main import create_app
from crudkit.models import Base
from crudkit.repositories import SqliteUserRepository, build_user_repository
from crudkit.services.users import build_new_user

PASSWORD = "123456"


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "DATABASE": "sqlite",
        "DATABASE_URL": "sqlite://",
        "SESSION_KEY": "tests-session-key-0123456789abcdef",
        "JWT_SECRET": "tests-jwt-secret",
        "REDIS_URL": None,
        "STATIC_ROOT": "./static",
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(**values)


def make_repository(settings: Settings | None = None) -> SqliteUserRepository:
    """Fresh in-memory repository with the users table created."""
    repository = build_user_repository(settings or make_settings())
    Base.metadata.create_all(repository.engine)
    return repository


def make_app(
    settings: Settings | None = None,
    repository: SqliteUserRepository | None = None,
    cache: Any = None,
) -> FastAPI:
    settings = settings or make_settings()
    return create_app(
        settings,
        user_repository=repository or make_repository(settings),
        cache=cache,
    )


def seed_user(
    repository: SqliteUserRepository,
    email: str = "satoshi@nakamotoinstitute.org",
    password: str | None = PASSWORD,
    first_name: str = "Satoshi",
    last_name: str = "Nakamoto",
):
    return repository.create(build_new_user(first_name, last_name, email, password))


def login(client, email: str = "satoshi@nakamotoinstitute.org", password: str = PASSWORD):
    return client.post("/api/v1/auth/login", json={"email": email, "password": password})


class FakeRedis:
    """In-memory stand-in for redis.asyncio.Redis covering the commands Cache uses."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.expiry: dict[str, int | None] = {}

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self.data[key] = value
        self.expiry[key] = ex
        return True

    async def delete(self, key: str) -> int:
        self.expiry.pop(key, None)
        return 1 if self.data.pop(key, None) is not None else 0

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        return None


def unreachable_redis() -> MagicMock:
    """redis.asyncio client double whose every command fails to connect."""
    client = MagicMock()
    for command in ("get", "set", "delete", "ping"):
        setattr(
            client,
            command,
            AsyncMock(side_effect=RedisConnectionError("Error 111 connecting to localhost:6379")),
        )
    client.aclose = AsyncMock(return_value=None)
    return client
