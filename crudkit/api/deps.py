"""Dependencies that hand request handlers the per-application runtime objects."""

from fastapi import Request

from crudkit.core.blocking import BlockingExecutor
from crudkit.core.cache import Cache
from crudkit.core.config import Settings
from crudkit.core.state import AppState
from crudkit.repositories import UserRepository


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_executor(request: Request) -> BlockingExecutor:
    return request.app.state.executor


def get_user_repository(request: Request) -> UserRepository:
    return request.app.state.user_repository


def get_cache(request: Request) -> Cache | None:
    """Redis cache, or None when the cache layer is disabled."""
    return request.app.state.cache


def get_state(request: Request) -> AppState:
    return request.app.state.store
