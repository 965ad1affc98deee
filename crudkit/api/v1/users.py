"""CRUD routes for the users resource. Every database call goes through the blocking executor."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from crudkit.api.deps import get_app_settings, get_cache, get_executor, get_user_repository
from crudkit.api.v1.auth import get_current_user
from crudkit.core.blocking import BlockingExecutor
from crudkit.core.cache import Cache
from crudkit.core.config import Settings
from crudkit.core.errors import CacheError
from crudkit.repositories import UserRepository
from crudkit.schemas.auth import AuthUser
from crudkit.schemas.errors import ErrorResponse
from crudkit.schemas.user import CreateUserRequest, UpdateUserRequest, UserResponse
from crudkit.services.users import build_new_user

logger = logging.getLogger(__name__)

router = APIRouter(
    dependencies=[Depends(get_current_user)],
    responses={401: {"model": ErrorResponse}},
)


def cache_key(user_id: str) -> str:
    return f"user:{user_id}"


async def _forget(cache: Cache | None, user_id: str) -> None:
    """Evict the cached record. A cache outage never fails the request."""
    if cache is None:
        return
    try:
        await cache.delete(cache_key(user_id))
    except CacheError as e:
        logger.warning("Cache eviction skipped for user %s: %s", user_id, e.message)


async def _recall(cache: Cache | None, user_id: str) -> UserResponse | None:
    if cache is None:
        return None
    try:
        cached = await cache.get(cache_key(user_id))
    except CacheError as e:
        logger.warning("Cache lookup skipped for user %s: %s", user_id, e.message)
        return None
    return UserResponse.model_validate_json(cached) if cached else None


async def _remember(cache: Cache | None, user: UserResponse, ttl_seconds: int) -> None:
    if cache is None:
        return
    try:
        await cache.set(cache_key(user.id), user.model_dump_json(), ttl_seconds)
    except CacheError as e:
        logger.warning("Cache store skipped for user %s: %s", user.id, e.message)


@router.get("", response_model=list[UserResponse])
async def get_users(
    executor: Annotated[BlockingExecutor, Depends(get_executor)],
    repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> list[UserResponse]:
    """List all users."""
    users = await executor.run(repository.get_all)
    return [UserResponse.model_validate(u) for u in users]


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_user(
    user_id: str,
    settings: Annotated[Settings, Depends(get_app_settings)],
    executor: Annotated[BlockingExecutor, Depends(get_executor)],
    repository: Annotated[UserRepository, Depends(get_user_repository)],
    cache: Annotated[Cache | None, Depends(get_cache)],
) -> UserResponse:
    """
    Get one user; served from Redis when cached, otherwise loaded and cached.

    Writes evict the key both before and after committing, which narrows but does
    not close the window in which a read racing a write re-caches the old row; such
    an entry lives at most CACHE_TTL_SECONDS. When Redis is unreachable the record
    is read from the database.
    """
    cached = await _recall(cache, user_id)
    if cached is not None:
        return cached

    user = UserResponse.model_validate(await executor.run(repository.find, user_id))
    await _remember(cache, user, settings.CACHE_TTL_SECONDS)
    return user


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def create_user(
    body: CreateUserRequest,
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    executor: Annotated[BlockingExecutor, Depends(get_executor)],
    repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> UserResponse:
    """Create a user. The password is optional; without one the account cannot log in."""
    new_user = await executor.run(
        build_new_user,
        body.first_name,
        body.last_name,
        body.email,
        body.password,
        current_user.id,
    )
    user = await executor.run(repository.create, new_user)
    logger.info("User %s created by %s", user.id, current_user.id)
    return UserResponse.model_validate(user)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def update_user(
    user_id: str,
    body: UpdateUserRequest,
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    executor: Annotated[BlockingExecutor, Depends(get_executor)],
    repository: Annotated[UserRepository, Depends(get_user_repository)],
    cache: Annotated[Cache | None, Depends(get_cache)],
) -> UserResponse:
    """Replace a user's names and email; touches updated_by/updated_at."""
    await _forget(cache, user_id)
    user = await executor.run(
        repository.update,
        user_id,
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        updated_by=current_user.id,
    )
    await _forget(cache, user.id)
    return UserResponse.model_validate(user)


@router.delete(
    "/{user_id}",
    response_model=UserResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_user(
    user_id: str,
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    executor: Annotated[BlockingExecutor, Depends(get_executor)],
    repository: Annotated[UserRepository, Depends(get_user_repository)],
    cache: Annotated[Cache | None, Depends(get_cache)],
) -> UserResponse:
    """Hard-delete a user and return the removed record."""
    await _forget(cache, user_id)
    user = await executor.run(repository.delete, user_id)
    await _forget(cache, user.id)
    logger.info("User %s deleted by %s", user.id, current_user.id)
    return UserResponse.model_validate(user)
