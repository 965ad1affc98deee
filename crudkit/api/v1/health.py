"""Health check endpoint with database and cache connectivity checks."""

from typing import Annotated

from fastapi import APIRouter, Depends

from crudkit import __version__
from crudkit.api.deps import get_cache, get_executor, get_user_repository
from crudkit.core.blocking import BlockingExecutor
from crudkit.core.cache import Cache
from crudkit.core.errors import ApiError
from crudkit.repositories import UserRepository
from crudkit.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
async def get_health(
    executor: Annotated[BlockingExecutor, Depends(get_executor)],
    repository: Annotated[UserRepository, Depends(get_user_repository)],
    cache: Annotated[Cache | None, Depends(get_cache)],
) -> HealthResponse:
    """
    Return service liveness, version and backend connectivity.
    Used by load balancers and monitoring; always 200 while the process serves requests.
    """
    try:
        db_ok = await executor.run(repository.ping)
    except ApiError:
        db_ok = False

    if cache is None:
        cache_status = "disabled"
    else:
        cache_status = "connected" if await cache.ping() else "disconnected"

    return HealthResponse(
        status="ok",
        version=__version__,
        database="connected" if db_ok else "disconnected",
        cache=cache_status,
    )
