"""FastAPI application factory. No business logic; only wiring and middleware."""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from crudkit import __version__
from crudkit.api.static import mount_static
from crudkit.api.v1 import health
from crudkit.api.v1 import router as v1_router
from crudkit.core.blocking import BlockingExecutor
from crudkit.core.cache import Cache, build_cache
from crudkit.core.config import Settings, get_settings
from crudkit.core.errors import register_exception_handlers
from crudkit.core.logs import configure_logging
from crudkit.core.state import AppState
from crudkit.repositories import UserRepository, build_user_repository

logger = logging.getLogger(__name__)

_UNSET = object()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info(
        "Starting crudkit %s (database=%s, cache=%s)",
        __version__,
        app.state.settings.DATABASE,
        "enabled" if app.state.cache is not None else "disabled",
    )
    try:
        yield
    finally:
        app.state.executor.shutdown()
        if app.state.cache is not None:
            await app.state.cache.close()
        app.state.user_repository.close()
        logger.info("crudkit stopped")


def create_app(
    settings: Settings | None = None,
    *,
    user_repository: UserRepository | None = None,
    cache: Cache | None | object = _UNSET,
) -> FastAPI:
    """
    Build the application for the given settings (environment/.env by default).

    user_repository and cache override what settings would construct; pass
    cache=None to disable the cache regardless of REDIS_URL.
    """
    if settings is None:
        load_dotenv()
        settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="crudkit",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.executor = BlockingExecutor(settings.BLOCKING_WORKERS)
    app.state.user_repository = user_repository or build_user_repository(settings)
    app.state.cache = build_cache(settings) if cache is _UNSET else cache
    app.state.store = AppState()

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_KEY.get_secret_value(),
        session_cookie=settings.SESSION_NAME,
        max_age=settings.SESSION_TIMEOUT * 60,
        https_only=settings.SESSION_SECURE,
        same_site="lax",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "%s %s %s %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    register_exception_handlers(app)

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)
    mount_static(app, settings.STATIC_ROOT)
    return app
