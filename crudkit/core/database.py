"""SQLAlchemy engine and session factory for the configured backend."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from crudkit.core.config import Settings


def engine_options(settings: Settings) -> dict[str, Any]:
    """Pool options per backend; SQLite in-memory shares one connection across threads."""
    if settings.DATABASE == "sqlite":
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if settings.DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options
    options = {
        "pool_pre_ping": True,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
    }
    if settings.DATABASE == "mysql":
        # MySQL drops idle connections after wait_timeout (8h by default)
        options["pool_recycle"] = 3600
    return options


def build_engine(settings: Settings) -> Engine:
    return create_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        **engine_options(settings),
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
