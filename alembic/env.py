"""
Alembic environment for crudkit.

The target database is DATABASE_URL from crudkit settings (environment or .env),
overridable per run with `alembic -x url=<database-url> upgrade head`.
"""

from logging.config import fileConfig
from typing import Any

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool

from crudkit.core.config import get_settings
from crudkit.models import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

# Every model is registered on Base through crudkit.models.
target_metadata = Base.metadata


def get_url() -> str:
    url = context.get_x_argument(as_dictionary=True).get("url")
    if url:
        return url
    load_dotenv()
    return get_settings().DATABASE_URL


def configure_options(url: str) -> dict[str, Any]:
    """Options shared by offline and online runs."""
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        # SQLite cannot ALTER most constraints in place
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline(url: str) -> None:
    """Emit SQL to stdout without connecting."""
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **configure_options(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online(url: str) -> None:
    engine = create_engine(url, poolclass=NullPool)
    try:
        with engine.connect() as connection:
            context.configure(connection=connection, **configure_options(url))
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline(get_url())
else:
    run_migrations_online(get_url())
