"""Core app configuration, database, security and runtime helpers."""

from crudkit.core.config import Settings, get_settings
from crudkit.core.database import build_engine, build_session_factory

__all__ = ["Settings", "get_settings", "build_engine", "build_session_factory"]
