"""SQLAlchemy ORM models."""

from crudkit.models.base import Base
from crudkit.models.user import User

__all__ = ["Base", "User"]
