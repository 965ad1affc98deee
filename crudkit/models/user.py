"""ORM model for application users."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, String, func

from crudkit.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class User(Base):
    """
    User account; `password` holds a bcrypt hash, never the plain password.

    created_by/updated_by name the principal that made the change (the user's own
    id when created anonymously).
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(100), nullable=False, unique=True, index=True)
    password = Column(String(122), nullable=False)
    created_by = Column(String(36), nullable=False)
    created_at = Column(
        DateTime,
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
    updated_by = Column(String(36), nullable=False)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
