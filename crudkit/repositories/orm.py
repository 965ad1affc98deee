"""Shared SQLAlchemy implementation of UserRepository; backends differ in error detection and pooling."""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

from sqlalchemy import Engine, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from crudkit.core.database import build_session_factory, check_db_connected
from crudkit.core.errors import ApiError, InternalServerError, NotFoundError, ValidationError
from crudkit.models.user import User
from crudkit.repositories.base import UserRepository

logger = logging.getLogger(__name__)


def _not_found(user_id: str) -> NotFoundError:
    return NotFoundError(f"User {user_id} not found")


def _normalize_id(user_id: str) -> str | None:
    """Canonical UUID string, or None when user_id is not a UUID."""
    try:
        return str(uuid.UUID(str(user_id)))
    except (TypeError, ValueError):
        return None


class SqlAlchemyUserRepository(UserRepository):
    """
    One session per call: checked out from the engine pool on entry and returned
    on exit. Returned User objects are detached and fully loaded.
    """

    backend = "generic"

    def __init__(self, engine: Engine, session_factory: sessionmaker[Session] | None = None) -> None:
        self._engine = engine
        self._session_factory = session_factory or build_session_factory(engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    def is_unique_violation(self, exc: IntegrityError) -> bool:
        """Whether the driver error behind exc is a unique-key violation."""
        return "unique" in str(exc.orig).lower()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except ApiError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Database error (%s): %s", self.backend, e)
            raise InternalServerError("Unknown database error") from e
        finally:
            db.close()

    def _commit(self, db: Session, email: str) -> None:
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            if self.is_unique_violation(e):
                raise ValidationError([f"email {email} is already registered"]) from e
            raise

    def _get(self, db: Session, user_id: str) -> User:
        normalized = _normalize_id(user_id)
        user = db.get(User, normalized) if normalized else None
        if user is None:
            raise _not_found(user_id)
        return user

    def get_all(self) -> list[User]:
        with self._session() as db:
            return list(db.scalars(select(User).order_by(User.created_at, User.id)))

    def find(self, user_id: str) -> User:
        with self._session() as db:
            return self._get(db, user_id)

    def find_by_email(self, email: str) -> User | None:
        with self._session() as db:
            return db.scalars(select(User).where(User.email == email.lower())).first()

    def create(self, user: User) -> User:
        with self._session() as db:
            db.add(user)
            self._commit(db, user.email)
            db.refresh(user)
            return user

    def update(
        self,
        user_id: str,
        *,
        first_name: str,
        last_name: str,
        email: str,
        updated_by: str,
    ) -> User:
        with self._session() as db:
            user = self._get(db, user_id)
            user.first_name = first_name
            user.last_name = last_name
            user.email = email
            user.updated_by = updated_by
            user.updated_at = datetime.now(UTC).replace(tzinfo=None)
            self._commit(db, email)
            db.refresh(user)
            return user

    def delete(self, user_id: str) -> User:
        with self._session() as db:
            user = self._get(db, user_id)
            db.delete(user)
            db.commit()
            return user

    def ping(self) -> bool:
        db = self._session_factory()
        try:
            return check_db_connected(db)
        finally:
            db.close()

    def close(self) -> None:
        self._engine.dispose()
