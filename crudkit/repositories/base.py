"""Backend-neutral interface for user persistence."""

from abc import ABC, abstractmethod
from typing import ClassVar

from crudkit.models.user import User


class UserRepository(ABC):
    """
    Blocking user persistence. Call only through BlockingExecutor.run.

    Methods raise ApiError subclasses (NotFoundError, ValidationError,
    InternalServerError); backend exceptions never escape.
    """

    backend: ClassVar[str]

    @abstractmethod
    def get_all(self) -> list[User]: ...

    @abstractmethod
    def find(self, user_id: str) -> User: ...

    @abstractmethod
    def find_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    def create(self, user: User) -> User: ...

    @abstractmethod
    def update(
        self,
        user_id: str,
        *,
        first_name: str,
        last_name: str,
        email: str,
        updated_by: str,
    ) -> User: ...

    @abstractmethod
    def delete(self, user_id: str) -> User: ...

    @abstractmethod
    def ping(self) -> bool: ...

    def close(self) -> None:
        """Release pooled resources held by the repository."""
