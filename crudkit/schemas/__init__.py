"""Pydantic request/response schemas."""

from crudkit.schemas.auth import AuthUser, LoginRequest
from crudkit.schemas.errors import ErrorResponse
from crudkit.schemas.health import HealthResponse
from crudkit.schemas.user import CreateUserRequest, UpdateUserRequest, UserResponse

__all__ = [
    "AuthUser",
    "CreateUserRequest",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "UpdateUserRequest",
    "UserResponse",
]
