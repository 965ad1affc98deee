"""Request/response schemas for the users resource, with per-field validation messages."""

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator

from crudkit.core.security import (
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)


def validate_name(field: str, value: str) -> str:
    value = value.strip()
    if len(value) < NAME_MIN_LEN:
        raise ValueError(
            f"{field} is required and must be at least {NAME_MIN_LEN} characters"
        )
    if len(value) > NAME_MAX_LEN:
        raise ValueError(f"{field} must be at most {NAME_MAX_LEN} characters")
    return value


def validate_email_address(value: str) -> str:
    """
    Syntax-only check; no DNS lookups.

    Returns the address lowercased so lookups and the unique index treat
    addresses that differ only in case as the same account.
    """
    value = value.strip().lower()
    if len(value) > EMAIL_MAX_LEN:
        raise ValueError("email must be a valid email")
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("email must be a valid email")
    return value


def validate_password(value: str) -> str:
    if len(value) < PASSWORD_MIN_LEN:
        raise ValueError(
            f"password is required and must be at least {PASSWORD_MIN_LEN} characters"
        )
    if len(value) > PASSWORD_MAX_LEN:
        raise ValueError(f"password must be at most {PASSWORD_MAX_LEN} characters")
    return value


class UpdateUserRequest(BaseModel):
    """Body for PUT /user/{id}."""

    first_name: str = Field(..., description="Given name (3-100 chars)")
    last_name: str = Field(..., description="Family name (3-100 chars)")
    email: str = Field(..., description="Unique, valid email address")

    @field_validator("first_name")
    @classmethod
    def check_first_name(cls, v: str) -> str:
        return validate_name("first_name", v)

    @field_validator("last_name")
    @classmethod
    def check_last_name(cls, v: str) -> str:
        return validate_name("last_name", v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return validate_email_address(v)


class CreateUserRequest(UpdateUserRequest):
    """Body for POST /user. Without a password the account cannot log in."""

    password: str | None = Field(default=None, description="Password (6-128 chars)")

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return validate_password(v)


class UserResponse(BaseModel):
    """User record as returned to clients (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    email: str

