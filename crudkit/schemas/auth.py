"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field, field_validator

from crudkit.schemas.user import validate_email_address, validate_password


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Password (6-128 chars)")

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return validate_email_address(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_password(v)


class AuthUser(BaseModel):
    """Authenticated principal (id, email) decoded from the session cookie."""

    id: str
    email: str
