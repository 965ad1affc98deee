"""Construction of new user rows shared by the HTTP API and the admin CLI."""

import uuid

from crudkit.core.security import hash_password, unusable_password_hash
from crudkit.models.user import User


def build_new_user(
    first_name: str,
    last_name: str,
    email: str,
    password: str | None,
    created_by: str | None = None,
) -> User:
    """
    New, unsaved User with a fresh UUID and hashed password.

    Without a principal the user is recorded as its own creator; without a
    password the account gets an unusable hash and cannot log in.
    """
    user_id = str(uuid.uuid4())
    author = created_by or user_id
    password_hash = hash_password(password) if password is not None else unusable_password_hash()
    return User(
        id=user_id,
        first_name=first_name,
        last_name=last_name,
        email=email,
        password=password_hash,
        created_by=author,
        updated_by=author,
    )
