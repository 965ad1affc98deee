"""Cookie-session login/logout and the get_current_user dependency."""

import logging
from datetime import UTC, datetime
from typing import Annotated, Any

import jwt
from fastapi import APIRouter, Depends, Request, Response

from crudkit.api.deps import get_app_settings, get_executor, get_state, get_user_repository
from crudkit.core.blocking import BlockingExecutor
from crudkit.core.config import Settings
from crudkit.core.errors import UnauthorizedError
from crudkit.core.security import create_access_token, decode_access_token, verify_password
from crudkit.core.state import AppState
from crudkit.repositories import UserRepository
from crudkit.schemas.auth import AuthUser, LoginRequest
from crudkit.schemas.errors import ErrorResponse
from crudkit.schemas.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()

# Session key holding the signed JWT that names the principal.
SESSION_IDENTITY_KEY = "identity"

# Principal used when AUTH_ENABLED is false.
ANONYMOUS_USER = AuthUser(id="00000000-0000-0000-0000-000000000000", email="anonymous@localhost")


def principal_from_session(session: dict[str, Any], settings: Settings) -> AuthUser | None:
    """Decode the session's identity token; None when absent, invalid or expired."""
    if not settings.AUTH_ENABLED:
        return ANONYMOUS_USER
    token = session.get(SESSION_IDENTITY_KEY)
    if not token or not isinstance(token, str):
        return None
    try:
        payload = decode_access_token(token, settings)
    except jwt.PyJWTError:
        return None
    sub = payload.get("sub")
    email = payload.get("email")
    if not sub or not email:
        return None
    return AuthUser(id=sub, email=email)


def get_current_user(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthUser:
    """Dependency: require a valid session principal. Raises 401 if missing or invalid."""
    user = principal_from_session(request.session, settings)
    if user is None:
        raise UnauthorizedError()
    return user


@router.post(
    "/login",
    response_model=UserResponse,
    responses={401: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def login(
    body: LoginRequest,
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
    executor: Annotated[BlockingExecutor, Depends(get_executor)],
    repository: Annotated[UserRepository, Depends(get_user_repository)],
    state: Annotated[AppState, Depends(get_state)],
) -> UserResponse:
    """
    Authenticate with email and password.

    On success the signed session cookie names the user and the user record is
    returned; subsequent requests carrying the cookie pass get_current_user.
    """
    user = await executor.run(repository.find_by_email, body.email)
    # bcrypt is CPU-bound; keep it off the event loop as well
    matches = user is not None and await executor.run(
        verify_password, body.password, user.password
    )
    if not matches:
        logger.info("Failed login for %s", body.email)
        raise UnauthorizedError("Invalid login")

    request.session[SESSION_IDENTITY_KEY] = create_access_token(user.id, user.email, settings)
    state.set(f"last_login:{user.id}", datetime.now(UTC).isoformat())
    logger.info("User %s logged in", user.id)
    return UserResponse.model_validate(user)


@router.get("/logout")
def logout(request: Request) -> Response:
    """Forget the session principal. Always succeeds, even when not logged in."""
    request.session.clear()
    return Response(status_code=200)
