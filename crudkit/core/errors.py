"""API error taxonomy and the exception handlers that render it as `{"errors": [...]}`."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    Base exception for errors surfaced to API clients.

    Every subclass carries one or more client-safe messages and an HTTP status;
    backend detail is logged, never rendered.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    @property
    def messages(self) -> list[str]:
        return [self.message]

    def to_dict(self) -> dict[str, list[str]]:
        """Convert exception to API response dict."""
        return {"errors": self.messages}


class ValidationError(ApiError):
    """Raised when one or more request fields are invalid; one message per field."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, messages: list[str]) -> None:
        self._messages = list(messages)
        super().__init__("; ".join(self._messages))

    @property
    def messages(self) -> list[str]:
        return list(self._messages)


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class UnauthorizedError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class InternalServerError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class BlockingError(InternalServerError):
    """Raised when work dispatched to the worker pool did not complete normally."""

    def __init__(self, message: str = "execution was interrupted") -> None:
        super().__init__(message)


class CacheError(InternalServerError):
    """Raised when a cache command cannot be sent to or answered by Redis."""


def error_response(status_code: int, messages: list[str]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"errors": messages})


def _field_name(loc: tuple) -> str:
    # loc is ("body", "first_name") for body fields, ("path", "user_id") etc.
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header", "cookie")]
    return ".".join(parts) or "body"


def collect_validation_messages(errors: list[dict]) -> list[str]:
    """
    Reduce pydantic error dicts to one message per failing field, in order.

    Messages raised from our own field validators are used verbatim; a missing
    field reports "<field> is required"; anything else falls back to pydantic's text.
    """
    messages: list[str] = []
    seen: set[str] = set()
    for err in errors:
        err_type = err.get("type", "")
        field = "body" if err_type == "json_invalid" else _field_name(tuple(err.get("loc", ())))
        if field in seen:
            continue
        seen.add(field)
        if err_type == "json_invalid":
            messages.append("request body must be valid JSON")
        elif err_type == "missing":
            messages.append(f"{field} is required")
        elif err_type == "value_error":
            ctx_error = (err.get("ctx") or {}).get("error")
            messages.append(str(ctx_error) if ctx_error else err.get("msg", "invalid value"))
        elif field == "body":
            messages.append(err.get("msg", "request body is invalid"))
        else:
            messages.append(f"{field}: {err.get('msg', 'invalid value')}")
    return messages


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s on %s %s: %s",
            type(exc).__name__,
            request.method,
            request.url.path,
            exc.message,
        )
    return error_response(exc.status_code, exc.messages)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        collect_validation_messages(list(exc.errors())),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content={"errors": [detail]},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, ["Internal Server Error"]
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
