"""Static file mounts: a public tree and a tree gated on the session principal."""

import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.types import Receive, Scope, Send

from crudkit.api.v1.auth import principal_from_session
from crudkit.core.errors import UnauthorizedError, error_response

logger = logging.getLogger(__name__)

PUBLIC_SUBDIR = "root"
SECURE_SUBDIR = "secure"
SECURE_PREFIX = "/secure"


class AuthenticatedStaticFiles(StaticFiles):
    """StaticFiles that answers 401 unless the request carries a valid session principal."""

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        settings = scope["app"].state.settings
        if principal_from_session(scope.get("session", {}), settings) is None:
            exc = UnauthorizedError()
            response = error_response(exc.status_code, exc.messages)
            await response(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


def mount_static(app: FastAPI, static_root: str) -> None:
    """
    Mount STATIC_ROOT/secure at /secure (auth-gated) and STATIC_ROOT/root at /.

    Directories that do not exist are skipped. Directory-style paths resolve to
    index.html; there is no directory listing. The public mount catches every
    path no route matched, so it must be added after all routers.
    """
    root = Path(static_root).expanduser().resolve(strict=False)
    secure_dir = root / SECURE_SUBDIR
    public_dir = root / PUBLIC_SUBDIR
    if secure_dir.is_dir():
        app.mount(
            SECURE_PREFIX,
            AuthenticatedStaticFiles(directory=str(secure_dir), html=True),
            name="secure",
        )
    else:
        logger.info("No secure static directory at %s; %s not mounted", secure_dir, SECURE_PREFIX)
    if public_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(public_dir), html=True), name="static")
    else:
        logger.info("No public static directory at %s; / not mounted", public_dir)
