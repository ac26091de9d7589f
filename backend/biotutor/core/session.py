"""
Session guard for BioTutor.

Extracts and validates the session token carried by a request, and gates
the configured protected path prefixes before requests reach a handler.
"""

from typing import Iterable, Optional
from urllib.parse import quote
import logging

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from .config import settings
from .errors import UnauthenticatedError
from .security import create_access_token, verify_token


logger = logging.getLogger(__name__)


def extract_token(request: Request) -> Optional[str]:
    """Return the session token from the cookie or a Bearer header."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token

    authorization = request.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def authorize(request: Request) -> str:
    """
    Resolve the account id of the caller.

    Raises:
        UnauthenticatedError: token absent, malformed, expired, badly
            signed, or without a subject
    """
    token = extract_token(request)
    if not token:
        raise UnauthenticatedError()

    payload = verify_token(token)
    if payload is None:
        raise UnauthenticatedError()

    account_id = payload.get("sub")
    if not isinstance(account_id, str) or not account_id:
        raise UnauthenticatedError()

    return account_id


def issue_session(response: Response, account_id: str, email: str) -> str:
    """Mint a session token for the account and set it as a cookie."""
    token = create_access_token(
        subject=account_id,
        additional_claims={"email": email},
    )
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return token


def clear_session(response: Response) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def is_protected(path: str, prefixes: Iterable[str]) -> bool:
    """
    Check whether ``path`` falls under one of ``prefixes``.

    Matching is by whole path segments: ``/learn`` covers ``/learn`` and
    ``/learn/brain`` but not ``/learner``.
    """
    for prefix in prefixes:
        if prefix == "/":
            return True
        if path == prefix or path.startswith(prefix + "/"):
            return True
    return False


class SessionGuardMiddleware:
    """
    Reject unauthenticated requests to protected path prefixes.

    API paths get a 401 JSON body; page paths are redirected to the login
    page with the original path as ``callbackUrl``. Unmatched paths pass
    through unchecked.

    Allowed requests reach the app with the original ``send``; a streamed
    response that fails mid-body must be aborted, never closed with a final
    empty chunk.
    """

    def __init__(self, app: ASGIApp, prefixes: Optional[Iterable[str]] = None, login_path: Optional[str] = None):
        self.app = app
        self.prefixes = list(prefixes if prefixes is not None else settings.PROTECTED_PATH_PREFIXES)
        self.login_path = login_path or settings.LOGIN_PATH

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope["path"]
        if scope["method"] == "OPTIONS" or not is_protected(path, self.prefixes):
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        try:
            request.state.account_id = authorize(request)
        except UnauthenticatedError as exc:
            logger.debug(f"Rejected unauthenticated request to {path}")
            response = self._reject(path, exc)
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)

    def _reject(self, path: str, exc: UnauthenticatedError) -> Response:
        if path.startswith("/api/"):
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"message": exc.message},
            )
        return RedirectResponse(
            url=f"{self.login_path}?callbackUrl={quote(path, safe='')}",
            status_code=status.HTTP_307_TEMPORARY_REDIRECT,
        )
