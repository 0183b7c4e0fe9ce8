from __future__ import annotations

import os
import re

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from memberhub.infra.auth import (
    ACCESS_TOKEN_EXPIRES_MIN,
    REFRESH_TOKEN_EXPIRES_MIN,
    TOKEN_TYPE_REFRESH,
    TokenError,
    create_access_token,
    create_refresh_token,
    decode_token,
    seconds_until_expiry,
)
from memberhub.infra.events import AUTH_TOKEN_REFRESHED, event_bus

logger = structlog.get_logger(__name__)

ACCESS_COOKIE_NAME = "mh_access_token"
REFRESH_COOKIE_NAME = "mh_refresh_token"
ACCESS_TOKEN_STATE_KEY = "access_token"
SESSION_REFRESH_LEEWAY_SECONDS = int(os.getenv("SESSION_REFRESH_LEEWAY_SECONDS", "60"))
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() in {"1", "true", "yes"}

SKIP_PATHS = {"/healthz", "/readyz", "/favicon.ico", "/api/auth/sign-out"}
SKIP_PATH_PATTERN = re.compile(r"^/static/|\.(?:svg|png|jpg|jpeg|gif|webp)$")


def set_session_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    response.set_cookie(
        key=ACCESS_COOKIE_NAME,
        value=access_token,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRES_MIN * 60,
        path="/",
    )
    response.set_cookie(
        key=REFRESH_COOKIE_NAME,
        value=refresh_token,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
        max_age=REFRESH_TOKEN_EXPIRES_MIN * 60,
        path="/",
    )


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(key=ACCESS_COOKIE_NAME, path="/")
    response.delete_cookie(key=REFRESH_COOKIE_NAME, path="/")


def should_refresh_session(path: str) -> bool:
    if path in SKIP_PATHS:
        return False
    return SKIP_PATH_PATTERN.search(path) is None


def _needs_refresh(access_token: str | None) -> bool:
    if not access_token:
        return True
    remaining = seconds_until_expiry(access_token)
    return remaining is None or remaining <= SESSION_REFRESH_LEEWAY_SECONDS


class SessionRefreshMiddleware(BaseHTTPMiddleware):
    """Keeps the cookie session alive on every request.

    Never redirects or rejects: a request without a usable session simply
    reaches the route unauthenticated.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not should_refresh_session(request.url.path):
            return await call_next(request)

        access_token = request.cookies.get(ACCESS_COOKIE_NAME)
        refresh_token = request.cookies.get(REFRESH_COOKIE_NAME)
        renewed: tuple[str, str] | None = None

        if refresh_token and _needs_refresh(access_token):
            try:
                claims = decode_token(refresh_token, expected_type=TOKEN_TYPE_REFRESH)
            except TokenError as exc:
                logger.info("session_refresh_rejected", path=request.url.path, error=str(exc))
            else:
                user_id = claims["sub"]
                email = str(claims.get("email", ""))
                renewed = (
                    create_access_token(user_id=user_id, email=email),
                    create_refresh_token(user_id=user_id, email=email),
                )
                access_token = renewed[0]
                event_bus.publish_dict(AUTH_TOKEN_REFRESHED, user_id)

        if access_token:
            setattr(request.state, ACCESS_TOKEN_STATE_KEY, access_token)

        response = await call_next(request)
        if renewed is not None:
            set_session_cookies(response, *renewed)
        return response
