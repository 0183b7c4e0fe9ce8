from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from memberhub.domain.models import CurrentUser, Profile
from memberhub.infra.auth import TokenError, decode_token
from memberhub.infra.db import new_session
from memberhub.infra.session import ACCESS_COOKIE_NAME, ACCESS_TOKEN_STATE_KEY

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/sign-in", auto_error=False)


def _request_token(request: Request, bearer: str | None) -> str | None:
    # Order: Authorization header, token renewed by the session middleware, then cookie.
    if bearer:
        return bearer
    renewed = getattr(request.state, ACCESS_TOKEN_STATE_KEY, None)
    if isinstance(renewed, str) and renewed:
        return renewed
    return request.cookies.get(ACCESS_COOKIE_NAME)


def get_optional_user(
    request: Request,
    bearer: str | None = Depends(oauth2_scheme),
) -> CurrentUser | None:
    token = _request_token(request, bearer)
    if not token:
        return None
    try:
        claims = decode_token(token)
    except TokenError:
        return None
    user = CurrentUser(id=claims["sub"], email=str(claims.get("email", "")))
    request.state.user = user
    return user


def get_current_user(
    user: Annotated[CurrentUser | None, Depends(get_optional_user)],
) -> CurrentUser:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


def require_admin(
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    with new_session() as session:
        profile = session.get(Profile, user.id)
    if profile is None or profile.is_creator is not True:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized",
        )
    return user


OptionalUser = Annotated[CurrentUser | None, Depends(get_optional_user)]
AuthenticatedUser = Annotated[CurrentUser, Depends(get_current_user)]
AdminUser = Annotated[CurrentUser, Depends(require_admin)]
