from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from memberhub.api.deps import AdminUser, AuthenticatedUser, OptionalUser
from memberhub.domain.models import (
    ActionResult,
    AssignPlanRequest,
    CurrentUser,
    RefreshRequest,
    SignInRequest,
    SignUpRequest,
    TokenResponse,
)
from memberhub.infra.session import REFRESH_COOKIE_NAME, clear_session_cookies, set_session_cookies
from memberhub.services.auth_service import (
    AuthService,
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
)

router = APIRouter()


def get_auth_service() -> AuthService:
    return AuthService()


Service = Annotated[AuthService, Depends(get_auth_service)]


def _handle_auth_error(exc: Exception) -> None:
    if isinstance(exc, InvalidCredentialsError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    if isinstance(exc, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, ConflictError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    raise exc


@router.post("/sign-up", response_model=CurrentUser, status_code=status.HTTP_201_CREATED)
def sign_up(payload: SignUpRequest, service: Service) -> CurrentUser:
    try:
        user = service.sign_up(payload)
    except ConflictError as exc:
        _handle_auth_error(exc)
        raise
    return CurrentUser(id=user.id, email=user.email)


@router.post("/sign-in", response_model=TokenResponse)
def sign_in(payload: SignInRequest, response: Response, service: Service) -> TokenResponse:
    try:
        _, tokens = service.sign_in(payload)
    except InvalidCredentialsError as exc:
        _handle_auth_error(exc)
        raise
    set_session_cookies(response, tokens.access_token, tokens.refresh_token)
    return tokens


@router.post("/refresh", response_model=TokenResponse)
def refresh(payload: RefreshRequest, request: Request, response: Response, service: Service) -> TokenResponse:
    refresh_token = payload.refresh_token or request.cookies.get(REFRESH_COOKIE_NAME)
    if not refresh_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing refresh token")
    try:
        tokens = service.refresh(refresh_token)
    except (InvalidCredentialsError, NotFoundError) as exc:
        _handle_auth_error(exc)
        raise
    set_session_cookies(response, tokens.access_token, tokens.refresh_token)
    return tokens


@router.post("/sign-out", response_model=ActionResult)
def sign_out(user: OptionalUser, response: Response, service: Service) -> ActionResult:
    service.sign_out(user.id if user is not None else None)
    clear_session_cookies(response)
    return ActionResult()


@router.get("/me", response_model=CurrentUser)
def me(user: AuthenticatedUser) -> CurrentUser:
    return user


@router.post("/plan", response_model=ActionResult)
def assign_plan(payload: AssignPlanRequest, _admin: AdminUser, service: Service) -> ActionResult:
    try:
        service.assign_plan_to_profile(payload.user_id, payload.plan_id)
    except NotFoundError as exc:
        _handle_auth_error(exc)
        raise
    return ActionResult()
