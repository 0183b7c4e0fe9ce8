from __future__ import annotations

import os
import time

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select

from memberhub.domain.models import (
    AuthUser,
    Plan,
    Profile,
    SignInRequest,
    SignUpRequest,
    TokenResponse,
    now_utc,
)
from memberhub.infra.auth import (
    TOKEN_TYPE_REFRESH,
    TokenError,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from memberhub.infra.db import new_session
from memberhub.infra.events import (
    AUTH_SIGNED_IN,
    AUTH_SIGNED_OUT,
    AUTH_TOKEN_REFRESHED,
    AUTH_USER_CREATED,
    PROFILE_PLAN_CHANGED,
    AuthEvent,
    EventBus,
    event_bus,
)

logger = structlog.get_logger(__name__)

DEFAULT_PLAN_ID = os.getenv("DEFAULT_PLAN_ID", "")
PLAN_ASSIGN_ATTEMPTS = 5
PLAN_ASSIGN_DELAY_SECONDS = 0.5


class AuthError(Exception):
    pass


class NotFoundError(AuthError):
    pass


class ConflictError(AuthError):
    pass


class InvalidCredentialsError(AuthError):
    pass


def provision_profile(event: AuthEvent) -> None:
    """Create the profile row that belongs to a freshly registered user."""
    if event.user_id is None:
        return
    with new_session() as session:
        if session.get(Profile, event.user_id) is not None:
            return
        first_name = event.payload.get("first_name")
        last_name = event.payload.get("last_name")
        session.add(
            Profile(
                id=event.user_id,
                email=event.payload.get("email"),
                first_name=first_name,
                last_name=last_name,
                full_name=f"{first_name} {last_name}".strip() if first_name or last_name else None,
            )
        )
        session.commit()


def register_profile_provisioner(bus: EventBus = event_bus) -> None:
    bus.unsubscribe(AUTH_USER_CREATED, provision_profile)
    bus.subscribe(AUTH_USER_CREATED, provision_profile)


class AuthService:
    def _issue_tokens(self, user: AuthUser) -> TokenResponse:
        return TokenResponse(
            access_token=create_access_token(user_id=user.id, email=user.email),
            refresh_token=create_refresh_token(user_id=user.id, email=user.email),
        )

    def sign_up(self, payload: SignUpRequest) -> AuthUser:
        email = payload.email.strip().lower()
        with new_session() as session:
            user = AuthUser(email=email, password_hash=hash_password(payload.password))
            session.add(user)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise ConflictError("email already registered") from exc
            session.refresh(user)

        event_bus.publish_dict(
            AUTH_USER_CREATED,
            user.id,
            {
                "email": email,
                "first_name": payload.first_name.strip(),
                "last_name": payload.last_name.strip(),
            },
        )
        if DEFAULT_PLAN_ID:
            self.assign_default_plan(user.id, DEFAULT_PLAN_ID)
        return user

    def _try_set_plan(self, user_id: str, plan_id: str) -> bool:
        with new_session() as session:
            profile = session.get(Profile, user_id)
            if profile is None:
                return False
            profile.plan_id = plan_id
            profile.updated_at = now_utc()
            session.add(profile)
            try:
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                logger.warning("profile_plan_update_failed", user_id=user_id, error=str(exc))
                return False
        return True

    def assign_default_plan(self, user_id: str, plan_id: str) -> bool:
        """Attach the signup plan, waiting for the profile row to become visible.

        Makes PLAN_ASSIGN_ATTEMPTS tries with a fixed delay between them and
        logs, rather than raises, when every try fails.
        """
        with new_session() as session:
            if session.get(Plan, plan_id) is None:
                logger.error("default_plan_missing", user_id=user_id, plan_id=plan_id)
                return False

        for attempt in range(1, PLAN_ASSIGN_ATTEMPTS + 1):
            if self._try_set_plan(user_id, plan_id):
                event_bus.publish_dict(PROFILE_PLAN_CHANGED, user_id, {"plan_id": plan_id})
                return True
            logger.info("default_plan_retry", user_id=user_id, attempt=attempt)
            if attempt < PLAN_ASSIGN_ATTEMPTS:
                time.sleep(PLAN_ASSIGN_DELAY_SECONDS)

        logger.error("default_plan_assign_failed", user_id=user_id, plan_id=plan_id, attempts=PLAN_ASSIGN_ATTEMPTS)
        return False

    def assign_plan_to_profile(self, user_id: str, plan_id: str) -> None:
        if not user_id or not plan_id:
            raise NotFoundError("Missing userId or planId")
        with new_session() as session:
            if session.get(Plan, plan_id) is None:
                raise NotFoundError("Plan not found or inactive")
        if not self._try_set_plan(user_id, plan_id):
            raise NotFoundError("profile not found")
        event_bus.publish_dict(PROFILE_PLAN_CHANGED, user_id, {"plan_id": plan_id})

    def sign_in(self, payload: SignInRequest) -> tuple[AuthUser, TokenResponse]:
        email = payload.email.strip().lower()
        with new_session() as session:
            user = session.exec(select(AuthUser).where(AuthUser.email == email)).first()
            if user is None or not verify_password(payload.password, user.password_hash):
                raise InvalidCredentialsError("Invalid login credentials")
            user.last_sign_in_at = now_utc()
            session.add(user)
            session.commit()
            session.refresh(user)

        event_bus.publish_dict(AUTH_SIGNED_IN, user.id)
        return user, self._issue_tokens(user)

    def refresh(self, refresh_token: str) -> TokenResponse:
        try:
            claims = decode_token(refresh_token, expected_type=TOKEN_TYPE_REFRESH)
        except TokenError as exc:
            raise InvalidCredentialsError("Invalid refresh token") from exc
        user = self.get_user(claims["sub"])
        event_bus.publish_dict(AUTH_TOKEN_REFRESHED, user.id)
        return self._issue_tokens(user)

    def sign_out(self, user_id: str | None) -> None:
        event_bus.publish_dict(AUTH_SIGNED_OUT, user_id)

    def get_user(self, user_id: str) -> AuthUser:
        with new_session() as session:
            user = session.get(AuthUser, user_id)
            if user is None:
                raise NotFoundError("user not found")
            return user
