from __future__ import annotations

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from memberhub.domain.models import PlanPermission, Profile
from memberhub.domain.permissions import empty_plan_permissions, merge_plan_permission_rows
from memberhub.infra.db import new_session
from memberhub.infra.events import (
    AUTH_SIGNED_IN,
    AUTH_SIGNED_OUT,
    AUTH_TOKEN_REFRESHED,
    PROFILE_PLAN_CHANGED,
    AuthEvent,
    EventBus,
    event_bus,
)

logger = structlog.get_logger(__name__)

WATCHED_EVENTS: tuple[str, ...] = (
    AUTH_SIGNED_IN,
    AUTH_SIGNED_OUT,
    AUTH_TOKEN_REFRESHED,
    PROFILE_PLAN_CHANGED,
)


class PlanPermissionService:
    def resolve(self, user_id: str | None) -> dict[str, bool]:
        """Feature flags granted by the user's plan.

        Everything is False for anonymous callers, profiles without a plan,
        and whenever the lookup fails.
        """
        if not user_id:
            return empty_plan_permissions()
        try:
            with new_session() as session:
                profile = session.get(Profile, user_id)
                if profile is None or not profile.plan_id:
                    return empty_plan_permissions()
                rows = session.exec(
                    select(PlanPermission).where(PlanPermission.plan_id == profile.plan_id)
                ).all()
        except SQLAlchemyError as exc:
            logger.error("plan_permissions_load_failed", user_id=user_id, error=str(exc))
            return empty_plan_permissions()
        return merge_plan_permission_rows([(row.permission_key, row.enabled) for row in rows])


class PlanPermissionWatcher:
    """Keeps one user's plan permissions current across that user's auth state changes.

    The watcher is bound to the user passed to ``start``. Events about any
    other user, and anonymous sign-outs, are ignored. A sign-out of the bound
    user drops to all-false until the same user signs in again.
    """

    def __init__(
        self,
        service: PlanPermissionService | None = None,
        bus: EventBus = event_bus,
    ) -> None:
        self._service = service or PlanPermissionService()
        self._bus = bus
        self._subject: str | None = None
        self._user_id: str | None = None
        self._started = False
        self.permissions: dict[str, bool] = empty_plan_permissions()

    @property
    def user_id(self) -> str | None:
        return self._user_id

    def start(self, user_id: str | None) -> dict[str, bool]:
        self._subject = user_id
        self._user_id = user_id
        if not self._started:
            for event_type in WATCHED_EVENTS:
                self._bus.subscribe(event_type, self._on_auth_event)
            self._started = True
        return self.reload()

    def stop(self) -> None:
        for event_type in WATCHED_EVENTS:
            self._bus.unsubscribe(event_type, self._on_auth_event)
        self._started = False

    def reload(self) -> dict[str, bool]:
        self.permissions = self._service.resolve(self._user_id)
        return self.permissions

    def _on_auth_event(self, event: AuthEvent) -> None:
        if self._subject is None or event.user_id != self._subject:
            return
        if event.event_type == AUTH_SIGNED_OUT:
            self._user_id = None
        elif event.event_type == AUTH_SIGNED_IN:
            self._user_id = self._subject
        elif self._user_id is None:
            return
        self.reload()
