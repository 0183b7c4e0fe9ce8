from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from memberhub.domain.models import now_utc

AUTH_USER_CREATED = "auth.user_created"
AUTH_SIGNED_IN = "auth.signed_in"
AUTH_SIGNED_OUT = "auth.signed_out"
AUTH_TOKEN_REFRESHED = "auth.token_refreshed"
PROFILE_PLAN_CHANGED = "profile.plan_changed"


@dataclass(frozen=True)
class AuthEvent:
    event_type: str
    user_id: str | None
    payload: dict[str, Any] = field(default_factory=dict)
    ts: datetime = field(default_factory=now_utc)


EventHandler = Callable[[AuthEvent], None]


class EventBus:
    """In-process notification of auth state changes."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        self._subscribers[event_type].append(handler)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        if event_type in self._subscribers and handler in self._subscribers[event_type]:
            self._subscribers[event_type].remove(handler)

    def publish(self, event: AuthEvent) -> None:
        handlers = [*self._subscribers.get(event.event_type, []), *self._subscribers.get("*", [])]
        for handler in handlers:
            handler(event)

    def publish_dict(
        self,
        event_type: str,
        user_id: str | None,
        payload: dict[str, Any] | None = None,
    ) -> AuthEvent:
        event = AuthEvent(event_type=event_type, user_id=user_id, payload=payload or {})
        self.publish(event)
        return event


event_bus = EventBus()
