from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from memberhub.console.client import ConsoleClient, ConsoleError


@dataclass
class ContentFilters:
    search: str = ""
    submitted_by: str = ""
    content_type: str = ""
    status: str = ""


@dataclass(frozen=True)
class MutationResult:
    success: bool
    error: str | None = None


def _owner_name(item: dict[str, Any]) -> str | None:
    owner = item.get("owner")
    if not isinstance(owner, dict):
        return None
    return owner.get("full_name")


def matches(item: dict[str, Any], filters: ContentFilters) -> bool:
    if filters.search and filters.search.lower() not in str(item.get("title", "")).lower():
        return False
    if filters.submitted_by and _owner_name(item) != filters.submitted_by:
        return False
    if filters.content_type and str(item.get("content_type", "")).lower() != filters.content_type.lower():
        return False
    if filters.status and item.get("status") != filters.status:
        return False
    return True


class ContentModerationView:
    """Cached admin content list with in-memory filters.

    Every publish/unpublish/delete attempt is followed by a full re-fetch,
    whether or not the API accepted it.
    """

    def __init__(self, client: ConsoleClient) -> None:
        self._client = client
        self.items: list[dict[str, Any]] = []
        self.filters = ContentFilters()

    def refresh(self) -> list[dict[str, Any]]:
        self.items = self._client.list_content()
        return self.items

    @property
    def filtered_items(self) -> list[dict[str, Any]]:
        return [item for item in self.items if matches(item, self.filters)]

    @property
    def submitters(self) -> list[str]:
        names = {name for name in (_owner_name(item) for item in self.items) if name}
        return sorted(names)

    def _mutate(self, action: Callable[..., None], *args: Any) -> MutationResult:
        try:
            action(*args)
            result = MutationResult(success=True)
        except ConsoleError as exc:
            result = MutationResult(success=False, error=exc.message)
        self.refresh()
        return result

    def publish(self, content_id: str) -> MutationResult:
        return self._mutate(self._client.set_content_status, content_id, "published")

    def unpublish(self, content_id: str) -> MutationResult:
        return self._mutate(self._client.set_content_status, content_id, "draft")

    def toggle(self, content_id: str) -> MutationResult:
        current = next((item for item in self.items if item.get("id") == content_id), None)
        if current is not None and current.get("status") == "published":
            return self.unpublish(content_id)
        return self.publish(content_id)

    def delete(self, content_id: str) -> MutationResult:
        return self._mutate(self._client.delete_content, content_id)
