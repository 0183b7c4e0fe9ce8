from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any

ALLOWED_NAV_KEYS: tuple[str, ...] = ("dashboard", "tools", "community", "education", "support")

DEFAULT_NAV_LABELS: dict[str, str] = {
    "dashboard": "Dashboard",
    "tools": "Tools",
    "community": "Community",
    "education": "Education",
    "support": "Support",
}

# Sort key rank: numeric orders first, then items without one.
ORDERED_RANK = 0
UNORDERED_RANK = 1


@dataclass(frozen=True)
class MemberRoute:
    key: str
    href: str
    icon: str


ROUTE_MAP: dict[str, MemberRoute] = {
    "dashboard": MemberRoute(key="dashboard", href="/members/dashboard", icon="fa-chart-line"),
    "tools": MemberRoute(key="tools", href="/members/tools", icon="fa-tools"),
    "community": MemberRoute(key="community", href="/members/community", icon="fa-users"),
    "education": MemberRoute(key="education", href="/members/education", icon="fa-book"),
    "support": MemberRoute(key="support", href="/members/support", icon="fa-life-ring"),
}

ADMIN_MENU_ENTRY: dict[str, str] = {
    "key": "admin",
    "label": "Admin",
    "href": "/admin/dashboard",
    "icon": "fa-shield-halved",
}


def parse_navigation_config(raw: Any) -> list[Any]:
    """Accept the stored config as a JSON string or an already decoded list."""
    if isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except ValueError:
            return []
        return parsed if isinstance(parsed, list) else []
    if isinstance(raw, list):
        return raw
    return []


def _order_of(item: dict[str, Any]) -> tuple[int, float]:
    order = item.get("order")
    # bool is an int subclass but never a meaningful position; NaN has no position either
    if isinstance(order, bool) or not isinstance(order, (int, float)):
        return UNORDERED_RANK, 0.0
    if isinstance(order, float) and math.isnan(order):
        return UNORDERED_RANK, 0.0
    return ORDERED_RANK, order


def _label_of(item: dict[str, Any], key: str) -> str:
    label = item.get("label")
    if isinstance(label, str) and label:
        return label
    return DEFAULT_NAV_LABELS.get(key) or key


def resolve_member_navigation(raw: Any) -> tuple[list[dict[str, str]], dict[str, str]]:
    """Merge stored navigation preferences with the allow-list.

    Returns the ordered ``[{key, label}]`` list and the sidebar label map.
    Falls back to every allowed key in default order when nothing survives.
    """
    sidebar_labels = dict(DEFAULT_NAV_LABELS)
    valid_items = [
        item
        for item in parse_navigation_config(raw)
        if isinstance(item, dict)
        and isinstance(item.get("id"), str)
        and item["id"] in ALLOWED_NAV_KEYS
        and item.get("visible") is True
    ]
    valid_items.sort(key=_order_of)

    navigation: list[dict[str, str]] = []
    seen: set[str] = set()
    for item in valid_items:
        key = item["id"]
        if key in seen:
            continue
        seen.add(key)
        label = _label_of(item, key)
        navigation.append({"key": key, "label": label})
        sidebar_labels[key] = label

    if not navigation:
        navigation = [{"key": key, "label": DEFAULT_NAV_LABELS[key]} for key in ALLOWED_NAV_KEYS]
    return navigation, sidebar_labels


def build_member_menu(navigation: list[dict[str, str]], is_creator: bool | None) -> list[dict[str, str]]:
    menu: list[dict[str, str]] = []
    for item in navigation:
        route = ROUTE_MAP.get(item["key"])
        if route is None:
            continue
        menu.append({"key": route.key, "label": item["label"], "href": route.href, "icon": route.icon})
    if is_creator is True:
        menu.append(dict(ADMIN_MENU_ENTRY))
    return menu
