from __future__ import annotations

PERM_DIRECTORY_LISTING = "directory_listing"
PERM_CREATE_GROUPS = "create_groups"
PERM_CREATE_EVENTS = "create_events"
PERM_OFFER_CONTENT = "offer_content"
PERM_OFFER_SERVICES = "offer_services"
PERM_OFFER_PRODUCTS = "offer_products"

PLAN_PERMISSION_KEYS: tuple[str, ...] = (
    PERM_DIRECTORY_LISTING,
    PERM_CREATE_GROUPS,
    PERM_CREATE_EVENTS,
    PERM_OFFER_CONTENT,
    PERM_OFFER_SERVICES,
    PERM_OFFER_PRODUCTS,
)


def empty_plan_permissions() -> dict[str, bool]:
    return {key: False for key in PLAN_PERMISSION_KEYS}


def merge_plan_permission_rows(rows: list[tuple[str, bool]]) -> dict[str, bool]:
    """Fold (permission_key, enabled) rows into the fixed-shape flag map.

    Unknown keys are ignored; keys without a row stay False.
    """
    permissions = empty_plan_permissions()
    for key, enabled in rows:
        if key in permissions:
            permissions[key] = bool(enabled)
    return permissions
