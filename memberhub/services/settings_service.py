from __future__ import annotations

import structlog
from sqlmodel import col, select

from memberhub.domain.models import (
    ContentEntry,
    ContentOption,
    ContentStatus,
    DashboardDropdownData,
    DashboardSettingsPayload,
    Group,
    NamedOption,
    SiteSettings,
    SiteSettingsUpdate,
    Tool,
    now_utc,
)
from memberhub.infra.db import new_session
from memberhub.services.shell_service import SITE_SETTINGS_ID, load_site_settings

logger = structlog.get_logger(__name__)


class SettingsService:
    def get_settings(self) -> SiteSettings:
        with new_session() as session:
            return load_site_settings(session)

    def update_settings(self, payload: SiteSettingsUpdate) -> SiteSettings:
        """Partial update of the singleton row.

        Only fields present in the payload are written. ``dashboard_settings``
        is merged key by key into the stored object instead of replacing it.
        """
        changes = payload.model_dump(exclude_unset=True)
        dashboard_changes = changes.pop("dashboard_settings", None)

        with new_session() as session:
            settings = session.get(SiteSettings, SITE_SETTINGS_ID)
            if settings is None:
                settings = SiteSettings(id=SITE_SETTINGS_ID)
            for key, value in changes.items():
                setattr(settings, key, value)
            if dashboard_changes is not None:
                # reassign so the JSON column is flagged dirty
                settings.dashboard_settings = {**(settings.dashboard_settings or {}), **dashboard_changes}
            settings.updated_at = now_utc()
            session.add(settings)
            session.commit()
            session.refresh(settings)
        logger.info("site_settings_updated", fields=sorted(changes), dashboard=dashboard_changes is not None)
        return settings

    def get_dashboard_dropdown_data(self) -> DashboardDropdownData:
        with new_session() as session:
            tools = session.exec(
                select(Tool).where(Tool.is_active == True).order_by(col(Tool.name))  # noqa: E712
            ).all()
            groups = session.exec(
                select(Group)
                .where(Group.status == "active", col(Group.deleted_at).is_(None))
                .order_by(col(Group.name))
            ).all()
            content_items = session.exec(
                select(ContentEntry)
                .where(ContentEntry.status == ContentStatus.PUBLISHED)
                .order_by(col(ContentEntry.title))
            ).all()
            settings = load_site_settings(session)

        return DashboardDropdownData(
            tools=[NamedOption(id=tool.id, name=tool.name) for tool in tools],
            groups=[NamedOption(id=group.id, name=group.name) for group in groups],
            content_items=[
                ContentOption(
                    id=item.id,
                    title=item.title,
                    content_type=item.content_type,
                    image_url=item.image_url,
                )
                for item in content_items
            ],
            dashboard_settings=DashboardSettingsPayload.model_validate(settings.dashboard_settings or {}),
        )
