from __future__ import annotations

from sqlmodel import Session

from memberhub.domain.models import (
    CurrentUser,
    MemberShellRead,
    MenuItem,
    NavigationItem,
    Profile,
    ShellUserRead,
    SiteSettings,
)
from memberhub.domain.navigation import build_member_menu, resolve_member_navigation
from memberhub.infra.db import new_session

SITE_SETTINGS_ID = 1


def load_site_settings(session: Session) -> SiteSettings:
    """The singleton settings row, or an unsaved default when none exists yet."""
    settings = session.get(SiteSettings, SITE_SETTINGS_ID)
    if settings is None:
        return SiteSettings(id=SITE_SETTINGS_ID)
    return settings


class ShellService:
    def get_member_shell(self, user: CurrentUser) -> MemberShellRead:
        with new_session() as session:
            profile = session.get(Profile, user.id)
            settings = load_site_settings(session)

        navigation, sidebar_labels = resolve_member_navigation(settings.member_navigation)
        is_creator = profile is not None and profile.is_creator is True
        menu = build_member_menu(navigation, is_creator)

        shell_user = ShellUserRead(email=user.email, is_creator=is_creator)
        if profile is not None:
            shell_user = ShellUserRead(
                email=profile.email or user.email,
                full_name=profile.full_name,
                first_name=profile.first_name,
                last_name=profile.last_name,
                avatar_url=profile.avatar_url,
                role=profile.role,
                is_creator=is_creator,
            )

        return MemberShellRead(
            user=shell_user,
            sidebar_labels=sidebar_labels,
            member_navigation=[NavigationItem(**item) for item in navigation],
            menu=[MenuItem(**item) for item in menu],
            brand_logo_url=settings.brand_logo_url,
            brand_accent_color=settings.brand_accent_color,
            site_title=settings.site_title,
            site_terms_url=settings.site_terms_url,
            site_privacy_url=settings.site_privacy_url,
            billing_link=settings.billing_link,
        )
