from __future__ import annotations

import structlog
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select

from memberhub.domain.models import (
    MemberSiteUpdateRead,
    Profile,
    SiteUpdate,
    SiteUpdateCreate,
    SiteUpdateReceipt,
)
from memberhub.infra.db import new_session

logger = structlog.get_logger(__name__)

DEFAULT_ADMIN_NAME = "Admin"


class SiteUpdateError(Exception):
    pass


class NotFoundError(SiteUpdateError):
    pass


class SiteUpdateService:
    def create(self, created_by: str, payload: SiteUpdateCreate) -> SiteUpdate:
        with new_session() as session:
            update = SiteUpdate(title=payload.title, body=payload.body, created_by=created_by)
            session.add(update)
            session.commit()
            session.refresh(update)
        logger.info("site_update_created", site_update_id=update.id, created_by=created_by)
        return update

    def list_all(self) -> list[SiteUpdate]:
        with new_session() as session:
            return list(session.exec(select(SiteUpdate).order_by(col(SiteUpdate.created_at).desc())).all())

    def list_for_member(self, user_id: str) -> list[MemberSiteUpdateRead]:
        """Updates newest first with author details and this member's read state."""
        with new_session() as session:
            updates = session.exec(select(SiteUpdate).order_by(col(SiteUpdate.created_at).desc())).all()
            if not updates:
                return []
            admin_ids = {update.created_by for update in updates}
            admins = {
                profile.id: profile
                for profile in session.exec(select(Profile).where(col(Profile.id).in_(list(admin_ids)))).all()
            }
            read_ids = set(
                session.exec(
                    select(SiteUpdateReceipt.site_update_id).where(SiteUpdateReceipt.user_id == user_id)
                ).all()
            )

        items: list[MemberSiteUpdateRead] = []
        for update in updates:
            admin = admins.get(update.created_by)
            items.append(
                MemberSiteUpdateRead(
                    id=update.id,
                    title=update.title,
                    body=update.body,
                    created_at=update.created_at,
                    admin_name=(admin.full_name if admin is not None and admin.full_name else DEFAULT_ADMIN_NAME),
                    admin_avatar_url=admin.avatar_url if admin is not None else None,
                    is_read=update.id in read_ids,
                )
            )
        return items

    def mark_read(self, user_id: str, site_update_id: str) -> None:
        with new_session() as session:
            if session.get(SiteUpdate, site_update_id) is None:
                raise NotFoundError("Site update not found")
            if session.get(SiteUpdateReceipt, (site_update_id, user_id)) is not None:
                return
            session.add(SiteUpdateReceipt(site_update_id=site_update_id, user_id=user_id))
            try:
                session.commit()
            except IntegrityError:
                # marked read concurrently
                session.rollback()

    def mark_all_read(self, user_id: str) -> int:
        with new_session() as session:
            all_ids = set(session.exec(select(SiteUpdate.id)).all())
            read_ids = set(
                session.exec(
                    select(SiteUpdateReceipt.site_update_id).where(SiteUpdateReceipt.user_id == user_id)
                ).all()
            )
            unread = sorted(all_ids - read_ids)
            if not unread:
                return 0
            for site_update_id in unread:
                session.add(SiteUpdateReceipt(site_update_id=site_update_id, user_id=user_id))
            session.commit()
        logger.info("site_updates_marked_read", user_id=user_id, count=len(unread))
        return len(unread)
