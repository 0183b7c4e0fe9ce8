from __future__ import annotations

import re

import structlog
from sqlmodel import col, select

from memberhub.domain.models import (
    AdminContentDetail,
    AdminContentListItem,
    ContentEntry,
    ContentMediaRead,
    ContentOwnerRead,
    ContentStatus,
    Profile,
    Taxonomy,
    now_utc,
)
from memberhub.infra.db import new_session

logger = structlog.get_logger(__name__)

UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)


class ContentError(Exception):
    pass


class NotFoundError(ContentError):
    pass


def looks_like_uuid(value: str | None) -> bool:
    if not value:
        return False
    return UUID_PATTERN.match(value) is not None


class ContentService:
    def list_admin_content(self) -> list[AdminContentListItem]:
        """Every entry regardless of status, newest first."""
        with new_session() as session:
            rows = session.exec(
                select(ContentEntry, Profile)
                .join(Profile, ContentEntry.owner_id == Profile.id, isouter=True)
                .order_by(col(ContentEntry.created_at).desc())
            ).all()

            taxonomy_ids = {entry.category for entry, _ in rows if looks_like_uuid(entry.category)}
            taxonomy_names: dict[str, str] = {}
            if taxonomy_ids:
                taxonomies = session.exec(select(Taxonomy).where(col(Taxonomy.id).in_(list(taxonomy_ids)))).all()
                taxonomy_names = {item.id: item.name for item in taxonomies}

        items: list[AdminContentListItem] = []
        for entry, owner in rows:
            category = entry.category
            if looks_like_uuid(category):
                category = taxonomy_names.get(category or "")
            items.append(
                AdminContentListItem(
                    id=entry.id,
                    slug=entry.slug,
                    title=entry.title,
                    content_type=entry.content_type,
                    category=category,
                    status=entry.status,
                    published_at=entry.published_at,
                    created_at=entry.created_at,
                    owner=(
                        ContentOwnerRead(full_name=owner.full_name, avatar_url=owner.avatar_url)
                        if owner is not None
                        else None
                    ),
                )
            )
        return items

    def get_by_slug(self, slug: str) -> AdminContentDetail:
        with new_session() as session:
            row = session.exec(
                select(ContentEntry, Profile)
                .join(Profile, ContentEntry.owner_id == Profile.id, isouter=True)
                .where(ContentEntry.slug == slug)
            ).first()
        if row is None:
            raise NotFoundError("content not found")
        entry, owner = row
        return AdminContentDetail(
            id=entry.id,
            slug=entry.slug,
            title=entry.title,
            description=entry.description,
            content_type=entry.content_type,
            image=entry.image_url,
            author=owner.full_name if owner is not None else None,
            author_image=owner.avatar_url if owner is not None else None,
            status=entry.status,
            published_at=entry.published_at,
            cta_text=entry.cta_text,
            cta_url=entry.cta_url,
            full_content=ContentMediaRead(
                video_url=entry.video_url,
                audio_url=entry.audio_url,
                document_url=entry.document_url,
                article_body=entry.article_body,
            ),
        )

    def toggle_status(self, content_id: str, next_status: ContentStatus) -> None:
        with new_session() as session:
            entry = session.get(ContentEntry, content_id)
            if entry is None:
                raise NotFoundError("Content not found or unauthorized")
            entry.status = next_status
            entry.published_at = now_utc() if next_status == ContentStatus.PUBLISHED else None
            session.add(entry)
            session.commit()
        logger.info("content_status_changed", content_id=content_id, status=next_status)

    def delete(self, content_id: str) -> None:
        with new_session() as session:
            entry = session.get(ContentEntry, content_id)
            if entry is None:
                raise NotFoundError("Content not found or unauthorized")
            session.delete(entry)
            session.commit()
        logger.info("content_deleted", content_id=content_id)
