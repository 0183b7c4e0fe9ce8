from __future__ import annotations

from typing import Any

import structlog
from pydantic import BaseModel
from sqlmodel import col, select

from memberhub.domain.models import (
    CommunityVisionUpdate,
    EducationSectionUpdate,
    HeroSectionUpdate,
    Plan,
    PublicSalesPage,
    PublicSalesPageRead,
    SalesPagePlanRead,
    SalesPagePlansUpdate,
    SalesPageRead,
    SalesPageType,
    SectionVisibilityUpdate,
    now_utc,
)
from memberhub.infra.db import new_session

logger = structlog.get_logger(__name__)

PUBLIC_HOME_SLUG = "home"

PAGE_SLUGS: dict[SalesPageType, str] = {
    SalesPageType.MAIN: PUBLIC_HOME_SLUG,
    SalesPageType.FOUNDERS: "founders",
}


class SalesPageError(Exception):
    pass


class NotFoundError(SalesPageError):
    pass


class ValidationError(SalesPageError):
    pass


def order_plans(plans: list[Plan], selected_plan_ids: list[str] | None) -> list[Plan]:
    """Plans for the membership section.

    With no selection every plan is shown in the given order; otherwise only
    the selected ids, in selection order, skipping ids that do not resolve.
    """
    if not selected_plan_ids:
        return list(plans)
    by_id = {plan.id: plan for plan in plans}
    return [by_id[plan_id] for plan_id in selected_plan_ids if plan_id in by_id]


class SalesPageService:
    def get_public_page(self) -> PublicSalesPageRead:
        with new_session() as session:
            page = session.exec(select(PublicSalesPage).where(PublicSalesPage.slug == PUBLIC_HOME_SLUG)).first()
            plans = list(
                session.exec(
                    select(Plan).where(Plan.active == True).order_by(col(Plan.sort_order), col(Plan.name))  # noqa: E712
                ).all()
            )
        ordered = order_plans(plans, page.selected_plan_ids if page is not None else None)
        return PublicSalesPageRead(
            sales_page=SalesPageRead.model_validate(page) if page is not None else None,
            ordered_plans=[SalesPagePlanRead.model_validate(plan) for plan in ordered],
        )

    def get_by_page_type(self, page_type: SalesPageType) -> PublicSalesPage | None:
        with new_session() as session:
            return session.exec(select(PublicSalesPage).where(PublicSalesPage.page_type == page_type)).first()

    def _apply(self, page_type: SalesPageType, changes: dict[str, Any]) -> PublicSalesPage:
        with new_session() as session:
            page = session.exec(select(PublicSalesPage).where(PublicSalesPage.page_type == page_type)).first()
            if page is None:
                raise NotFoundError("Sales page not found")
            for key, value in changes.items():
                setattr(page, key, value)
            page.updated_at = now_utc()
            session.add(page)
            session.commit()
            session.refresh(page)
        logger.info("sales_page_updated", page_type=page_type, fields=sorted(changes))
        return page

    def _partial(self, page_type: SalesPageType, payload: BaseModel) -> PublicSalesPage:
        return self._apply(page_type, payload.model_dump(exclude_unset=True))

    def update_community_vision(self, page_type: SalesPageType, payload: CommunityVisionUpdate) -> PublicSalesPage:
        return self._partial(page_type, payload)

    def update_education_section(self, page_type: SalesPageType, payload: EducationSectionUpdate) -> PublicSalesPage:
        return self._partial(page_type, payload)

    def update_section_visibility(self, page_type: SalesPageType, payload: SectionVisibilityUpdate) -> PublicSalesPage:
        return self._partial(page_type, payload)

    def update_selected_plans(self, page_type: SalesPageType, payload: SalesPagePlansUpdate) -> PublicSalesPage:
        """Store the membership-section plan ids; an empty list means every active plan."""
        with new_session() as session:
            known = set(
                session.exec(select(Plan.id).where(col(Plan.id).in_(list(payload.selected_plan_ids)))).all()
            )
        unknown = [plan_id for plan_id in payload.selected_plan_ids if plan_id not in known]
        if unknown:
            raise ValidationError(f"Unknown plan ids: {', '.join(unknown)}")
        # keep first occurrence, drop repeats
        selected = list(dict.fromkeys(payload.selected_plan_ids))
        return self._apply(page_type, {"selected_plan_ids": selected})

    def update_hero(self, page_type: SalesPageType, payload: HeroSectionUpdate) -> PublicSalesPage:
        """Upsert the hero fields; the page row is created on first save."""
        changes = payload.model_dump(exclude_unset=True)
        with new_session() as session:
            page = session.exec(select(PublicSalesPage).where(PublicSalesPage.page_type == page_type)).first()
            if page is None:
                page = PublicSalesPage(slug=PAGE_SLUGS[page_type], page_type=page_type)
            for key, value in changes.items():
                setattr(page, key, value)
            page.updated_at = now_utc()
            session.add(page)
            session.commit()
            session.refresh(page)
        logger.info("sales_page_hero_saved", page_type=page_type, fields=sorted(changes))
        return page
