from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from memberhub.api.deps import require_admin
from memberhub.domain.models import (
    CommunityVisionUpdate,
    EducationSectionUpdate,
    HeroSectionUpdate,
    SalesPagePlansUpdate,
    SalesPageRead,
    SalesPageType,
    SectionVisibilityUpdate,
)
from memberhub.services.sales_page_service import NotFoundError, SalesPageService, ValidationError

router = APIRouter(dependencies=[Depends(require_admin)])


def get_sales_page_service() -> SalesPageService:
    return SalesPageService()


Service = Annotated[SalesPageService, Depends(get_sales_page_service)]


def _handle_sales_page_error(exc: Exception) -> None:
    if isinstance(exc, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, ValidationError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    raise exc


@router.get("/{page_type}", response_model=SalesPageRead | None)
def get_sales_page(page_type: SalesPageType, service: Service) -> SalesPageRead | None:
    page = service.get_by_page_type(page_type)
    return SalesPageRead.model_validate(page) if page is not None else None


@router.patch("/{page_type}/community-vision", response_model=SalesPageRead)
def update_community_vision(page_type: SalesPageType, payload: CommunityVisionUpdate, service: Service) -> SalesPageRead:
    try:
        return SalesPageRead.model_validate(service.update_community_vision(page_type, payload))
    except NotFoundError as exc:
        _handle_sales_page_error(exc)
        raise


@router.patch("/{page_type}/education", response_model=SalesPageRead)
def update_education_section(
    page_type: SalesPageType,
    payload: EducationSectionUpdate,
    service: Service,
) -> SalesPageRead:
    try:
        return SalesPageRead.model_validate(service.update_education_section(page_type, payload))
    except NotFoundError as exc:
        _handle_sales_page_error(exc)
        raise


@router.patch("/{page_type}/visibility", response_model=SalesPageRead)
def update_section_visibility(
    page_type: SalesPageType,
    payload: SectionVisibilityUpdate,
    service: Service,
) -> SalesPageRead:
    try:
        return SalesPageRead.model_validate(service.update_section_visibility(page_type, payload))
    except NotFoundError as exc:
        _handle_sales_page_error(exc)
        raise


@router.patch("/{page_type}/hero", response_model=SalesPageRead)
def update_hero(page_type: SalesPageType, payload: HeroSectionUpdate, service: Service) -> SalesPageRead:
    return SalesPageRead.model_validate(service.update_hero(page_type, payload))


@router.put("/{page_type}/plans", response_model=SalesPageRead)
def update_selected_plans(page_type: SalesPageType, payload: SalesPagePlansUpdate, service: Service) -> SalesPageRead:
    try:
        return SalesPageRead.model_validate(service.update_selected_plans(page_type, payload))
    except (NotFoundError, ValidationError) as exc:
        _handle_sales_page_error(exc)
        raise
