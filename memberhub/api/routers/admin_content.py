from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from memberhub.api.deps import require_admin
from memberhub.domain.models import ActionResult, AdminContentDetail, AdminContentListItem, ContentStatusRequest
from memberhub.services.content_service import ContentService, NotFoundError

router = APIRouter(dependencies=[Depends(require_admin)])


def get_content_service() -> ContentService:
    return ContentService()


Service = Annotated[ContentService, Depends(get_content_service)]


def _handle_content_error(exc: Exception) -> None:
    if isinstance(exc, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    raise exc


@router.get("", response_model=list[AdminContentListItem])
def list_content(service: Service) -> list[AdminContentListItem]:
    return service.list_admin_content()


@router.get("/by-slug/{slug}", response_model=AdminContentDetail)
def get_content(slug: str, service: Service) -> AdminContentDetail:
    try:
        return service.get_by_slug(slug)
    except NotFoundError as exc:
        _handle_content_error(exc)
        raise


@router.post("/{content_id}/status", response_model=ActionResult)
def toggle_content_status(content_id: str, payload: ContentStatusRequest, service: Service) -> ActionResult:
    try:
        service.toggle_status(content_id, payload.next_status)
    except NotFoundError as exc:
        _handle_content_error(exc)
        raise
    return ActionResult()


@router.delete("/{content_id}", response_model=ActionResult)
def delete_content(content_id: str, service: Service) -> ActionResult:
    try:
        service.delete(content_id)
    except NotFoundError as exc:
        _handle_content_error(exc)
        raise
    return ActionResult()
