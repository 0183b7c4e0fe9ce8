from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from memberhub.api.deps import AdminUser, require_admin
from memberhub.domain.models import SiteUpdateCreate, SiteUpdateRead
from memberhub.services.site_update_service import SiteUpdateService

router = APIRouter()


def get_site_update_service() -> SiteUpdateService:
    return SiteUpdateService()


Service = Annotated[SiteUpdateService, Depends(get_site_update_service)]


@router.get("", response_model=list[SiteUpdateRead], dependencies=[Depends(require_admin)])
def list_site_updates(service: Service) -> list[SiteUpdateRead]:
    return [SiteUpdateRead.model_validate(item) for item in service.list_all()]


@router.post("", response_model=SiteUpdateRead, status_code=status.HTTP_201_CREATED)
def create_site_update(payload: SiteUpdateCreate, admin: AdminUser, service: Service) -> SiteUpdateRead:
    return SiteUpdateRead.model_validate(service.create(admin.id, payload))
