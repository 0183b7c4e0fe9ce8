from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from memberhub.api.deps import AdminUser
from memberhub.domain.models import GroupRead, GroupUpdate
from memberhub.services.group_service import GroupService, NotFoundError

router = APIRouter()


def get_group_service() -> GroupService:
    return GroupService()


Service = Annotated[GroupService, Depends(get_group_service)]


@router.put("/{group_id}", response_model=GroupRead)
def update_group(group_id: str, payload: GroupUpdate, admin: AdminUser, service: Service) -> GroupRead:
    try:
        group = service.update_group(group_id, payload, updated_by=admin.id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return GroupRead.model_validate(group)
