from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from memberhub.api.deps import require_admin
from memberhub.domain.models import ActionResult, MemberPlanRequest, MemberStatusRequest
from memberhub.services.member_service import MemberService, NotFoundError

router = APIRouter(dependencies=[Depends(require_admin)])


def get_member_service() -> MemberService:
    return MemberService()


Service = Annotated[MemberService, Depends(get_member_service)]


def _handle_member_error(exc: Exception) -> None:
    if isinstance(exc, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    raise exc


@router.post("/{profile_id}/plan", response_model=ActionResult)
def update_member_plan(profile_id: str, payload: MemberPlanRequest, service: Service) -> ActionResult:
    try:
        service.update_member_plan(profile_id, payload.plan_id)
    except NotFoundError as exc:
        _handle_member_error(exc)
        raise
    return ActionResult()


@router.post("/{profile_id}/status", response_model=ActionResult)
def update_member_status(profile_id: str, payload: MemberStatusRequest, service: Service) -> ActionResult:
    try:
        service.update_member_status(profile_id, payload.is_active)
    except NotFoundError as exc:
        _handle_member_error(exc)
        raise
    return ActionResult()
