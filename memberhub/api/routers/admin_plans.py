from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from memberhub.api.deps import require_admin
from memberhub.domain.models import (
    ActionResult,
    PlanActiveRequest,
    PlanPayload,
    PlanPermissionRead,
    PlanPermissionToggleRequest,
    PlanRead,
)
from memberhub.domain.permissions import PLAN_PERMISSION_KEYS
from memberhub.services.plan_service import ConflictError, NotFoundError, PlanService

router = APIRouter(dependencies=[Depends(require_admin)])


def get_plan_service() -> PlanService:
    return PlanService()


Service = Annotated[PlanService, Depends(get_plan_service)]


def _handle_plan_error(exc: Exception) -> None:
    if isinstance(exc, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, ConflictError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    raise exc


@router.get("", response_model=list[PlanRead])
def list_plans(service: Service) -> list[PlanRead]:
    return [PlanRead.model_validate(item) for item in service.list_plans()]


@router.post("", response_model=PlanRead, status_code=status.HTTP_201_CREATED)
def create_plan(payload: PlanPayload, service: Service) -> PlanRead:
    try:
        return PlanRead.model_validate(service.create_plan(payload))
    except ConflictError as exc:
        _handle_plan_error(exc)
        raise


@router.put("/{plan_id}", response_model=PlanRead)
def update_plan(plan_id: str, payload: PlanPayload, service: Service) -> PlanRead:
    try:
        return PlanRead.model_validate(service.update_plan(plan_id, payload))
    except (NotFoundError, ConflictError) as exc:
        _handle_plan_error(exc)
        raise


@router.post("/{plan_id}/active", response_model=PlanRead)
def set_plan_active(plan_id: str, payload: PlanActiveRequest, service: Service) -> PlanRead:
    try:
        return PlanRead.model_validate(service.set_active(plan_id, payload.active))
    except NotFoundError as exc:
        _handle_plan_error(exc)
        raise


@router.post("/{plan_id}/duplicate", response_model=PlanRead, status_code=status.HTTP_201_CREATED)
def duplicate_plan(plan_id: str, service: Service) -> PlanRead:
    try:
        return PlanRead.model_validate(service.duplicate_plan(plan_id))
    except (NotFoundError, ConflictError) as exc:
        _handle_plan_error(exc)
        raise


@router.delete("/{plan_id}", response_model=ActionResult)
def delete_plan(plan_id: str, service: Service) -> ActionResult:
    try:
        service.delete_plan(plan_id)
    except (NotFoundError, ConflictError) as exc:
        _handle_plan_error(exc)
        raise
    return ActionResult()


@router.get("/{plan_id}/permissions", response_model=list[PlanPermissionRead])
def list_plan_permissions(plan_id: str, service: Service) -> list[PlanPermissionRead]:
    try:
        rows = service.list_permissions(plan_id)
    except NotFoundError as exc:
        _handle_plan_error(exc)
        raise
    return [PlanPermissionRead.model_validate(row) for row in rows]


@router.put("/{plan_id}/permissions/{permission_key}", response_model=PlanPermissionRead)
def set_plan_permission(
    plan_id: str,
    permission_key: str,
    payload: PlanPermissionToggleRequest,
    service: Service,
) -> PlanPermissionRead:
    if permission_key not in PLAN_PERMISSION_KEYS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown permission key")
    try:
        row = service.set_permission(plan_id, permission_key, payload.enabled)
    except NotFoundError as exc:
        _handle_plan_error(exc)
        raise
    return PlanPermissionRead.model_validate(row)
