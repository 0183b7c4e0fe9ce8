from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from memberhub.api.deps import AuthenticatedUser
from memberhub.domain.models import (
    ActionResult,
    MemberShellRead,
    MemberSiteUpdateRead,
    MemberToolRead,
    PlanPermissionsRead,
)
from memberhub.services.plan_permission_service import PlanPermissionService
from memberhub.services.shell_service import ShellService
from memberhub.services.site_update_service import NotFoundError, SiteUpdateService
from memberhub.services.tool_service import ToolService

router = APIRouter()


def get_shell_service() -> ShellService:
    return ShellService()


def get_plan_permission_service() -> PlanPermissionService:
    return PlanPermissionService()


def get_tool_service() -> ToolService:
    return ToolService()


def get_site_update_service() -> SiteUpdateService:
    return SiteUpdateService()


ShellSvc = Annotated[ShellService, Depends(get_shell_service)]
PermissionSvc = Annotated[PlanPermissionService, Depends(get_plan_permission_service)]
ToolSvc = Annotated[ToolService, Depends(get_tool_service)]
SiteUpdateSvc = Annotated[SiteUpdateService, Depends(get_site_update_service)]


@router.get("/shell", response_model=MemberShellRead)
def get_member_shell(user: AuthenticatedUser, service: ShellSvc) -> MemberShellRead:
    return service.get_member_shell(user)


@router.get("/permissions", response_model=PlanPermissionsRead)
def get_plan_permissions(user: AuthenticatedUser, service: PermissionSvc) -> PlanPermissionsRead:
    return PlanPermissionsRead(**service.resolve(user.id))


@router.get("/tools", response_model=list[MemberToolRead])
def list_member_tools(user: AuthenticatedUser, service: ToolSvc) -> list[MemberToolRead]:
    return service.list_member_tools(user.id)


@router.get("/site-updates", response_model=list[MemberSiteUpdateRead])
def list_site_updates(user: AuthenticatedUser, service: SiteUpdateSvc) -> list[MemberSiteUpdateRead]:
    return service.list_for_member(user.id)


@router.post("/site-updates/read-all", response_model=ActionResult)
def mark_all_site_updates_read(user: AuthenticatedUser, service: SiteUpdateSvc) -> ActionResult:
    service.mark_all_read(user.id)
    return ActionResult()


@router.post("/site-updates/{site_update_id}/read", response_model=ActionResult)
def mark_site_update_read(site_update_id: str, user: AuthenticatedUser, service: SiteUpdateSvc) -> ActionResult:
    try:
        service.mark_read(user.id, site_update_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ActionResult()
