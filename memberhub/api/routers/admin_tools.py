from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from memberhub.api.deps import require_admin
from memberhub.domain.models import ActionResult, AdminToolRead, ToolPayload
from memberhub.services.tool_service import NotFoundError, ToolService, ValidationError

router = APIRouter(dependencies=[Depends(require_admin)])


def get_tool_service() -> ToolService:
    return ToolService()


Service = Annotated[ToolService, Depends(get_tool_service)]


def _handle_tool_error(exc: Exception) -> None:
    if isinstance(exc, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, ValidationError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    raise exc


@router.get("", response_model=list[AdminToolRead])
def list_tools(service: Service) -> list[AdminToolRead]:
    return service.list_tools()


@router.post("", response_model=AdminToolRead, status_code=status.HTTP_201_CREATED)
def create_tool(payload: ToolPayload, service: Service) -> AdminToolRead:
    try:
        return service.create_tool(payload)
    except ValidationError as exc:
        _handle_tool_error(exc)
        raise


@router.put("/{tool_id}", response_model=AdminToolRead)
def update_tool(tool_id: str, payload: ToolPayload, service: Service) -> AdminToolRead:
    try:
        return service.update_tool(tool_id, payload)
    except (NotFoundError, ValidationError) as exc:
        _handle_tool_error(exc)
        raise


@router.delete("/{tool_id}", response_model=ActionResult)
def delete_tool(tool_id: str, service: Service) -> ActionResult:
    try:
        service.delete_tool(tool_id)
    except NotFoundError as exc:
        _handle_tool_error(exc)
        raise
    return ActionResult()
