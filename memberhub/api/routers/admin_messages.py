from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from memberhub.api.deps import AdminUser
from memberhub.domain.models import ActionResult, AdminMessageRequest
from memberhub.services.message_service import MessageError, MessageService, ValidationError

router = APIRouter()


def get_message_service() -> MessageService:
    return MessageService()


Service = Annotated[MessageService, Depends(get_message_service)]


def _handle_message_error(exc: Exception) -> None:
    if isinstance(exc, ValidationError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if isinstance(exc, MessageError):
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    raise exc


@router.post("", response_model=ActionResult)
def send_admin_message(payload: AdminMessageRequest, admin: AdminUser, service: Service) -> ActionResult:
    try:
        service.send_admin_message(admin.id, payload)
    except MessageError as exc:
        _handle_message_error(exc)
        raise
    return ActionResult()
