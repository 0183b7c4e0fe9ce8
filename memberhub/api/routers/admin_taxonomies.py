from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from memberhub.api.deps import require_admin
from memberhub.domain.models import ActionResult, TaxonomyCreate, TaxonomyRead, TaxonomyType, TaxonomyUpdate
from memberhub.services.taxonomy_service import NotFoundError, TaxonomyService

router = APIRouter(dependencies=[Depends(require_admin)])


def get_taxonomy_service() -> TaxonomyService:
    return TaxonomyService()


Service = Annotated[TaxonomyService, Depends(get_taxonomy_service)]


def _handle_taxonomy_error(exc: Exception) -> None:
    if isinstance(exc, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    raise exc


@router.get("", response_model=list[TaxonomyRead])
def list_taxonomies(
    taxonomy_type: Annotated[TaxonomyType, Query(alias="type")],
    service: Service,
) -> list[TaxonomyRead]:
    return [TaxonomyRead.model_validate(item) for item in service.list_by_type(taxonomy_type)]


@router.post("", response_model=TaxonomyRead, status_code=status.HTTP_201_CREATED)
def create_taxonomy(payload: TaxonomyCreate, service: Service) -> TaxonomyRead:
    return TaxonomyRead.model_validate(service.create(payload))


@router.put("/{taxonomy_id}", response_model=TaxonomyRead)
def update_taxonomy(taxonomy_id: str, payload: TaxonomyUpdate, service: Service) -> TaxonomyRead:
    try:
        return TaxonomyRead.model_validate(service.update(taxonomy_id, payload))
    except NotFoundError as exc:
        _handle_taxonomy_error(exc)
        raise


@router.delete("/{taxonomy_id}", response_model=ActionResult)
def delete_taxonomy(taxonomy_id: str, service: Service) -> ActionResult:
    try:
        service.delete(taxonomy_id)
    except NotFoundError as exc:
        _handle_taxonomy_error(exc)
        raise
    return ActionResult()
