from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from memberhub.domain.models import PublicSalesPageRead
from memberhub.services.sales_page_service import SalesPageService

router = APIRouter()


def get_sales_page_service() -> SalesPageService:
    return SalesPageService()


Service = Annotated[SalesPageService, Depends(get_sales_page_service)]


@router.get("/sales-page", response_model=PublicSalesPageRead)
def get_public_sales_page(service: Service) -> PublicSalesPageRead:
    return service.get_public_page()
