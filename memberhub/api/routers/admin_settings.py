from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from memberhub.api.deps import require_admin
from memberhub.domain.models import DashboardDropdownData, SiteSettingsRead, SiteSettingsUpdate
from memberhub.services.settings_service import SettingsService

router = APIRouter(dependencies=[Depends(require_admin)])


def get_settings_service() -> SettingsService:
    return SettingsService()


Service = Annotated[SettingsService, Depends(get_settings_service)]


@router.get("", response_model=SiteSettingsRead)
def get_settings(service: Service) -> SiteSettingsRead:
    return SiteSettingsRead.model_validate(service.get_settings())


@router.patch("", response_model=SiteSettingsRead)
def update_settings(payload: SiteSettingsUpdate, service: Service) -> SiteSettingsRead:
    return SiteSettingsRead.model_validate(service.update_settings(payload))


@router.get("/dashboard-options", response_model=DashboardDropdownData)
def get_dashboard_options(service: Service) -> DashboardDropdownData:
    return service.get_dashboard_dropdown_data()
