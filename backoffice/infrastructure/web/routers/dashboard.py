"""
Dashboard router.
"""

from datetime import date
from typing import Annotated, Optional
from fastapi import APIRouter, Depends, Query

from backoffice.application.dto.dashboard_dto import DashboardResponseDTO
from backoffice.application.use_cases.dashboard_use_cases import DashboardQuery, GetDashboardUseCase
from backoffice.config import Settings, get_settings
from backoffice.domain.services.dashboard_service import DashboardService, RevenuePeriod
from backoffice.infrastructure.repositories.document_repository import SQLAlchemyDocumentRepository
from backoffice.infrastructure.web.dependencies import get_dashboard_service, get_repository, unwrap


router = APIRouter()


@router.get("", response_model=DashboardResponseDTO)
async def get_dashboard(
    repository: Annotated[SQLAlchemyDocumentRepository, Depends(get_repository)],
    dashboard: Annotated[DashboardService, Depends(get_dashboard_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    period: RevenuePeriod = Query(RevenuePeriod.THIS_MONTH, description="Revenue window"),
    as_of: Optional[date] = Query(None, description="Reference date, defaults to today"),
):
    """
    Revenue, occupancy and alert lists.

    - **period**: `this_month`, `last_month`, `last_3_months` or `all_time`
    """
    use_case = GetDashboardUseCase(repository, dashboard, settings.default_currency)
    return unwrap(await use_case.execute(DashboardQuery(period, as_of)))
