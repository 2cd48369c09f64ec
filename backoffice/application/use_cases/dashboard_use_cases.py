"""
Dashboard use case for the application layer.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from backoffice.application.use_cases.base_use_case import QueryUseCase
from backoffice.application.dto.dashboard_dto import DashboardResponseDTO
from backoffice.domain.calendar import today_utc
from backoffice.domain.repositories.document_repository import DocumentRepository
from backoffice.domain.services.dashboard_service import DashboardService, RevenuePeriod


@dataclass
class DashboardQuery:
    period: RevenuePeriod = RevenuePeriod.THIS_MONTH
    as_of: Optional[date] = None


class GetDashboardUseCase(QueryUseCase[DashboardQuery, DashboardResponseDTO]):
    """Builds the dashboard from one snapshot of the store."""

    def __init__(
        self,
        repository: DocumentRepository,
        dashboard: DashboardService,
        currency: str = "MAD"
    ):
        super().__init__()
        self.repository = repository
        self.dashboard = dashboard
        self.currency = currency

    async def _execute_business_logic(self, request: DashboardQuery) -> DashboardResponseDTO:
        summary = self.dashboard.summary(
            contracts=self.repository.list_contracts(),
            payments=self.repository.list_payments(),
            apartments=self.repository.list_apartments(),
            clients=self.repository.list_clients(),
            projects=self.repository.list_projects(),
            period=request.period,
            as_of=request.as_of or today_utc(),
        )
        return DashboardResponseDTO.from_domain(summary, self.currency)
