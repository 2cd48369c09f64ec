"""
Dashboard DTOs for the application layer.
"""

from typing import Dict, List, Optional
from datetime import date
from pydantic import Field

from backoffice.application.dto.base_dto import BaseDTO
from backoffice.domain.services.dashboard_service import (
    ContractAlert,
    DashboardSummary,
    ProjectOccupancy,
)


class ContractAlertDTO(BaseDTO):
    contract_id: str
    client_name: str
    unit_name: str
    months_overdue: int = 0
    total_paid: float = 0.0
    remaining: float = 0.0
    end_date: Optional[date] = None

    @classmethod
    def from_domain(cls, alert: ContractAlert) -> "ContractAlertDTO":
        return cls(
            contract_id=alert.contract_id,
            client_name=alert.client_name,
            unit_name=alert.unit_name,
            months_overdue=alert.months_overdue,
            total_paid=alert.total_paid,
            remaining=alert.remaining,
            end_date=alert.end_date,
        )


class RevenueDTO(BaseDTO):
    period: str
    rental_dh: float
    sale_dh: float
    total_dh: float


class ProjectOccupancyDTO(BaseDTO):
    project_id: str
    project_name: str
    total_units: int
    rented: int
    sold: int

    @classmethod
    def from_domain(cls, row: ProjectOccupancy) -> "ProjectOccupancyDTO":
        return cls(
            project_id=row.project_id,
            project_name=row.project_name,
            total_units=row.total_units,
            rented=row.rented,
            sold=row.sold,
        )


class DashboardResponseDTO(BaseDTO):
    """Every dashboard figure for one date."""

    as_of: date
    currency: str = Field(default="MAD")
    revenue: RevenueDTO
    occupancy_rate: float = Field(description="Percentage of rentable units that are rented")
    rented_units: int
    sold_units: int
    alert_count: int
    overdue_rentals: List[ContractAlertDTO]
    overdue_buckets: Dict[str, List[ContractAlertDTO]]
    unpaid_expired_rentals: List[ContractAlertDTO]
    unsettled_sales: List[ContractAlertDTO]
    expiring_soon: List[ContractAlertDTO]
    recently_ended: List[ContractAlertDTO]
    projects: List[ProjectOccupancyDTO]

    @classmethod
    def from_domain(cls, summary: DashboardSummary, currency: str = "MAD") -> "DashboardResponseDTO":
        def alerts(rows):
            return [ContractAlertDTO.from_domain(row) for row in rows]

        return cls(
            as_of=summary.as_of,
            currency=currency,
            revenue=RevenueDTO(
                period=summary.revenue.period.value,
                rental_dh=summary.revenue.rental_dh,
                sale_dh=summary.revenue.sale_dh,
                total_dh=summary.revenue.total_dh,
            ),
            occupancy_rate=round(summary.occupancy_rate, 1),
            rented_units=summary.rented_units,
            sold_units=summary.sold_units,
            alert_count=summary.alert_count,
            overdue_rentals=alerts(summary.overdue_rentals),
            overdue_buckets={key: alerts(rows) for key, rows in summary.overdue_buckets.items()},
            unpaid_expired_rentals=alerts(summary.unpaid_expired_rentals),
            unsettled_sales=alerts(summary.unsettled_sales),
            expiring_soon=alerts(summary.expiring_soon),
            recently_ended=alerts(summary.recently_ended),
            projects=[ProjectOccupancyDTO.from_domain(row) for row in summary.projects],
        )
