"""Dashboard service.
Aggregates revenue, occupancy and alert lists over a snapshot of the store.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from backoffice.domain.calendar import add_months, month_start, previous_month_range, today_utc
from backoffice.domain.models.contract import Contract, ContractStatus, ContractType
from backoffice.domain.models.payment import Payment
from backoffice.domain.models.property import Apartment, ApartmentStatus, Client, Project
from backoffice.domain.services.rent_ledger_service import RentLedgerService
from backoffice.domain.services.sale_ledger_service import SaleLedgerService

NOT_AVAILABLE = "N/A"


class RevenuePeriod(str, Enum):
    """Revenue reporting window."""
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    LAST_3_MONTHS = "last_3_months"
    ALL_TIME = "all_time"


def period_range(period: RevenuePeriod, as_of: date) -> Tuple[Optional[date], Optional[date]]:
    """Inclusive (start, end) bounds of a revenue window; None means unbounded."""
    if period == RevenuePeriod.LAST_MONTH:
        return previous_month_range(as_of)
    if period == RevenuePeriod.LAST_3_MONTHS:
        return add_months(month_start(as_of), -2), as_of
    if period == RevenuePeriod.ALL_TIME:
        return None, None
    return month_start(as_of), as_of


@dataclass(frozen=True)
class Revenue:
    period: RevenuePeriod
    rental_dh: float
    sale_dh: float

    @property
    def total_dh(self) -> float:
        return self.rental_dh + self.sale_dh


@dataclass(frozen=True)
class ContractAlert:
    """One row of a dashboard list, with names resolved for display."""

    contract_id: str
    client_name: str
    unit_name: str
    months_overdue: int = 0
    total_paid: float = 0.0
    remaining: float = 0.0
    end_date: Optional[date] = None


@dataclass(frozen=True)
class ProjectOccupancy:
    project_id: str
    project_name: str
    total_units: int
    rented: int
    sold: int


@dataclass
class DashboardSummary:
    as_of: date
    revenue: Revenue
    occupancy_rate: float
    rented_units: int
    sold_units: int
    overdue_rentals: List[ContractAlert] = field(default_factory=list)
    overdue_buckets: Dict[str, List[ContractAlert]] = field(default_factory=dict)
    unpaid_expired_rentals: List[ContractAlert] = field(default_factory=list)
    unsettled_sales: List[ContractAlert] = field(default_factory=list)
    expiring_soon: List[ContractAlert] = field(default_factory=list)
    recently_ended: List[ContractAlert] = field(default_factory=list)
    projects: List[ProjectOccupancy] = field(default_factory=list)

    @property
    def alert_count(self) -> int:
        return len(self.overdue_rentals) + len(self.unpaid_expired_rentals) + len(self.unsettled_sales)


class DashboardService:
    """
    Domain service for the back-office dashboard.

    The three alert lists are disjoint: a lease whose end date has passed is an
    expired lease, not an overdue one, even while its stored status is still active.
    """

    def __init__(
        self,
        rent_ledger: Optional[RentLedgerService] = None,
        sale_ledger: Optional[SaleLedgerService] = None,
        expiring_window_days: int = 60,
        recently_ended_days: int = 30
    ):
        self.rent_ledger = rent_ledger or RentLedgerService()
        self.sale_ledger = sale_ledger or SaleLedgerService()
        self.expiring_window_days = expiring_window_days
        self.recently_ended_days = recently_ended_days

    def revenue(
        self,
        payments: Iterable[Payment],
        contracts: Iterable[Contract],
        period: RevenuePeriod,
        as_of: Optional[date] = None
    ) -> Revenue:
        """Paid amounts in a window, split by the type of their contract."""
        as_of = as_of or today_utc()
        start, end = period_range(period, as_of)
        types = {contract.id: contract.type for contract in contracts}

        rental = sale = 0.0
        for payment in payments:
            if not payment.is_paid or payment.payment_date is None:
                continue
            if start is not None and payment.payment_date < start:
                continue
            if end is not None and payment.payment_date > end:
                continue
            contract_type = types.get(payment.contract_id)
            if contract_type == ContractType.RENTAL:
                rental += payment.amount_dh
            elif contract_type == ContractType.SALE:
                sale += payment.amount_dh
        return Revenue(period=period, rental_dh=rental, sale_dh=sale)

    def occupancy_rate(self, apartments: Iterable[Apartment]) -> float:
        """Rented units as a percentage of units that can be rented."""
        apartments = list(apartments)
        rentable = [
            a for a in apartments
            if a.status not in (ApartmentStatus.SOLD, ApartmentStatus.MAINTENANCE)
        ]
        if not rentable:
            return 0.0
        rented = sum(1 for a in apartments if a.status == ApartmentStatus.RENTED)
        return rented / len(rentable) * 100

    def overdue_rentals(
        self,
        contracts: Iterable[Contract],
        payments: List[Payment],
        clients: Iterable[Client],
        apartments: Iterable[Apartment],
        as_of: Optional[date] = None
    ) -> List[ContractAlert]:
        """Running leases behind on rent."""
        as_of = as_of or today_utc()
        names = _NameIndex(clients, apartments)
        alerts = []
        for contract in contracts:
            if not contract.is_rental or contract.status != ContractStatus.ACTIVE:
                continue
            if contract.end_date is not None and contract.end_date < as_of:
                continue
            months = self.rent_ledger.months_overdue(contract, payments, as_of)
            if months > 0:
                alerts.append(names.alert(contract, months_overdue=months))
        return alerts

    @staticmethod
    def overdue_buckets(alerts: Iterable[ContractAlert]) -> Dict[str, List[ContractAlert]]:
        buckets: Dict[str, List[ContractAlert]] = {"1": [], "2": [], "3+": []}
        for alert in alerts:
            if alert.months_overdue >= 3:
                buckets["3+"].append(alert)
            elif alert.months_overdue == 2:
                buckets["2"].append(alert)
            elif alert.months_overdue == 1:
                buckets["1"].append(alert)
        return buckets

    def unpaid_expired_rentals(
        self,
        contracts: Iterable[Contract],
        payments: List[Payment],
        clients: Iterable[Client],
        apartments: Iterable[Apartment],
        as_of: Optional[date] = None
    ) -> List[ContractAlert]:
        """Ended or lapsed leases still carrying arrears."""
        as_of = as_of or today_utc()
        names = _NameIndex(clients, apartments)
        alerts = []
        for contract in contracts:
            if not contract.is_rental:
                continue
            lapsed = (
                contract.status == ContractStatus.ACTIVE
                and contract.end_date is not None
                and contract.end_date < as_of
            )
            if contract.status != ContractStatus.ENDED and not lapsed:
                continue
            months = self.rent_ledger.months_overdue(contract, payments, as_of)
            if months > 0:
                alerts.append(names.alert(contract, months_overdue=months))
        return alerts

    def unsettled_sales(
        self,
        contracts: Iterable[Contract],
        payments: List[Payment],
        clients: Iterable[Client],
        apartments: Iterable[Apartment]
    ) -> List[ContractAlert]:
        names = _NameIndex(clients, apartments)
        alerts = []
        for contract in contracts:
            if not contract.is_sale or contract.status == ContractStatus.SALE_CANCELED:
                continue
            settlement = self.sale_ledger.sale_settlement(contract, payments)
            if settlement.remaining > 0:
                alerts.append(names.alert(
                    contract,
                    total_paid=settlement.total_paid,
                    remaining=settlement.remaining,
                ))
        return alerts

    def expiring_soon(
        self,
        contracts: Iterable[Contract],
        clients: Iterable[Client],
        apartments: Iterable[Apartment],
        as_of: Optional[date] = None
    ) -> List[ContractAlert]:
        """Active leases ending within the expiring window, soonest first."""
        as_of = as_of or today_utc()
        horizon = as_of + timedelta(days=self.expiring_window_days)
        names = _NameIndex(clients, apartments)
        selected = [
            c for c in contracts
            if c.is_rental and c.status == ContractStatus.ACTIVE
            and c.end_date is not None and as_of <= c.end_date <= horizon
        ]
        selected.sort(key=lambda c: c.end_date)
        return [names.alert(c) for c in selected]

    def recently_ended(
        self,
        contracts: Iterable[Contract],
        clients: Iterable[Client],
        apartments: Iterable[Apartment],
        as_of: Optional[date] = None
    ) -> List[ContractAlert]:
        as_of = as_of or today_utc()
        window_start = as_of - timedelta(days=self.recently_ended_days)
        window_end = as_of + timedelta(days=1)
        names = _NameIndex(clients, apartments)
        return [
            names.alert(c) for c in contracts
            if c.is_rental and c.status == ContractStatus.ENDED
            and c.end_date is not None and window_start <= c.end_date <= window_end
        ]

    def project_occupancy(
        self,
        projects: Iterable[Project],
        apartments: Iterable[Apartment]
    ) -> List[ProjectOccupancy]:
        apartments = list(apartments)
        rows = []
        for project in projects:
            units = [a for a in apartments if a.project_id == project.id]
            rows.append(ProjectOccupancy(
                project_id=project.id,
                project_name=project.project_name or NOT_AVAILABLE,
                total_units=len(units),
                rented=sum(1 for a in units if a.status == ApartmentStatus.RENTED),
                sold=sum(1 for a in units if a.status == ApartmentStatus.SOLD),
            ))
        return rows

    def summary(
        self,
        contracts: List[Contract],
        payments: List[Payment],
        apartments: List[Apartment],
        clients: List[Client],
        projects: List[Project],
        period: RevenuePeriod = RevenuePeriod.THIS_MONTH,
        as_of: Optional[date] = None
    ) -> DashboardSummary:
        """Every dashboard figure computed against one as_of date."""
        as_of = as_of or today_utc()
        overdue = self.overdue_rentals(contracts, payments, clients, apartments, as_of)
        return DashboardSummary(
            as_of=as_of,
            revenue=self.revenue(payments, contracts, period, as_of),
            occupancy_rate=self.occupancy_rate(apartments),
            rented_units=sum(1 for a in apartments if a.status == ApartmentStatus.RENTED),
            sold_units=sum(1 for a in apartments if a.status == ApartmentStatus.SOLD),
            overdue_rentals=overdue,
            overdue_buckets=self.overdue_buckets(overdue),
            unpaid_expired_rentals=self.unpaid_expired_rentals(
                contracts, payments, clients, apartments, as_of
            ),
            unsettled_sales=self.unsettled_sales(contracts, payments, clients, apartments),
            expiring_soon=self.expiring_soon(contracts, clients, apartments, as_of),
            recently_ended=self.recently_ended(contracts, clients, apartments, as_of),
            projects=self.project_occupancy(projects, apartments),
        )


class _NameIndex:
    """Resolves client and unit names, tolerating dangling references."""

    def __init__(self, clients: Iterable[Client], apartments: Iterable[Apartment]):
        self.clients = {client.id: client for client in clients}
        self.apartments = {apartment.id: apartment for apartment in apartments}

    def client_name(self, client_id: str) -> str:
        client = self.clients.get(client_id)
        return client.display_name if client else NOT_AVAILABLE

    def unit_name(self, apartment_id: str) -> str:
        apartment = self.apartments.get(apartment_id)
        return apartment.name if apartment and apartment.name else NOT_AVAILABLE

    def alert(self, contract: Contract, **figures) -> ContractAlert:
        return ContractAlert(
            contract_id=contract.id,
            client_name=self.client_name(contract.client_id),
            unit_name=self.unit_name(contract.apartment_id),
            end_date=contract.end_date,
            **figures,
        )
