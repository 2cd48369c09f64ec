"""
Domain services for the property back office.
"""

from .rent_ledger_service import RentLedgerService
from .sale_ledger_service import SaleLedgerService, SaleSettlement, SettlementStatus
from .lifecycle_service import EffectiveStatus, LifecycleService, RenewalTerms
from .dashboard_service import (
    ContractAlert,
    DashboardService,
    DashboardSummary,
    Revenue,
    RevenuePeriod,
)

__all__ = [
    "RentLedgerService",
    "SaleLedgerService",
    "SaleSettlement",
    "SettlementStatus",
    "EffectiveStatus",
    "LifecycleService",
    "RenewalTerms",
    "ContractAlert",
    "DashboardService",
    "DashboardSummary",
    "Revenue",
    "RevenuePeriod",
]
