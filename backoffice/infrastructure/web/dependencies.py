"""
Shared FastAPI dependencies: repository, domain services and result handling.
"""

from fastapi import Depends, HTTPException

from backoffice.application.use_cases.base_use_case import UseCaseResult
from backoffice.config import Settings, get_settings
from backoffice.domain.services.dashboard_service import DashboardService
from backoffice.domain.services.lifecycle_service import LifecycleService
from backoffice.domain.services.rent_ledger_service import RentLedgerService
from backoffice.domain.services.sale_ledger_service import SaleLedgerService
from backoffice.infrastructure.db.database import get_db
from backoffice.infrastructure.repositories.document_repository import SQLAlchemyDocumentRepository
from backoffice.infrastructure.web.middleware.error_handler import status_for_error_code


def get_repository(session=Depends(get_db)) -> SQLAlchemyDocumentRepository:
    """Dependency to get the document repository."""
    return SQLAlchemyDocumentRepository(session)


def get_rent_ledger(settings: Settings = Depends(get_settings)) -> RentLedgerService:
    return RentLedgerService(overdue_tolerance_dh=settings.overdue_tolerance_dh)


def get_sale_ledger() -> SaleLedgerService:
    return SaleLedgerService()


def get_lifecycle_service(
    settings: Settings = Depends(get_settings),
    rent_ledger: RentLedgerService = Depends(get_rent_ledger),
    sale_ledger: SaleLedgerService = Depends(get_sale_ledger),
) -> LifecycleService:
    return LifecycleService(
        rent_ledger=rent_ledger,
        sale_ledger=sale_ledger,
        expiring_soon_days=settings.expiring_soon_days,
    )


def get_dashboard_service(
    settings: Settings = Depends(get_settings),
    rent_ledger: RentLedgerService = Depends(get_rent_ledger),
    sale_ledger: SaleLedgerService = Depends(get_sale_ledger),
) -> DashboardService:
    return DashboardService(
        rent_ledger=rent_ledger,
        sale_ledger=sale_ledger,
        expiring_window_days=settings.expiring_window_days,
        recently_ended_days=settings.recently_ended_days,
    )


def unwrap(result: UseCaseResult):
    """Return the data of a successful result or raise the matching HTTP error."""
    if result.success:
        return result.data
    if result.error_code == "UNKNOWN_ERROR":
        raise HTTPException(status_code=500, detail=result.error)
    raise HTTPException(
        status_code=status_for_error_code(result.error_code),
        detail={"message": result.error, "error_code": result.error_code},
    )
