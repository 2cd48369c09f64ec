"""
Payment router.
Handles payment entry and sale settlement.
"""

from datetime import date
from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, Query, status

from backoffice.application.dto.payment_dto import (
    PayableContractResponseDTO,
    PaymentResponseDTO,
    RecordPaymentRequestDTO,
    SaleSettlementResponseDTO,
    UpdatePaymentStatusRequestDTO,
)
from backoffice.application.use_cases.contract_use_cases import ContractQuery
from backoffice.application.use_cases.payment_use_cases import (
    GetSaleSettlementUseCase,
    ListPayableContractsUseCase,
    ListPaymentsQuery,
    ListPaymentsUseCase,
    PayableContractsQuery,
    PaymentStatusCommand,
    RecordPaymentUseCase,
    UpdatePaymentStatusUseCase,
)
from backoffice.domain.models.payment import PaymentStatus
from backoffice.domain.services.lifecycle_service import LifecycleService
from backoffice.domain.services.rent_ledger_service import RentLedgerService
from backoffice.domain.services.sale_ledger_service import SaleLedgerService
from backoffice.infrastructure.repositories.document_repository import SQLAlchemyDocumentRepository
from backoffice.infrastructure.web.dependencies import (
    get_lifecycle_service,
    get_rent_ledger,
    get_repository,
    get_sale_ledger,
    unwrap,
)


router = APIRouter()

Repository = Annotated[SQLAlchemyDocumentRepository, Depends(get_repository)]
SaleLedger = Annotated[SaleLedgerService, Depends(get_sale_ledger)]


@router.get("", response_model=List[PaymentResponseDTO])
async def list_payments(
    repository: Repository,
    contract_id: Optional[str] = Query(None),
    client_id: Optional[str] = Query(None),
):
    use_case = ListPaymentsUseCase(repository)
    return unwrap(await use_case.execute(ListPaymentsQuery(contract_id, client_id)))


@router.get("/payable-contracts", response_model=List[PayableContractResponseDTO])
async def list_payable_contracts(
    repository: Repository,
    lifecycle: Annotated[LifecycleService, Depends(get_lifecycle_service)],
    as_of: Optional[date] = Query(None),
):
    """Leases with unpaid months and sales not yet settled, sorted by client name."""
    use_case = ListPayableContractsUseCase(repository, lifecycle)
    return unwrap(await use_case.execute(PayableContractsQuery(as_of)))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=PaymentResponseDTO)
async def record_payment(
    request: RecordPaymentRequestDTO,
    repository: Repository,
    rent_ledger: Annotated[RentLedgerService, Depends(get_rent_ledger)],
    sale_ledger: SaleLedger,
):
    """
    Record a payment.

    - **payment_for**: e.g. `Loyer Mars 2024`; defaults to the oldest unpaid month
    """
    use_case = RecordPaymentUseCase(repository, rent_ledger, sale_ledger)
    return unwrap(await use_case.execute(request))


@router.patch("/{payment_id}/status", response_model=PaymentResponseDTO)
async def update_payment_status(
    payment_id: str,
    request: UpdatePaymentStatusRequestDTO,
    repository: Repository,
    sale_ledger: SaleLedger,
):
    """Cancel a payment or flag it late."""
    use_case = UpdatePaymentStatusUseCase(repository, sale_ledger)
    command = PaymentStatusCommand(payment_id, PaymentStatus(request.status))
    return unwrap(await use_case.execute(command))


@router.get("/sales/{contract_id}/settlement", response_model=SaleSettlementResponseDTO)
async def get_sale_settlement(
    contract_id: str,
    repository: Repository,
    sale_ledger: SaleLedger,
):
    use_case = GetSaleSettlementUseCase(repository, sale_ledger)
    return unwrap(await use_case.execute(ContractQuery(contract_id)))
