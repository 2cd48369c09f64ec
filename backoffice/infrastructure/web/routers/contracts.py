"""
Contract router.
Lists contracts with their derived state and runs lifecycle transitions.
"""

from datetime import date
from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, Query, status

from backoffice.application.dto.contract_dto import (
    ContractResponseDTO,
    CreateContractRequestDTO,
    PlanAppliedResponseDTO,
    RenewContractRequestDTO,
    RentalLedgerResponseDTO,
)
from backoffice.application.use_cases.contract_use_cases import (
    CancelContractUseCase,
    ContractCommand,
    ContractQuery,
    CreateContractUseCase,
    DeleteContractUseCase,
    EndContractUseCase,
    GetContractUseCase,
    GetRentalLedgerUseCase,
    ListContractsQuery,
    ListContractsUseCase,
    RenewContractCommand,
    RenewContractUseCase,
)
from backoffice.domain.models.contract import ContractType
from backoffice.domain.services.lifecycle_service import EffectiveStatus, LifecycleService
from backoffice.domain.services.rent_ledger_service import RentLedgerService
from backoffice.infrastructure.repositories.document_repository import SQLAlchemyDocumentRepository
from backoffice.infrastructure.web.dependencies import (
    get_lifecycle_service,
    get_rent_ledger,
    get_repository,
    unwrap,
)


router = APIRouter()

Repository = Annotated[SQLAlchemyDocumentRepository, Depends(get_repository)]
Lifecycle = Annotated[LifecycleService, Depends(get_lifecycle_service)]


@router.get("", response_model=List[ContractResponseDTO])
async def list_contracts(
    repository: Repository,
    lifecycle: Lifecycle,
    type: Optional[ContractType] = Query(None, description="rental or sale"),
    effective_status: Optional[EffectiveStatus] = Query(None, description="Derived status filter"),
    client_id: Optional[str] = Query(None),
    as_of: Optional[date] = Query(None, description="Reference date, defaults to today"),
):
    """
    List contracts, newest first.

    - **effective_status**: e.g. `expiring_soon` or `expired_action_required`
    """
    use_case = ListContractsUseCase(repository, lifecycle)
    query = ListContractsQuery(
        as_of=as_of, type=type, effective_status=effective_status, client_id=client_id
    )
    return unwrap(await use_case.execute(query))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ContractResponseDTO)
async def create_contract(
    request: CreateContractRequestDTO,
    repository: Repository,
    lifecycle: Lifecycle,
):
    """
    Sign a new lease or sale.

    The unit is marked rented or sold and the contract is linked to its client.
    """
    use_case = CreateContractUseCase(repository, lifecycle)
    return unwrap(await use_case.execute(request))


@router.get("/{contract_id}", response_model=ContractResponseDTO)
async def get_contract(
    contract_id: str,
    repository: Repository,
    lifecycle: Lifecycle,
    as_of: Optional[date] = Query(None),
):
    use_case = GetContractUseCase(repository, lifecycle)
    return unwrap(await use_case.execute(ContractQuery(contract_id, as_of)))


@router.get("/{contract_id}/ledger", response_model=RentalLedgerResponseDTO)
async def get_rental_ledger(
    contract_id: str,
    repository: Repository,
    rent_ledger: Annotated[RentLedgerService, Depends(get_rent_ledger)],
    as_of: Optional[date] = Query(None),
):
    """Unpaid months, months overdue and expiry text of a lease."""
    use_case = GetRentalLedgerUseCase(repository, rent_ledger)
    return unwrap(await use_case.execute(ContractQuery(contract_id, as_of)))


@router.post("/{contract_id}/renew", status_code=status.HTTP_201_CREATED, response_model=PlanAppliedResponseDTO)
async def renew_contract(
    contract_id: str,
    request: RenewContractRequestDTO,
    repository: Repository,
    lifecycle: Lifecycle,
):
    """
    Renew a lease.

    - **start_date**: defaults to the end date of the renewed lease
    """
    use_case = RenewContractUseCase(repository, lifecycle)
    return unwrap(await use_case.execute(RenewContractCommand(contract_id, request)))


@router.post("/{contract_id}/end", response_model=PlanAppliedResponseDTO)
async def end_contract(
    contract_id: str,
    repository: Repository,
    lifecycle: Lifecycle,
    as_of: Optional[date] = Query(None),
):
    """End a lease today and release its unit."""
    use_case = EndContractUseCase(repository, lifecycle)
    return unwrap(await use_case.execute(ContractCommand(contract_id, as_of)))


@router.post("/{contract_id}/cancel", response_model=PlanAppliedResponseDTO)
async def cancel_contract(
    contract_id: str,
    repository: Repository,
    lifecycle: Lifecycle,
):
    use_case = CancelContractUseCase(repository, lifecycle)
    return unwrap(await use_case.execute(ContractCommand(contract_id)))


@router.delete("/{contract_id}", response_model=PlanAppliedResponseDTO)
async def delete_contract(
    contract_id: str,
    repository: Repository,
    lifecycle: Lifecycle,
):
    """Delete a contract together with its payments."""
    use_case = DeleteContractUseCase(repository, lifecycle)
    return unwrap(await use_case.execute(ContractCommand(contract_id)))
