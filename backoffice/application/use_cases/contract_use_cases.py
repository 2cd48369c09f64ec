"""
Contract use cases for the application layer.
Lists contracts with derived state and runs lifecycle transitions.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

from backoffice.application.use_cases.base_use_case import CommandUseCase, QueryUseCase
from backoffice.application.dto.contract_dto import (
    ContractResponseDTO,
    CreateContractRequestDTO,
    PlanAppliedResponseDTO,
    RenewContractRequestDTO,
    RentalLedgerResponseDTO,
)
from backoffice.domain.calendar import today_utc
from backoffice.domain.models.base import EntityNotFoundError
from backoffice.domain.models.contract import Contract, ContractType
from backoffice.domain.models.payment import Payment
from backoffice.domain.models.property import Apartment, Client
from backoffice.domain.repositories.document_repository import DocumentRepository
from backoffice.domain.services.lifecycle_service import (
    EffectiveStatus,
    LifecycleService,
    RenewalTerms,
)
from backoffice.domain.services.rent_ledger_service import RentLedgerService


@dataclass
class ContractQuery:
    contract_id: str
    as_of: Optional[date] = None


@dataclass
class ListContractsQuery:
    as_of: Optional[date] = None
    type: Optional[ContractType] = None
    effective_status: Optional[EffectiveStatus] = None
    client_id: Optional[str] = None


@dataclass
class ContractCommand:
    contract_id: str
    as_of: Optional[date] = None


@dataclass
class RenewContractCommand:
    contract_id: str
    terms: RenewContractRequestDTO
    new_contract_id: Optional[str] = None


def load_contract(repository: DocumentRepository, contract_id: str) -> Contract:
    contract = repository.get_contract(contract_id)
    if contract is None:
        raise EntityNotFoundError("Contract", contract_id)
    return contract


def contract_to_response(
    contract: Contract,
    lifecycle: LifecycleService,
    as_of: date,
    clients: Dict[Optional[str], Client],
    apartments: Dict[Optional[str], Apartment],
) -> ContractResponseDTO:
    """Attach the derived status, expiry text and display names to a contract."""
    effective = lifecycle.effective_status(contract, as_of)
    client = clients.get(contract.client_id)
    apartment = apartments.get(contract.apartment_id)
    return ContractResponseDTO.from_domain(
        contract,
        effective_status=effective.value,
        effective_label=effective.label,
        months_left=lifecycle.rent_ledger.months_left(contract, as_of) if contract.is_rental else None,
        duration_text=lifecycle.rent_ledger.render_duration_text(contract, as_of),
        client_name=client.display_name if client else "N/A",
        unit_name=apartment.name if apartment and apartment.name else "N/A",
    )


class ListContractsUseCase(QueryUseCase[ListContractsQuery, List[ContractResponseDTO]]):
    """Use case for listing contracts with their effective status."""

    def __init__(self, repository: DocumentRepository, lifecycle: LifecycleService):
        super().__init__()
        self.repository = repository
        self.lifecycle = lifecycle

    async def _execute_business_logic(self, request: ListContractsQuery) -> List[ContractResponseDTO]:
        as_of = request.as_of or today_utc()
        clients = {c.id: c for c in self.repository.list_clients()}
        apartments = {a.id: a for a in self.repository.list_apartments()}

        contracts = self.repository.list_contracts()
        if request.type is not None:
            contracts = [c for c in contracts if c.type == request.type]
        if request.client_id is not None:
            contracts = [c for c in contracts if c.client_id == request.client_id]
        if request.effective_status is not None:
            contracts = [
                c for c in contracts
                if self.lifecycle.effective_status(c, as_of) == request.effective_status
            ]

        contracts.sort(key=lambda c: c.start_date or date.min, reverse=True)
        return [
            contract_to_response(c, self.lifecycle, as_of, clients, apartments)
            for c in contracts
        ]


class GetContractUseCase(QueryUseCase[ContractQuery, ContractResponseDTO]):
    def __init__(self, repository: DocumentRepository, lifecycle: LifecycleService):
        super().__init__()
        self.repository = repository
        self.lifecycle = lifecycle

    async def _execute_business_logic(self, request: ContractQuery) -> ContractResponseDTO:
        contract = load_contract(self.repository, request.contract_id)
        client = self.repository.get_client(contract.client_id)
        apartment = self.repository.get_apartment(contract.apartment_id)
        return contract_to_response(
            contract,
            self.lifecycle,
            request.as_of or today_utc(),
            {client.id: client} if client else {},
            {apartment.id: apartment} if apartment else {},
        )


class GetRentalLedgerUseCase(QueryUseCase[ContractQuery, RentalLedgerResponseDTO]):
    """Use case for the arrears figures of one lease."""

    def __init__(self, repository: DocumentRepository, rent_ledger: RentLedgerService):
        super().__init__()
        self.repository = repository
        self.rent_ledger = rent_ledger

    async def _execute_business_logic(self, request: ContractQuery) -> RentalLedgerResponseDTO:
        as_of = request.as_of or today_utc()
        contract = load_contract(self.repository, request.contract_id)
        payments = self._contract_payments(contract.id)
        ledger = self.rent_ledger.rental_ledger(contract, payments, as_of)
        return RentalLedgerResponseDTO(as_of=as_of, **ledger)

    def _contract_payments(self, contract_id: str) -> List[Payment]:
        return [p for p in self.repository.list_payments() if p.contract_id == contract_id]


class CreateContractUseCase(CommandUseCase[CreateContractRequestDTO, ContractResponseDTO]):
    """Use case for signing a new lease or sale."""

    def __init__(self, repository: DocumentRepository, lifecycle: LifecycleService):
        super().__init__()
        self.repository = repository
        self.lifecycle = lifecycle

    async def _execute_command_logic(self, request: CreateContractRequestDTO) -> ContractResponseDTO:
        client = self.repository.get_client(request.client_id)
        if client is None:
            raise EntityNotFoundError("Client", request.client_id)
        apartment = self.repository.get_apartment(request.apartment_id)
        if apartment is None:
            raise EntityNotFoundError("Apartment", request.apartment_id)

        if request.type == ContractType.RENTAL:
            contract = Contract.create_rental(
                client_id=request.client_id,
                apartment_id=request.apartment_id,
                project_id=request.project_id,
                amount_dh=request.amount_dh,
                start_date=request.start_date,
                duration_months=request.duration_months,
                notes=request.notes,
            )
        else:
            contract = Contract.create_sale(
                client_id=request.client_id,
                apartment_id=request.apartment_id,
                project_id=request.project_id,
                amount_dh=request.amount_dh,
                start_date=request.start_date,
                notes=request.notes,
            )

        initial_payment = None
        if request.initial_payment_dh:
            initial_payment = Payment(
                amount_dh=request.initial_payment_dh,
                payment_date=request.start_date,
                payment_for=request.initial_payment_for or (
                    "Caution" if contract.is_rental else "Avance"
                ),
            )

        plan = self._require_plan(self.lifecycle.plan_create_contract(contract, initial_payment))
        self.repository.apply_plan(plan)

        return contract_to_response(
            plan.contract,
            self.lifecycle,
            today_utc(),
            {client.id: client},
            {apartment.id: apartment},
        )


class RenewContractUseCase(CommandUseCase[RenewContractCommand, PlanAppliedResponseDTO]):
    """Use case for renewing a lease into a successor contract."""

    def __init__(self, repository: DocumentRepository, lifecycle: LifecycleService):
        super().__init__()
        self.repository = repository
        self.lifecycle = lifecycle

    async def _execute_command_logic(self, request: RenewContractCommand) -> PlanAppliedResponseDTO:
        contract = load_contract(self.repository, request.contract_id)
        terms = RenewalTerms(
            amount_dh=request.terms.amount_dh,
            duration_months=request.terms.duration_months,
            start_date=request.terms.start_date,
            notes=request.terms.notes,
        )
        plan = self._require_plan(
            self.lifecycle.plan_renewal(contract, terms, request.new_contract_id)
        )
        self.repository.apply_plan(plan)
        return PlanAppliedResponseDTO(
            action="renew",
            contract_id=contract.id,
            new_contract_id=plan.new_contract.id,
        )


class EndContractUseCase(CommandUseCase[ContractCommand, PlanAppliedResponseDTO]):
    def __init__(self, repository: DocumentRepository, lifecycle: LifecycleService):
        super().__init__()
        self.repository = repository
        self.lifecycle = lifecycle

    async def _execute_command_logic(self, request: ContractCommand) -> PlanAppliedResponseDTO:
        contract = load_contract(self.repository, request.contract_id)
        plan = self._require_plan(
            self.lifecycle.plan_end_contract(contract, request.as_of or today_utc())
        )
        self.repository.apply_plan(plan)
        return PlanAppliedResponseDTO(action="end", contract_id=contract.id)


class CancelContractUseCase(CommandUseCase[ContractCommand, PlanAppliedResponseDTO]):
    def __init__(self, repository: DocumentRepository, lifecycle: LifecycleService):
        super().__init__()
        self.repository = repository
        self.lifecycle = lifecycle

    async def _execute_command_logic(self, request: ContractCommand) -> PlanAppliedResponseDTO:
        contract = load_contract(self.repository, request.contract_id)
        unit = self.repository.get_apartment(contract.apartment_id)
        plan = self._require_plan(self.lifecycle.plan_cancel_contract(contract, unit))
        self.repository.apply_plan(plan)
        return PlanAppliedResponseDTO(action="cancel", contract_id=contract.id)


class DeleteContractUseCase(CommandUseCase[ContractCommand, PlanAppliedResponseDTO]):
    """Use case for deleting a contract together with its payments."""

    def __init__(self, repository: DocumentRepository, lifecycle: LifecycleService):
        super().__init__()
        self.repository = repository
        self.lifecycle = lifecycle

    async def _execute_command_logic(self, request: ContractCommand) -> PlanAppliedResponseDTO:
        contract = load_contract(self.repository, request.contract_id)
        payments = self.repository.list_payments()
        client = self.repository.get_client(contract.client_id)
        unit = self.repository.get_apartment(contract.apartment_id)

        plan = self._require_plan(
            self.lifecycle.plan_delete_contract(contract, payments, client, unit)
        )
        self.repository.apply_plan(plan)
        return PlanAppliedResponseDTO(
            action="delete",
            contract_id=contract.id,
            deleted_payment_ids=plan.payment_ids_to_delete,
        )
