"""
Payment use cases for the application layer.
Implements payment entry and the status reconciliation of sales.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from backoffice.application.use_cases.base_use_case import CommandUseCase, QueryUseCase
from backoffice.application.use_cases.contract_use_cases import ContractQuery, load_contract
from backoffice.application.dto.payment_dto import (
    PayableContractResponseDTO,
    PaymentResponseDTO,
    RecordPaymentRequestDTO,
    SaleSettlementResponseDTO,
)
from backoffice.domain.calendar import parse_month_label, today_utc
from backoffice.domain.models.base import BusinessRuleViolation, EntityNotFoundError, ValidationError
from backoffice.domain.models.contract import Contract, ContractStatus
from backoffice.domain.models.payment import (
    Payment,
    PaymentMethod,
    PaymentStatus,
    rent_payment_label,
)
from backoffice.domain.repositories.document_repository import DocumentRepository
from backoffice.domain.services.lifecycle_service import NEVER_PAYABLE_STATUSES, LifecycleService
from backoffice.domain.services.rent_ledger_service import RentLedgerService
from backoffice.domain.services.sale_ledger_service import SaleLedgerService, SettlementStatus

logger = logging.getLogger(__name__)

OPEN_SALE_STATUSES = frozenset({
    ContractStatus.ACTIVE,
    ContractStatus.PENDING,
    ContractStatus.SALE_IN_PROGRESS,
})


@dataclass
class ListPaymentsQuery:
    contract_id: Optional[str] = None
    client_id: Optional[str] = None


@dataclass
class PayableContractsQuery:
    as_of: Optional[date] = None


@dataclass
class PaymentStatusCommand:
    payment_id: str
    status: PaymentStatus


class SaleStatusReconciler:
    """Works out the stored status a sale should carry after a payment change."""

    def __init__(self, sale_ledger: SaleLedgerService):
        self.sale_ledger = sale_ledger

    def settled_status(self, contract: Contract, payments: List[Payment]) -> Optional[ContractStatus]:
        """New status for the sale, or None when the stored one still holds."""
        if not contract.is_sale:
            return None

        settlement = self.sale_ledger.sale_settlement(contract, payments)

        if settlement.status == SettlementStatus.PAID and contract.status in OPEN_SALE_STATUSES:
            logger.info(f"Sale {contract.id} fully settled")
            return ContractStatus.SALE_COMPLETED
        if settlement.status != SettlementStatus.PAID and contract.status == ContractStatus.SALE_COMPLETED:
            logger.info(f"Sale {contract.id} reopened after a payment change")
            return ContractStatus.SALE_IN_PROGRESS
        return None


class ListPaymentsUseCase(QueryUseCase[ListPaymentsQuery, List[PaymentResponseDTO]]):
    def __init__(self, repository: DocumentRepository):
        super().__init__()
        self.repository = repository

    async def _execute_business_logic(self, request: ListPaymentsQuery) -> List[PaymentResponseDTO]:
        payments = self.repository.list_payments()
        if request.contract_id is not None:
            payments = [p for p in payments if p.contract_id == request.contract_id]
        if request.client_id is not None:
            payments = [p for p in payments if p.client_id == request.client_id]
        return [PaymentResponseDTO.from_domain(p) for p in payments]


class ListPayableContractsUseCase(QueryUseCase[PayableContractsQuery, List[PayableContractResponseDTO]]):
    """Use case for the contract picker of the payment entry form."""

    def __init__(self, repository: DocumentRepository, lifecycle: LifecycleService):
        super().__init__()
        self.repository = repository
        self.lifecycle = lifecycle

    async def _execute_business_logic(
        self,
        request: PayableContractsQuery
    ) -> List[PayableContractResponseDTO]:
        as_of = request.as_of or today_utc()
        payments = self.repository.list_payments()
        clients = self.repository.list_clients()
        client_names = {c.id: c.display_name for c in clients}
        unit_names = {a.id: a.name for a in self.repository.list_apartments()}

        payable = self.lifecycle.payable_contracts(
            self.repository.list_contracts(), payments, clients, as_of
        )

        rows = []
        for contract in payable:
            row = PayableContractResponseDTO(
                contract_id=contract.id,
                type=contract.type.value,
                client_name=client_names.get(contract.client_id, "N/A"),
                unit_name=unit_names.get(contract.apartment_id) or "N/A",
                amount_dh=contract.amount_dh,
            )
            if contract.is_rental:
                row.unpaid_months = self.lifecycle.rent_ledger.unpaid_months(contract, payments, as_of)
            else:
                settlement = self.lifecycle.sale_ledger.sale_settlement(contract, payments)
                row.remaining_dh = settlement.display_remaining
            rows.append(row)
        return rows


class RecordPaymentUseCase(CommandUseCase[RecordPaymentRequestDTO, PaymentResponseDTO]):
    """
    Use case for recording a payment against a contract.

    A rent payment must name a month that is still unpaid, and a settled sale
    takes no further installments. A sale whose balance reaches zero is marked
    completed in the same write as the payment.
    """

    def __init__(
        self,
        repository: DocumentRepository,
        rent_ledger: RentLedgerService,
        sale_ledger: SaleLedgerService
    ):
        super().__init__()
        self.repository = repository
        self.rent_ledger = rent_ledger
        self.sale_ledger = sale_ledger
        self.reconciler = SaleStatusReconciler(sale_ledger)

    async def _execute_command_logic(self, request: RecordPaymentRequestDTO) -> PaymentResponseDTO:
        contract = load_contract(self.repository, request.contract_id)
        if contract.status in NEVER_PAYABLE_STATUSES:
            raise BusinessRuleViolation(
                f"Contract {contract.id} is {contract.status.value} and cannot take payments",
                "CONTRACT_NOT_PAYABLE"
            )

        payments = self.repository.list_payments()
        payment_date = request.payment_date or today_utc()
        payment = Payment(
            contract_id=contract.id,
            client_id=contract.client_id,
            amount_dh=request.amount_dh,
            payment_date=payment_date,
            payment_for=request.payment_for or self._default_label(contract, payments, payment_date),
            status=PaymentStatus(request.status),
            payment_method=PaymentMethod(request.payment_method),
            cheque_number=request.cheque_number,
            bank_name=request.bank_name,
            transfer_series=request.transfer_series,
            effect_number=request.effect_number,
        )
        payment.validate()

        if contract.is_rental:
            self._check_rent_month(contract, payments, payment)
        elif not self.sale_ledger.is_payable(contract, payments):
            raise BusinessRuleViolation(f"Sale {contract.id} is fully settled", "CONTRACT_NOT_PAYABLE")

        contract_status = self.reconciler.settled_status(contract, payments + [payment])
        saved = self.repository.add_payment(payment, contract_status)
        return PaymentResponseDTO.from_domain(saved)

    def _check_rent_month(self, contract: Contract, payments: List[Payment], payment: Payment) -> None:
        unpaid = self.rent_ledger.unpaid_months(contract, payments, payment.payment_date)
        if not unpaid:
            raise BusinessRuleViolation(
                f"Contract {contract.id} has no unpaid month",
                "CONTRACT_NOT_PAYABLE"
            )

        label = payment.rent_month_label
        month = parse_month_label(label) if label else None
        if month is None:
            raise ValidationError(
                "Rent payments must be described as 'Loyer <Mois> <Année>'",
                "payment_for"
            )
        if month not in {parse_month_label(unpaid_label) for unpaid_label in unpaid}:
            raise BusinessRuleViolation(
                f"{payment.payment_for} is not an unpaid month of contract {contract.id}",
                "MONTH_NOT_PAYABLE"
            )

    def _default_label(self, contract: Contract, payments: List[Payment], as_of: date) -> str:
        if contract.is_rental:
            unpaid = self.rent_ledger.unpaid_months(contract, payments, as_of)
            if unpaid:
                return rent_payment_label(unpaid[0])
            return "Paiement"
        unit = self.repository.get_apartment(contract.apartment_id)
        return self.sale_ledger.next_installment_label(
            contract, payments, unit.name if unit else None
        )


class UpdatePaymentStatusUseCase(CommandUseCase[PaymentStatusCommand, PaymentResponseDTO]):
    """Use case for canceling a payment or flagging it late."""

    def __init__(self, repository: DocumentRepository, sale_ledger: SaleLedgerService):
        super().__init__()
        self.repository = repository
        self.reconciler = SaleStatusReconciler(sale_ledger)

    async def _execute_command_logic(self, request: PaymentStatusCommand) -> PaymentResponseDTO:
        existing = self.repository.get_payment(request.payment_id)
        if existing is None:
            raise EntityNotFoundError("Payment", request.payment_id)

        contract_status = None
        contract = self.repository.get_contract(existing.contract_id)
        if contract is not None:
            existing.status = request.status
            payments = [
                existing if p.id == existing.id else p
                for p in self.repository.list_payments()
            ]
            contract_status = self.reconciler.settled_status(contract, payments)

        payment = self.repository.update_payment_status(
            request.payment_id, request.status, contract_status
        )
        return PaymentResponseDTO.from_domain(payment)


class GetSaleSettlementUseCase(QueryUseCase[ContractQuery, SaleSettlementResponseDTO]):
    def __init__(self, repository: DocumentRepository, sale_ledger: SaleLedgerService):
        super().__init__()
        self.repository = repository
        self.sale_ledger = sale_ledger

    async def _execute_business_logic(self, request: ContractQuery) -> SaleSettlementResponseDTO:
        contract = load_contract(self.repository, request.contract_id)
        if not contract.is_sale:
            raise BusinessRuleViolation(f"Contract {contract.id} is not a sale", "NOT_A_SALE")

        payments = self.repository.list_payments()
        unit = self.repository.get_apartment(contract.apartment_id)
        settlement = self.sale_ledger.sale_settlement(contract, payments)
        return SaleSettlementResponseDTO(
            contract_id=contract.id,
            amount_dh=contract.amount_dh,
            next_installment_label=self.sale_ledger.next_installment_label(
                contract, payments, unit.name if unit else None
            ),
            **settlement.to_dict(),
        )
