"""Contract lifecycle service.
Resolves the effective status of contracts and plans lifecycle transitions.

Stored statuses are a cache. Viewing a contract never mutates it; transitions
are planned here and applied by a repository when a user asks for them.
"""

import unicodedata
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional

from backoffice.domain.calendar import started_months, today_utc
from backoffice.domain.models.base import (
    DomainException,
    IllegalTransition,
    ValidationError,
    new_document_id,
)
from backoffice.domain.models.contract import Contract, ContractStatus, ContractType
from backoffice.domain.models.payment import Payment
from backoffice.domain.models.plans import (
    CancelContractPlan,
    CreateContractPlan,
    DeleteContractPlan,
    DocumentPatch,
    EndContractPlan,
    PlanResult,
    RenewalPlan,
)
from backoffice.domain.models.property import Apartment, ApartmentStatus, Client
from backoffice.domain.services.rent_ledger_service import RentLedgerService
from backoffice.domain.services.sale_ledger_service import SaleLedgerService


class EffectiveStatus(str, Enum):
    """Lifecycle state derived at query time."""
    ACTIVE = "active"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED_ACTION_REQUIRED = "expired_action_required"
    ENDED = "ended"
    PENDING = "pending"
    CANCELED = "canceled"
    RENEWED = "renewed"
    SALE_IN_PROGRESS = "sale_in_progress"
    SALE_COMPLETED = "sale_completed"
    SALE_CANCELED = "sale_canceled"

    @property
    def label(self) -> str:
        return EFFECTIVE_STATUS_LABELS[self]


EFFECTIVE_STATUS_LABELS = {
    EffectiveStatus.ACTIVE: "Active",
    EffectiveStatus.EXPIRING_SOON: "Expiring soon",
    EffectiveStatus.EXPIRED_ACTION_REQUIRED: "Expired (action required)",
    EffectiveStatus.ENDED: "Ended",
    EffectiveStatus.PENDING: "Pending",
    EffectiveStatus.CANCELED: "Canceled",
    EffectiveStatus.RENEWED: "Renewed",
    EffectiveStatus.SALE_IN_PROGRESS: "Sale in progress",
    EffectiveStatus.SALE_COMPLETED: "Sale completed",
    EffectiveStatus.SALE_CANCELED: "Sale canceled",
}

RENEWABLE_STATUSES = frozenset({ContractStatus.ACTIVE, ContractStatus.ENDED})
ENDABLE_STATUSES = frozenset({ContractStatus.ACTIVE})
CANCELABLE_STATUSES = {
    ContractType.RENTAL: frozenset({ContractStatus.ACTIVE, ContractStatus.PENDING}),
    ContractType.SALE: frozenset({
        ContractStatus.ACTIVE,
        ContractStatus.PENDING,
        ContractStatus.SALE_IN_PROGRESS,
    }),
}
NEVER_PAYABLE_STATUSES = frozenset({ContractStatus.CANCELED, ContractStatus.SALE_CANCELED})


@dataclass(frozen=True)
class RenewalTerms:
    """Caller-supplied terms of a successor lease."""

    amount_dh: float
    duration_months: int
    start_date: Optional[date] = None
    notes: str = ""


def sort_key(name: str) -> str:
    """Accent- and case-insensitive collation key for display names."""
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(char for char in decomposed if not unicodedata.combining(char)).casefold()


class LifecycleService:
    """Domain service for contract lifecycle resolution and transition planning."""

    def __init__(
        self,
        rent_ledger: Optional[RentLedgerService] = None,
        sale_ledger: Optional[SaleLedgerService] = None,
        expiring_soon_days: int = 30
    ):
        self.rent_ledger = rent_ledger or RentLedgerService()
        self.sale_ledger = sale_ledger or SaleLedgerService()
        self.expiring_soon_days = expiring_soon_days

    # Effective status

    def days_until_end(self, contract: Contract, as_of: date) -> Optional[int]:
        if contract.end_date is None:
            return None
        return (contract.end_date - as_of).days

    def effective_status(self, contract: Contract, as_of: Optional[date] = None) -> EffectiveStatus:
        """Status for lists, filters and alerts, reconciling the stored value with dates."""
        if contract.status == ContractStatus.ACTIVE and contract.is_rental:
            diff_days = self.days_until_end(contract, as_of or today_utc())
            if diff_days is None:
                return EffectiveStatus.ACTIVE
            if diff_days < 0:
                return EffectiveStatus.EXPIRED_ACTION_REQUIRED
            if diff_days <= self.expiring_soon_days:
                return EffectiveStatus.EXPIRING_SOON
            return EffectiveStatus.ACTIVE
        return EffectiveStatus(contract.status.value)

    def effective_contract_label(self, contract: Contract, as_of: Optional[date] = None) -> str:
        return self.effective_status(contract, as_of).label

    def is_expired(self, contract: Contract, as_of: date) -> bool:
        """Active lease whose end date has passed without an explicit transition."""
        return self.effective_status(contract, as_of) == EffectiveStatus.EXPIRED_ACTION_REQUIRED

    # Payment entry

    def is_payable(self, contract: Contract, payments: List[Payment], as_of: date) -> bool:
        if contract.status in NEVER_PAYABLE_STATUSES:
            return False
        if contract.is_rental:
            return bool(self.rent_ledger.unpaid_months(contract, payments, as_of))
        if contract.is_sale:
            return self.sale_ledger.is_payable(contract, payments)
        return False

    def payable_contracts(
        self,
        contracts: Iterable[Contract],
        payments: List[Payment],
        clients: Iterable[Client] = (),
        as_of: Optional[date] = None
    ) -> List[Contract]:
        """Contracts that can take a new payment, sorted by client name."""
        as_of = as_of or today_utc()
        names: Dict[Optional[str], str] = {client.id: client.full_name or "" for client in clients}
        payable = [c for c in contracts if self.is_payable(c, payments, as_of)]
        return sorted(payable, key=lambda c: (sort_key(names.get(c.client_id, "")), c.id or ""))

    # Transition plans

    def plan_create_contract(
        self,
        contract: Contract,
        initial_payment: Optional[Payment] = None
    ) -> PlanResult[CreateContractPlan]:
        """Writes for a new contract: the contract, its unit, its client and an optional deposit."""
        try:
            contract.validate()
            if contract.id is None:
                contract.id = new_document_id()

            if initial_payment is not None:
                initial_payment.contract_id = contract.id
                initial_payment.client_id = contract.client_id
                initial_payment.validate()

            unit_status = ApartmentStatus.RENTED if contract.is_rental else ApartmentStatus.SOLD
            plan = CreateContractPlan(
                contract=contract,
                unit_patch=DocumentPatch(
                    contract.apartment_id,
                    changes={"status": unit_status, "current_contract_id": contract.id},
                ),
                client_patch=DocumentPatch(
                    contract.client_id,
                    array_union={"contracts": [contract.id]},
                ),
                initial_payment=initial_payment,
            )
        except DomainException as exc:
            return PlanResult.rejected(exc)
        return PlanResult.ok(plan)

    def plan_renewal(
        self,
        old_contract: Contract,
        terms: RenewalTerms,
        new_contract_id: Optional[str] = None
    ) -> PlanResult[RenewalPlan]:
        """Successor lease carrying the parties forward, with reciprocal links."""
        try:
            if not old_contract.is_rental or old_contract.status not in RENEWABLE_STATUSES:
                raise IllegalTransition(old_contract.id, old_contract.status.value, "renew")

            start_date = terms.start_date or old_contract.end_date
            if start_date is None:
                raise ValidationError("Renewal start date is required", "start_date")

            new_contract = Contract.create_rental(
                client_id=old_contract.client_id,
                apartment_id=old_contract.apartment_id,
                project_id=old_contract.project_id,
                amount_dh=terms.amount_dh,
                start_date=start_date,
                duration_months=terms.duration_months,
                notes=terms.notes,
                contract_id=new_contract_id or new_document_id(),
            )
            new_contract.previous_contract_id = old_contract.id

            plan = RenewalPlan(
                new_contract=new_contract,
                old_contract_patch=DocumentPatch(
                    old_contract.id,
                    changes={
                        "status": ContractStatus.RENEWED,
                        "renewed_contract_id": new_contract.id,
                    },
                ),
                unit_patch=DocumentPatch(
                    old_contract.apartment_id,
                    changes={"status": ApartmentStatus.RENTED, "current_contract_id": new_contract.id},
                ),
                client_patch=DocumentPatch(
                    old_contract.client_id,
                    array_union={"contracts": [new_contract.id]},
                ),
            )
        except DomainException as exc:
            return PlanResult.rejected(exc)
        return PlanResult.ok(plan)

    def plan_end_contract(
        self,
        contract: Contract,
        as_of: Optional[date] = None
    ) -> PlanResult[EndContractPlan]:
        """Close a lease today; the duration becomes the months actually used."""
        if not contract.is_rental or contract.status not in ENDABLE_STATUSES:
            return PlanResult.rejected(
                IllegalTransition(contract.id, contract.status.value, "end")
            )
        if contract.start_date is None:
            return PlanResult.rejected(ValidationError("Start date is required", "start_date"))

        as_of = as_of or today_utc()
        duration = max(1, started_months(contract.start_date, as_of))

        return PlanResult.ok(EndContractPlan(
            contract_patch=DocumentPatch(
                contract.id,
                changes={
                    "status": ContractStatus.ENDED,
                    "duration_months": duration,
                    "end_date": as_of,
                    "months_left": 0,
                },
            ),
            unit_patch=DocumentPatch(
                contract.apartment_id,
                changes={"status": ApartmentStatus.AVAILABLE, "current_contract_id": None},
            ),
        ))

    def plan_cancel_contract(
        self,
        contract: Contract,
        unit: Optional[Apartment] = None
    ) -> PlanResult[CancelContractPlan]:
        """Cancel a lease or a sale and release its unit."""
        allowed = CANCELABLE_STATUSES.get(contract.type, frozenset())
        if contract.status not in allowed:
            return PlanResult.rejected(
                IllegalTransition(contract.id, contract.status.value, "cancel")
            )

        if contract.is_sale:
            new_status = ContractStatus.SALE_CANCELED
            unit_status = unit.released_status if unit is not None else ApartmentStatus.AVAILABLE
        else:
            new_status = ContractStatus.CANCELED
            unit_status = ApartmentStatus.AVAILABLE

        return PlanResult.ok(CancelContractPlan(
            contract_patch=DocumentPatch(contract.id, changes={"status": new_status}),
            unit_patch=DocumentPatch(
                contract.apartment_id,
                changes={"status": unit_status, "current_contract_id": None},
            ),
        ))

    def plan_delete_contract(
        self,
        contract: Contract,
        payments: Iterable[Payment],
        client: Optional[Client] = None,
        unit: Optional[Apartment] = None
    ) -> PlanResult[DeleteContractPlan]:
        """Delete a contract with its payments, detaching it from its client and unit."""
        if contract.id is None:
            return PlanResult.rejected(ValidationError("Contract has no id", "id"))

        payment_ids = [
            payment.id for payment in payments
            if payment.contract_id == contract.id and payment.id is not None
        ]

        unit_patch = None
        if unit is not None and unit.current_contract_id == contract.id:
            unit_patch = DocumentPatch(
                unit.id,
                changes={"status": unit.released_status, "current_contract_id": None},
            )

        client_patch = None
        client_id = client.id if client is not None else contract.client_id
        if client_id:
            client_patch = DocumentPatch(
                client_id,
                array_remove={"contracts": [contract.id]},
            )

        return PlanResult.ok(DeleteContractPlan(
            contract_id=contract.id,
            payment_ids_to_delete=payment_ids,
            client_patch=client_patch,
            unit_patch=unit_patch,
        ))
