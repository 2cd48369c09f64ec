"""Sale ledger service.
Tracks installment settlement of sale contracts.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from backoffice.domain.models.contract import Contract
from backoffice.domain.models.payment import Payment, paid_total


class SettlementStatus(str, Enum):
    """Settlement state of a sale balance."""
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


@dataclass(frozen=True)
class SaleSettlement:
    """Paid and outstanding amounts of a sale; `remaining` is raw and may be negative."""

    total_paid: float
    remaining: float
    status: SettlementStatus

    @property
    def display_remaining(self) -> float:
        return max(0.0, self.remaining)

    def to_dict(self) -> dict:
        return {
            "total_paid": self.total_paid,
            "remaining": self.remaining,
            "display_remaining": self.display_remaining,
            "status": self.status.value,
        }


class SaleLedgerService:
    """Domain service for sale contract balances."""

    def sale_settlement(self, contract: Contract, payments: Iterable[Payment]) -> SaleSettlement:
        total_paid = paid_total(payments, contract.id)
        remaining = contract.amount_dh - total_paid

        if remaining <= 0:
            status = SettlementStatus.PAID
        elif total_paid > 0:
            status = SettlementStatus.PARTIAL
        else:
            status = SettlementStatus.UNPAID

        return SaleSettlement(total_paid=total_paid, remaining=remaining, status=status)

    def is_payable(self, contract: Contract, payments: Iterable[Payment]) -> bool:
        """A sale can take another installment until it is fully settled."""
        return paid_total(payments, contract.id) < contract.amount_dh

    def next_installment_label(
        self,
        contract: Contract,
        payments: List[Payment],
        unit_name: Optional[str] = None
    ) -> str:
        """Default description for the next installment, e.g. 'Versement 2 - Vente A3'."""
        paid_count = sum(
            1 for payment in payments
            if payment.contract_id == contract.id and payment.is_paid
        )
        return f"Versement {paid_count + 1} - Vente {unit_name or ''}".rstrip()
