"""
Payment domain model.
A payment is a cash movement recorded against exactly one contract.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional
from enum import Enum

from backoffice.domain.models.base import BaseEntity, ValidationError


class PaymentStatus(str, Enum):
    """Payment status."""
    PAID = "paid"
    PENDING = "pending"
    LATE = "late"
    CANCELED = "canceled"


class PaymentMethod(str, Enum):
    """Payment method."""
    CASH = "especes"
    CHECK = "cheque"
    TRANSFER = "virement"
    BILL = "effet"


RENT_PREFIX = "loyer "


@dataclass(eq=False)
class Payment(BaseEntity):
    """
    Payment record.

    Only paid payments count toward arrears and settlement. A late payment
    keeps its amount but is excluded from the sums.
    """

    contract_id: str = ""
    client_id: str = ""
    amount_dh: float = 0.0
    payment_date: Optional[date] = None
    payment_for: str = ""
    status: PaymentStatus = PaymentStatus.PAID
    payment_method: PaymentMethod = PaymentMethod.CASH

    # Method details
    cheque_number: Optional[str] = None
    bank_name: Optional[str] = None
    transfer_series: Optional[str] = None
    effect_number: Optional[str] = None
    receipt_url: Optional[str] = None

    @property
    def is_paid(self) -> bool:
        return self.status == PaymentStatus.PAID

    @property
    def rent_month_label(self) -> Optional[str]:
        """Month label of a 'Loyer <Month> <Year>' payment, lower-cased."""
        text = (self.payment_for or "").strip().lower()
        if not text.startswith(RENT_PREFIX):
            return None
        return text[len(RENT_PREFIX):].strip()

    def validate(self) -> None:
        """Validate payment."""
        if self.amount_dh <= 0:
            raise ValidationError("Payment amount must be positive", "amount_dh")

        if not self.contract_id:
            raise ValidationError("Payment must reference a contract", "contract_id")

        if not self.payment_for or not self.payment_for.strip():
            raise ValidationError("Payment description is required", "payment_for")


def rent_payment_label(month_label: str) -> str:
    """Description stored on a rent payment for a given month label."""
    return f"Loyer {month_label}"


def paid_total(payments: Iterable[Payment], contract_id: Optional[str]) -> float:
    """Sum of paid amounts recorded against a contract."""
    return sum(
        payment.amount_dh
        for payment in payments
        if payment.contract_id == contract_id and payment.is_paid
    )
