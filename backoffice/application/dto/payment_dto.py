"""
Payment DTOs for the application layer.
"""

from typing import List, Optional
from datetime import date
from pydantic import Field, validator

from backoffice.application.dto.base_dto import RequestDTO, ResponseDTO, TimestampMixin
from backoffice.domain.models.payment import Payment, PaymentMethod, PaymentStatus


# Request DTOs
class RecordPaymentRequestDTO(RequestDTO):
    """
    DTO for recording a payment.

    When `payment_for` is omitted it defaults to the oldest unpaid month of a
    lease or to the next installment label of a sale.
    """

    contract_id: str = Field(min_length=1, description="Contract ID")
    amount_dh: float = Field(gt=0, description="Amount in dirhams")
    payment_date: Optional[date] = Field(default=None, description="Defaults to today")
    payment_for: Optional[str] = Field(default=None, max_length=255)
    payment_method: PaymentMethod = Field(default=PaymentMethod.CASH)
    status: PaymentStatus = Field(default=PaymentStatus.PAID)

    # Method details
    cheque_number: Optional[str] = Field(default=None, max_length=64)
    bank_name: Optional[str] = Field(default=None, max_length=255)
    transfer_series: Optional[str] = Field(default=None, max_length=64)
    effect_number: Optional[str] = Field(default=None, max_length=64)

    @validator("payment_for", pre=True)
    def strip_payment_for(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class UpdatePaymentStatusRequestDTO(RequestDTO):
    status: PaymentStatus


# Response DTOs
class PaymentResponseDTO(ResponseDTO, TimestampMixin):
    """DTO for payment response."""

    contract_id: str
    client_id: str
    amount_dh: float
    payment_date: Optional[date] = None
    payment_for: str
    status: str
    payment_method: str
    cheque_number: Optional[str] = None
    bank_name: Optional[str] = None
    transfer_series: Optional[str] = None
    effect_number: Optional[str] = None
    receipt_url: Optional[str] = None

    @classmethod
    def from_domain(cls, payment: Payment) -> "PaymentResponseDTO":
        return cls(
            id=payment.id,
            contract_id=payment.contract_id,
            client_id=payment.client_id,
            amount_dh=payment.amount_dh,
            payment_date=payment.payment_date,
            payment_for=payment.payment_for,
            status=payment.status.value,
            payment_method=payment.payment_method.value,
            cheque_number=payment.cheque_number,
            bank_name=payment.bank_name,
            transfer_series=payment.transfer_series,
            effect_number=payment.effect_number,
            receipt_url=payment.receipt_url,
            created_at=payment.created_at,
        )


class SaleSettlementResponseDTO(ResponseDTO):
    contract_id: str
    amount_dh: float
    total_paid: float
    remaining: float
    display_remaining: float
    status: str
    next_installment_label: str


class PayableContractResponseDTO(ResponseDTO):
    """A contract offered in the payment entry form."""

    contract_id: str
    type: str
    client_name: str
    unit_name: str
    amount_dh: float
    unpaid_months: List[str] = Field(default_factory=list)
    remaining_dh: Optional[float] = None
