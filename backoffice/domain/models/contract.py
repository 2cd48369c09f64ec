"""
Contract domain model.
Represents a rental lease or a sale agreement binding a client to a unit.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional
from enum import Enum

from backoffice.domain.models.base import BaseEntity, ValidationError
from backoffice.domain.calendar import add_months


class ContractType(str, Enum):
    """Contract type."""
    RENTAL = "rental"
    SALE = "sale"


class ContractStatus(str, Enum):
    """Persisted contract status."""
    ACTIVE = "active"
    ENDED = "ended"
    PENDING = "pending"
    CANCELED = "canceled"
    RENEWED = "renewed"
    SALE_IN_PROGRESS = "sale_in_progress"
    SALE_COMPLETED = "sale_completed"
    SALE_CANCELED = "sale_canceled"


TERMINAL_STATUSES = frozenset({
    ContractStatus.ENDED,
    ContractStatus.CANCELED,
    ContractStatus.RENEWED,
    ContractStatus.SALE_COMPLETED,
    ContractStatus.SALE_CANCELED,
})


@dataclass(eq=False)
class Contract(BaseEntity):
    """
    Contract aggregate.

    `status` and `months_left` are cached projections of dates and payments;
    the ledger and lifecycle services recompute them on read.
    """

    client_id: str = ""
    apartment_id: str = ""
    project_id: str = ""
    type: ContractType = ContractType.RENTAL
    amount_dh: float = 0.0
    start_date: Optional[date] = None
    status: ContractStatus = ContractStatus.ACTIVE
    notes: str = ""

    # Rental-specific fields
    duration_months: Optional[int] = None
    end_date: Optional[date] = None
    months_left: Optional[int] = None
    previous_contract_id: Optional[str] = None
    renewed_contract_id: Optional[str] = None

    @classmethod
    def create_rental(
        cls,
        client_id: str,
        apartment_id: str,
        project_id: str,
        amount_dh: float,
        start_date: date,
        duration_months: int,
        notes: str = "",
        contract_id: Optional[str] = None,
    ) -> "Contract":
        """Create an active lease; the end date is derived from the duration."""
        contract = cls(
            id=contract_id,
            client_id=client_id,
            apartment_id=apartment_id,
            project_id=project_id,
            type=ContractType.RENTAL,
            amount_dh=amount_dh,
            start_date=start_date,
            status=ContractStatus.ACTIVE,
            notes=notes,
            duration_months=duration_months,
            end_date=add_months(start_date, duration_months),
            months_left=duration_months,
        )
        contract.validate()
        return contract

    @classmethod
    def create_sale(
        cls,
        client_id: str,
        apartment_id: str,
        project_id: str,
        amount_dh: float,
        start_date: date,
        notes: str = "",
        contract_id: Optional[str] = None,
    ) -> "Contract":
        """Create a sale agreement still awaiting full settlement."""
        contract = cls(
            id=contract_id,
            client_id=client_id,
            apartment_id=apartment_id,
            project_id=project_id,
            type=ContractType.SALE,
            amount_dh=amount_dh,
            start_date=start_date,
            status=ContractStatus.SALE_IN_PROGRESS,
            notes=notes,
        )
        contract.validate()
        return contract

    @property
    def is_rental(self) -> bool:
        return self.type == ContractType.RENTAL

    @property
    def is_sale(self) -> bool:
        return self.type == ContractType.SALE

    @property
    def is_active(self) -> bool:
        return self.status == ContractStatus.ACTIVE

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def validate(self) -> None:
        """Validate contract terms."""
        if self.amount_dh < 0:
            raise ValidationError("Contract amount cannot be negative", "amount_dh")

        if self.start_date is None:
            raise ValidationError("Start date is required", "start_date")

        if self.is_rental:
            if not self.duration_months or self.duration_months <= 0:
                raise ValidationError("Rental duration must be positive", "duration_months")
            if (
                self.is_active
                and self.end_date
                and self.end_date != add_months(self.start_date, self.duration_months)
            ):
                raise ValidationError(
                    "End date must be the start date shifted by the duration", "end_date"
                )
