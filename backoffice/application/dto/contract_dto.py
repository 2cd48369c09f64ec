"""
Contract DTOs for the application layer.
"""

from typing import List, Optional
from datetime import date
from pydantic import Field, validator

from backoffice.application.dto.base_dto import RequestDTO, ResponseDTO, TimestampMixin
from backoffice.domain.models.contract import Contract, ContractType


# Request DTOs
class CreateContractRequestDTO(RequestDTO):
    """DTO for creating a lease or a sale."""

    client_id: str = Field(min_length=1, description="Client ID")
    apartment_id: str = Field(min_length=1, description="Unit ID")
    project_id: str = Field(min_length=1, description="Project ID")
    type: ContractType = Field(description="rental or sale")
    amount_dh: float = Field(ge=0, description="Monthly rent or total sale price")
    start_date: date = Field(description="Contract start date")
    duration_months: Optional[int] = Field(default=None, ge=1, description="Lease duration")
    notes: str = Field(default="", max_length=2000)

    # Optional deposit or first installment
    initial_payment_dh: Optional[float] = Field(default=None, gt=0)
    initial_payment_for: Optional[str] = Field(default=None, max_length=255)

    @validator("duration_months", always=True)
    def validate_duration(cls, v, values):
        if values.get("type") == ContractType.RENTAL and not v:
            raise ValueError("duration_months is required for a rental")
        return v


class RenewContractRequestDTO(RequestDTO):
    """DTO for renewing a lease."""

    amount_dh: float = Field(ge=0, description="New monthly rent")
    duration_months: int = Field(ge=1, description="New lease duration")
    start_date: Optional[date] = Field(default=None, description="Defaults to the old end date")
    notes: str = Field(default="", max_length=2000)


# Response DTOs
class ContractResponseDTO(ResponseDTO, TimestampMixin):
    """DTO for contract response, with derived status and names."""

    client_id: str
    apartment_id: str
    project_id: str
    type: str
    amount_dh: float
    start_date: Optional[date] = None
    status: str = Field(description="Stored status")
    effective_status: str = Field(description="Status reconciled with today's date")
    effective_label: str
    duration_months: Optional[int] = None
    end_date: Optional[date] = None
    months_left: Optional[int] = None
    duration_text: str
    notes: str = ""
    previous_contract_id: Optional[str] = None
    renewed_contract_id: Optional[str] = None
    client_name: str = "N/A"
    unit_name: str = "N/A"

    @classmethod
    def from_domain(cls, contract: Contract, **derived) -> "ContractResponseDTO":
        return cls(
            id=contract.id,
            client_id=contract.client_id,
            apartment_id=contract.apartment_id,
            project_id=contract.project_id,
            type=contract.type.value,
            amount_dh=contract.amount_dh,
            start_date=contract.start_date,
            status=contract.status.value,
            duration_months=contract.duration_months,
            end_date=contract.end_date,
            notes=contract.notes,
            previous_contract_id=contract.previous_contract_id,
            renewed_contract_id=contract.renewed_contract_id,
            created_at=contract.created_at,
            updated_at=contract.updated_at,
            **derived,
        )


class RentalLedgerResponseDTO(ResponseDTO):
    """Rent figures of one lease at a given date."""

    contract_id: str
    as_of: date
    monthly_rent: float
    months_elapsed: int
    expected_total: float
    total_paid: float
    months_overdue: int
    unpaid_months: List[str]
    months_left: int
    duration_text: str


class PlanAppliedResponseDTO(ResponseDTO):
    """Outcome of a lifecycle transition."""

    action: str
    contract_id: str
    new_contract_id: Optional[str] = None
    deleted_payment_ids: List[str] = Field(default_factory=list)
