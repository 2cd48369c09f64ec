"""
Application layer DTOs.
Data Transfer Objects for API requests and responses.
"""

from .base_dto import *
from .contract_dto import *
from .payment_dto import *
from .dashboard_dto import *

__all__ = [
    # Base DTOs
    "BaseDTO",
    "RequestDTO",
    "ResponseDTO",
    "ErrorResponseDTO",
    "TimestampMixin",
    # Contract DTOs
    "CreateContractRequestDTO",
    "RenewContractRequestDTO",
    "ContractResponseDTO",
    "RentalLedgerResponseDTO",
    "PlanAppliedResponseDTO",
    # Payment DTOs
    "RecordPaymentRequestDTO",
    "UpdatePaymentStatusRequestDTO",
    "PaymentResponseDTO",
    "SaleSettlementResponseDTO",
    "PayableContractResponseDTO",
    # Dashboard DTOs
    "ContractAlertDTO",
    "RevenueDTO",
    "ProjectOccupancyDTO",
    "DashboardResponseDTO",
]
