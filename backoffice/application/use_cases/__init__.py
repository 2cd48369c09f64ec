"""
Application layer use cases.
Business logic for the property back office.
"""

from .base_use_case import *
from .contract_use_cases import *
from .payment_use_cases import *
from .dashboard_use_cases import *

__all__ = [
    # Base Use Cases
    "BaseUseCase",
    "QueryUseCase",
    "CommandUseCase",
    "UseCaseResult",
    "PlanRejected",
    # Contract Use Cases
    "ListContractsUseCase",
    "GetContractUseCase",
    "GetRentalLedgerUseCase",
    "CreateContractUseCase",
    "RenewContractUseCase",
    "EndContractUseCase",
    "CancelContractUseCase",
    "DeleteContractUseCase",
    "ContractQuery",
    "ListContractsQuery",
    "ContractCommand",
    "RenewContractCommand",
    # Payment Use Cases
    "ListPaymentsUseCase",
    "ListPayableContractsUseCase",
    "RecordPaymentUseCase",
    "UpdatePaymentStatusUseCase",
    "GetSaleSettlementUseCase",
    "ListPaymentsQuery",
    "PayableContractsQuery",
    "PaymentStatusCommand",
    # Dashboard Use Cases
    "GetDashboardUseCase",
    "DashboardQuery",
]
