"""
Domain models for the property back office.
This module exports all domain entities and write plans.
"""

# Base classes
from .base import (
    BaseEntity,
    DomainException,
    ValidationError,
    BusinessRuleViolation,
    IllegalTransition,
    EntityNotFoundError,
)

# Domain entities
from .contract import (
    Contract,
    ContractType,
    ContractStatus,
    TERMINAL_STATUSES,
)

from .payment import (
    Payment,
    PaymentStatus,
    PaymentMethod,
    rent_payment_label,
    paid_total,
)

from .property import (
    Project,
    ProjectStatus,
    Apartment,
    ApartmentStatus,
    ApartmentType,
    Client,
    default_lock_for_status,
    is_locked,
    toggle_lock,
)

# Write plans
from .plans import (
    DocumentPatch,
    CreateContractPlan,
    RenewalPlan,
    EndContractPlan,
    CancelContractPlan,
    DeleteContractPlan,
    PlanResult,
)

__all__ = [
    "BaseEntity",
    "DomainException",
    "ValidationError",
    "BusinessRuleViolation",
    "IllegalTransition",
    "EntityNotFoundError",
    "Contract",
    "ContractType",
    "ContractStatus",
    "TERMINAL_STATUSES",
    "Payment",
    "PaymentStatus",
    "PaymentMethod",
    "rent_payment_label",
    "paid_total",
    "Project",
    "ProjectStatus",
    "Apartment",
    "ApartmentStatus",
    "ApartmentType",
    "Client",
    "default_lock_for_status",
    "is_locked",
    "toggle_lock",
    "DocumentPatch",
    "CreateContractPlan",
    "RenewalPlan",
    "EndContractPlan",
    "CancelContractPlan",
    "DeleteContractPlan",
    "PlanResult",
]
