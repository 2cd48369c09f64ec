"""
Write plans produced by the lifecycle resolver.

A plan describes every document write a lifecycle transition requires. The
domain never performs the writes; a repository applies a plan as a single
all-or-nothing unit.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, TypeVar

from backoffice.domain.models.base import DomainException
from backoffice.domain.models.contract import Contract
from backoffice.domain.models.payment import Payment


@dataclass(frozen=True)
class DocumentPatch:
    """
    Partial update of one document.

    `changes` overwrites fields; `array_union` / `array_remove` add or remove
    elements of list fields without reading the document first.
    """

    document_id: str
    changes: Dict[str, Any] = field(default_factory=dict)
    array_union: Dict[str, List[str]] = field(default_factory=dict)
    array_remove: Dict[str, List[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class CreateContractPlan:
    """Writes for a new lease or sale."""

    contract: Contract
    unit_patch: DocumentPatch
    client_patch: DocumentPatch
    initial_payment: Optional[Payment] = None


@dataclass(frozen=True)
class RenewalPlan:
    """Writes for renewing a lease into a successor contract."""

    new_contract: Contract
    old_contract_patch: DocumentPatch
    unit_patch: DocumentPatch
    client_patch: DocumentPatch


@dataclass(frozen=True)
class EndContractPlan:
    """Writes for closing a lease early or at term."""

    contract_patch: DocumentPatch
    unit_patch: DocumentPatch


@dataclass(frozen=True)
class CancelContractPlan:
    """Writes for canceling a lease or a sale."""

    contract_patch: DocumentPatch
    unit_patch: DocumentPatch


@dataclass(frozen=True)
class DeleteContractPlan:
    """Writes for deleting a contract together with everything referencing it."""

    contract_id: str
    payment_ids_to_delete: List[str]
    client_patch: Optional[DocumentPatch] = None
    unit_patch: Optional[DocumentPatch] = None


P = TypeVar("P")


@dataclass(frozen=True)
class PlanResult(Generic[P]):
    """Either a plan ready to be applied or the reason it was rejected."""

    success: bool
    plan: Optional[P] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def ok(cls, plan: P) -> "PlanResult[P]":
        return cls(success=True, plan=plan)

    @classmethod
    def rejected(cls, exc: DomainException) -> "PlanResult[P]":
        return cls(success=False, error=exc.message, error_code=exc.code)
