"""
Document repository interface.
Defines the contract for reading store snapshots and applying lifecycle plans.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Union

from backoffice.domain.models.contract import Contract, ContractStatus
from backoffice.domain.models.payment import Payment, PaymentStatus
from backoffice.domain.models.plans import (
    CancelContractPlan,
    CreateContractPlan,
    DeleteContractPlan,
    EndContractPlan,
    RenewalPlan,
)
from backoffice.domain.models.property import Apartment, Client, Project

Plan = Union[
    CreateContractPlan,
    RenewalPlan,
    EndContractPlan,
    CancelContractPlan,
    DeleteContractPlan,
]


class DocumentRepository(ABC):
    """
    Repository interface for the back-office document store.

    Reads return full collections; ledger and dashboard computations run over
    these snapshots in memory.
    """

    @abstractmethod
    def list_contracts(self) -> List[Contract]:
        pass

    @abstractmethod
    def list_payments(self) -> List[Payment]:
        pass

    @abstractmethod
    def list_apartments(self) -> List[Apartment]:
        pass

    @abstractmethod
    def list_clients(self) -> List[Client]:
        pass

    @abstractmethod
    def list_projects(self) -> List[Project]:
        pass

    @abstractmethod
    def get_contract(self, contract_id: str) -> Optional[Contract]:
        """
        Find a contract by its ID.
        Returns None if not found.
        """
        pass

    @abstractmethod
    def get_apartment(self, apartment_id: str) -> Optional[Apartment]:
        pass

    @abstractmethod
    def get_client(self, client_id: str) -> Optional[Client]:
        pass

    @abstractmethod
    def get_payment(self, payment_id: str) -> Optional[Payment]:
        pass

    @abstractmethod
    def add_payment(
        self,
        payment: Payment,
        contract_status: Optional[ContractStatus] = None
    ) -> Payment:
        """
        Persist a new payment and, when given, the new status of its contract
        in the same transaction.
        Returns the payment with its assigned ID.
        """
        pass

    @abstractmethod
    def update_payment_status(
        self,
        payment_id: str,
        status: PaymentStatus,
        contract_status: Optional[ContractStatus] = None
    ) -> Payment:
        """
        Change the status of a payment, and optionally of its contract, in one
        transaction.
        Raises EntityNotFoundError if the payment does not exist.
        """
        pass

    @abstractmethod
    def update_contract_status(self, contract_id: str, status: ContractStatus) -> Contract:
        pass

    @abstractmethod
    def apply_plan(self, plan: Plan) -> None:
        """
        Apply every write of a plan as one all-or-nothing unit.
        Raises EntityNotFoundError if a patched document does not exist.
        """
        pass
