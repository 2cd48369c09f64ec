"""
Document repository implementation using SQLAlchemy.
"""

import logging
from enum import Enum
from typing import List, Optional, Type

from sqlalchemy.orm import Session

from backoffice.domain.models.base import EntityNotFoundError, new_document_id
from backoffice.domain.models.contract import Contract, ContractStatus
from backoffice.domain.models.payment import Payment, PaymentStatus
from backoffice.domain.models.plans import (
    CancelContractPlan,
    CreateContractPlan,
    DeleteContractPlan,
    DocumentPatch,
    EndContractPlan,
    RenewalPlan,
)
from backoffice.domain.models.property import Apartment, Client, Project
from backoffice.domain.repositories.document_repository import DocumentRepository, Plan
from backoffice.infrastructure.db.database import Base
from backoffice.infrastructure.db.models import (
    ApartmentModel,
    ClientModel,
    ContractModel,
    PaymentModel,
    ProjectModel,
)
from backoffice.infrastructure.mappers import (
    ApartmentMapper,
    ClientMapper,
    ContractMapper,
    PaymentMapper,
    ProjectMapper,
)

logger = logging.getLogger(__name__)


class SQLAlchemyDocumentRepository(DocumentRepository):
    """SQLAlchemy implementation of the document repository."""

    def __init__(self, session: Session):
        self.session = session
        self.contract_mapper = ContractMapper()
        self.payment_mapper = PaymentMapper()
        self.apartment_mapper = ApartmentMapper()
        self.client_mapper = ClientMapper()
        self.project_mapper = ProjectMapper()

    # Snapshot reads

    def list_contracts(self) -> List[Contract]:
        models = self.session.query(ContractModel).all()
        return [self.contract_mapper.model_to_domain(model) for model in models]

    def list_payments(self) -> List[Payment]:
        models = self.session.query(PaymentModel).order_by(PaymentModel.payment_date.desc()).all()
        return [self.payment_mapper.model_to_domain(model) for model in models]

    def list_apartments(self) -> List[Apartment]:
        models = self.session.query(ApartmentModel).all()
        return [self.apartment_mapper.model_to_domain(model) for model in models]

    def list_clients(self) -> List[Client]:
        models = self.session.query(ClientModel).all()
        return [self.client_mapper.model_to_domain(model) for model in models]

    def list_projects(self) -> List[Project]:
        models = self.session.query(ProjectModel).all()
        return [self.project_mapper.model_to_domain(model) for model in models]

    def get_contract(self, contract_id: str) -> Optional[Contract]:
        model = self.session.get(ContractModel, contract_id)
        return self.contract_mapper.model_to_domain(model) if model else None

    def get_apartment(self, apartment_id: str) -> Optional[Apartment]:
        model = self.session.get(ApartmentModel, apartment_id)
        return self.apartment_mapper.model_to_domain(model) if model else None

    def get_client(self, client_id: str) -> Optional[Client]:
        model = self.session.get(ClientModel, client_id)
        return self.client_mapper.model_to_domain(model) if model else None

    def get_payment(self, payment_id: str) -> Optional[Payment]:
        model = self.session.get(PaymentModel, payment_id)
        return self.payment_mapper.model_to_domain(model) if model else None

    # Single-document writes

    def add_project(self, project: Project) -> Project:
        return self._add(project, self.project_mapper)

    def add_apartment(self, apartment: Apartment) -> Apartment:
        return self._add(apartment, self.apartment_mapper)

    def add_client(self, client: Client) -> Client:
        return self._add(client, self.client_mapper)

    def add_contract(self, contract: Contract) -> Contract:
        return self._add(contract, self.contract_mapper)

    def add_payment(
        self,
        payment: Payment,
        contract_status: Optional[ContractStatus] = None
    ) -> Payment:
        """Save a payment entity, with its contract's new status if any."""
        try:
            if payment.is_new:
                payment.id = new_document_id()
            self.session.add(self.payment_mapper.domain_to_model(payment))
            if contract_status is not None:
                self._set_contract_status(payment.contract_id, contract_status)
            self.session.commit()
        except Exception:
            self.session.rollback()
            logger.error(f"Rolled back payment on contract {payment.contract_id}", exc_info=True)
            raise
        logger.info(f"Recorded payment {payment.id} on contract {payment.contract_id}")
        return payment

    def update_payment_status(
        self,
        payment_id: str,
        status: PaymentStatus,
        contract_status: Optional[ContractStatus] = None
    ) -> Payment:
        model = self.session.get(PaymentModel, payment_id)
        if not model:
            raise EntityNotFoundError("Payment", payment_id)
        try:
            model.status = status.value
            if contract_status is not None:
                self._set_contract_status(model.contract_id, contract_status)
            self.session.commit()
        except Exception:
            self.session.rollback()
            logger.error(f"Rolled back status change of payment {payment_id}", exc_info=True)
            raise
        logger.info(f"Payment {payment_id} set to {status.value}")
        return self.payment_mapper.model_to_domain(model)

    def update_contract_status(self, contract_id: str, status: ContractStatus) -> Contract:
        model = self._set_contract_status(contract_id, status)
        self.session.commit()
        return self.contract_mapper.model_to_domain(model)

    def _set_contract_status(self, contract_id: str, status: ContractStatus) -> ContractModel:
        model = self.session.get(ContractModel, contract_id)
        if not model:
            raise EntityNotFoundError("Contract", contract_id)
        model.status = status.value
        logger.info(f"Contract {contract_id} set to {status.value}")
        return model

    # Plans

    def apply_plan(self, plan: Plan) -> None:
        """Apply all writes of a plan in a single transaction."""
        try:
            if isinstance(plan, CreateContractPlan):
                self._apply_create(plan)
            elif isinstance(plan, RenewalPlan):
                self._apply_renewal(plan)
            elif isinstance(plan, (EndContractPlan, CancelContractPlan)):
                self._patch(ContractModel, plan.contract_patch, required=True)
                self._patch(ApartmentModel, plan.unit_patch)
            elif isinstance(plan, DeleteContractPlan):
                self._apply_delete(plan)
            else:
                raise TypeError(f"Unsupported plan type: {type(plan).__name__}")
            self.session.commit()
        except Exception:
            self.session.rollback()
            logger.error(f"Rolled back {type(plan).__name__}", exc_info=True)
            raise
        logger.info(f"Applied {type(plan).__name__}")

    def _apply_create(self, plan: CreateContractPlan) -> None:
        self.session.add(self.contract_mapper.domain_to_model(plan.contract))
        self._patch(ApartmentModel, plan.unit_patch)
        self._patch(ClientModel, plan.client_patch)
        if plan.initial_payment is not None:
            if plan.initial_payment.id is None:
                plan.initial_payment.id = new_document_id()
            self.session.add(self.payment_mapper.domain_to_model(plan.initial_payment))

    def _apply_renewal(self, plan: RenewalPlan) -> None:
        self._patch(ContractModel, plan.old_contract_patch, required=True)
        self.session.add(self.contract_mapper.domain_to_model(plan.new_contract))
        self._patch(ApartmentModel, plan.unit_patch)
        self._patch(ClientModel, plan.client_patch)

    def _apply_delete(self, plan: DeleteContractPlan) -> None:
        if plan.payment_ids_to_delete:
            self.session.query(PaymentModel).filter(
                PaymentModel.id.in_(plan.payment_ids_to_delete)
            ).delete(synchronize_session=False)

        model = self.session.get(ContractModel, plan.contract_id)
        if not model:
            raise EntityNotFoundError("Contract", plan.contract_id)
        self.session.delete(model)

        if plan.client_patch is not None:
            self._patch(ClientModel, plan.client_patch)
        if plan.unit_patch is not None:
            self._patch(ApartmentModel, plan.unit_patch)

    def _patch(self, model_class: Type[Base], patch: DocumentPatch, required: bool = False) -> None:
        """Apply a partial update; a missing optional target is logged and skipped."""
        model = self.session.get(model_class, patch.document_id)
        if model is None:
            if required:
                raise EntityNotFoundError(model_class.__tablename__, patch.document_id)
            logger.warning(f"Skipping patch of missing {model_class.__tablename__} {patch.document_id}")
            return

        for attr, value in patch.changes.items():
            setattr(model, attr, value.value if isinstance(value, Enum) else value)

        # JSON columns are reassigned so the change is detected
        for attr, values in patch.array_union.items():
            current = list(getattr(model, attr) or [])
            current.extend(v for v in values if v not in current)
            setattr(model, attr, current)
        for attr, values in patch.array_remove.items():
            current = [v for v in (getattr(model, attr) or []) if v not in values]
            setattr(model, attr, current)

    def _add(self, entity, mapper):
        if entity.is_new:
            entity.id = new_document_id()
        self.session.add(mapper.domain_to_model(entity))
        self.session.commit()
        return entity
