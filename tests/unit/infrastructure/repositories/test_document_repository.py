"""
Unit tests for SQLAlchemyDocumentRepository against an in-memory SQLite database.
"""

import pytest
from datetime import date

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backoffice.domain.models.base import EntityNotFoundError
from backoffice.domain.models.contract import Contract, ContractStatus
from backoffice.domain.models.payment import Payment, PaymentStatus
from backoffice.domain.models.plans import DeleteContractPlan, DocumentPatch
from backoffice.domain.models.property import Apartment, ApartmentStatus, Client, Project
from backoffice.domain.services.lifecycle_service import LifecycleService, RenewalTerms
from backoffice.infrastructure.db.models import ContractModel, create_all_tables
from backoffice.infrastructure.repositories.document_repository import SQLAlchemyDocumentRepository


class TestSQLAlchemyDocumentRepository:
    """Test cases for the SQLAlchemy document repository."""

    def setup_method(self):
        """Create a fresh database with one unit and one client."""
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        create_all_tables(self.engine)
        self.session = sessionmaker(bind=self.engine, autoflush=False)()
        self.repo = SQLAlchemyDocumentRepository(self.session)
        self.lifecycle = LifecycleService()

        self.project = self.repo.add_project(Project(project_name="Al Amal"))
        self.unit = self.repo.add_apartment(Apartment(project_id=self.project.id, name="A1"))
        self.client = self.repo.add_client(Client(full_name="Youssef"))

    def teardown_method(self):
        self.session.close()
        self.engine.dispose()

    def _create_lease(self, contract_id="k1"):
        contract = Contract.create_rental(
            self.client.id, self.unit.id, self.project.id, 4000.0,
            date(2024, 1, 15), 12, contract_id=contract_id,
        )
        deposit = Payment(amount_dh=8000.0, payment_for="Caution", payment_date=date(2024, 1, 15))
        self.repo.apply_plan(self.lifecycle.plan_create_contract(contract, deposit).plan)
        return contract

    def test_add_assigns_ids(self):
        assert self.project.id
        assert self.repo.get_apartment(self.unit.id).name == "A1"
        assert [p.project_name for p in self.repo.list_projects()] == ["Al Amal"]

    def test_get_missing_returns_none(self):
        assert self.repo.get_contract("nope") is None
        assert self.repo.get_client("nope") is None

    def test_create_plan_writes_every_document(self):
        self._create_lease()

        contract = self.repo.get_contract("k1")
        unit = self.repo.get_apartment(self.unit.id)
        client = self.repo.get_client(self.client.id)
        payments = self.repo.list_payments()

        assert contract.end_date == date(2025, 1, 15)
        assert contract.status == ContractStatus.ACTIVE
        assert unit.status == ApartmentStatus.RENTED
        assert unit.current_contract_id == "k1"
        assert client.contracts == ["k1"]
        assert [(p.contract_id, p.amount_dh) for p in payments] == [("k1", 8000.0)]

    def test_renewal_plan_links_contracts(self):
        old = self._create_lease()
        plan = self.lifecycle.plan_renewal(old, RenewalTerms(4200.0, 12), new_contract_id="k2").plan

        self.repo.apply_plan(plan)

        assert self.repo.get_contract("k1").status == ContractStatus.RENEWED
        assert self.repo.get_contract("k1").renewed_contract_id == "k2"
        assert self.repo.get_contract("k2").previous_contract_id == "k1"
        assert self.repo.get_apartment(self.unit.id).current_contract_id == "k2"
        assert self.repo.get_client(self.client.id).contracts == ["k1", "k2"]

    def test_end_plan(self):
        contract = self._create_lease()

        self.repo.apply_plan(self.lifecycle.plan_end_contract(contract, date(2024, 6, 20)).plan)

        ended = self.repo.get_contract("k1")
        assert ended.status == ContractStatus.ENDED
        assert ended.duration_months == 6
        assert ended.months_left == 0
        assert self.repo.get_apartment(self.unit.id).status == ApartmentStatus.AVAILABLE

    def test_delete_plan_cascades(self):
        contract = self._create_lease()
        unit = self.repo.get_apartment(self.unit.id)
        plan = self.lifecycle.plan_delete_contract(
            contract, self.repo.list_payments(), self.repo.get_client(self.client.id), unit
        ).plan

        self.repo.apply_plan(plan)

        assert self.repo.get_contract("k1") is None
        assert self.repo.list_payments() == []
        assert self.repo.get_client(self.client.id).contracts == []
        assert self.repo.get_apartment(self.unit.id).status == ApartmentStatus.AVAILABLE

    def test_failed_plan_rolls_back(self):
        """Payments deleted earlier in the plan survive when the contract is missing."""
        self._create_lease()
        payment_ids = [p.id for p in self.repo.list_payments()]
        plan = DeleteContractPlan(
            contract_id="ghost",
            payment_ids_to_delete=payment_ids,
            client_patch=DocumentPatch(self.client.id, array_remove={"contracts": ["k1"]}),
        )

        with pytest.raises(EntityNotFoundError):
            self.repo.apply_plan(plan)

        assert [p.id for p in self.repo.list_payments()] == payment_ids
        assert self.repo.get_client(self.client.id).contracts == ["k1"]

    def test_missing_unit_patch_is_skipped(self):
        contract = Contract.create_sale(
            self.client.id, "gone", self.project.id, 900000.0, date(2024, 2, 1), contract_id="s1"
        )

        self.repo.apply_plan(self.lifecycle.plan_create_contract(contract).plan)

        assert self.repo.get_contract("s1").status == ContractStatus.SALE_IN_PROGRESS

    def test_status_updates(self):
        self._create_lease()
        payment_id = self.repo.list_payments()[0].id

        payment = self.repo.update_payment_status(payment_id, PaymentStatus.LATE)
        contract = self.repo.update_contract_status("k1", ContractStatus.ENDED)

        assert payment.status == PaymentStatus.LATE
        assert self.repo.get_payment(payment_id).status == PaymentStatus.LATE
        assert contract.status == ContractStatus.ENDED

    def test_status_update_of_missing_document(self):
        with pytest.raises(EntityNotFoundError):
            self.repo.update_payment_status("ghost", PaymentStatus.CANCELED)
        with pytest.raises(EntityNotFoundError):
            self.repo.update_contract_status("ghost", ContractStatus.ENDED)

    def test_payment_and_contract_status_written_together(self):
        self._create_lease()

        self.repo.add_payment(
            Payment(contract_id="k1", amount_dh=4000.0, payment_for="Loyer Janvier 2024"),
            ContractStatus.ENDED,
        )

        assert len(self.repo.list_payments()) == 2
        assert self.repo.get_contract("k1").status == ContractStatus.ENDED

    def test_payment_rolled_back_when_contract_status_fails(self):
        with pytest.raises(EntityNotFoundError):
            self.repo.add_payment(
                Payment(contract_id="ghost", amount_dh=10.0, payment_for="Versement 1"),
                ContractStatus.SALE_COMPLETED,
            )

        assert self.repo.list_payments() == []

    def test_payment_status_change_rolled_back_with_contract(self):
        self._create_lease()
        payment_id = self.repo.list_payments()[0].id
        self.session.query(ContractModel).filter_by(id="k1").delete()
        self.session.commit()

        with pytest.raises(EntityNotFoundError):
            self.repo.update_payment_status(payment_id, PaymentStatus.CANCELED, ContractStatus.SALE_IN_PROGRESS)

        assert self.repo.get_payment(payment_id).status == PaymentStatus.PAID
