"""
Unit tests for LifecycleService domain service.
"""

from datetime import date

from backoffice.domain.models.contract import Contract, ContractStatus
from backoffice.domain.models.payment import Payment, PaymentStatus
from backoffice.domain.models.property import Apartment, ApartmentStatus, Client
from backoffice.domain.services.lifecycle_service import (
    EffectiveStatus,
    LifecycleService,
    RenewalTerms,
    sort_key,
)


def rental(contract_id="k1", client_id="c1", start=date(2024, 1, 15), duration=12, amount=4000.0):
    return Contract.create_rental(
        client_id, "a1", "p1", amount, start, duration, contract_id=contract_id
    )


def sale(contract_id="s1", client_id="c1", amount=850000.0):
    return Contract.create_sale(
        client_id, "a1", "p1", amount, date(2024, 2, 1), contract_id=contract_id
    )


class TestEffectiveStatus:
    """Test cases for effective status resolution."""

    def setup_method(self):
        self.service = LifecycleService()
        self.contract = rental()

    def test_active_far_from_end(self):
        status = self.service.effective_status(self.contract, date(2024, 4, 20))
        assert status == EffectiveStatus.ACTIVE
        assert status.label == "Active"

    def test_expiring_soon_boundaries(self):
        # end_date is 2025-01-15
        assert self.service.effective_status(self.contract, date(2024, 12, 16)) == EffectiveStatus.EXPIRING_SOON
        assert self.service.effective_status(self.contract, date(2025, 1, 15)) == EffectiveStatus.EXPIRING_SOON
        assert self.service.effective_status(self.contract, date(2024, 12, 15)) == EffectiveStatus.ACTIVE

    def test_expired_requires_action(self):
        as_of = date(2025, 1, 16)
        assert self.service.effective_contract_label(self.contract, as_of) == "Expired (action required)"
        assert self.service.is_expired(self.contract, as_of) is True

    def test_stored_terminal_status_wins(self):
        self.contract.status = ContractStatus.ENDED
        assert self.service.effective_status(self.contract, date(2030, 1, 1)) == EffectiveStatus.ENDED

    def test_sale_status_passes_through(self):
        assert self.service.effective_contract_label(sale(), date(2024, 3, 1)) == "Sale in progress"

    def test_viewing_does_not_mutate(self):
        self.service.effective_status(self.contract, date(2026, 1, 1))
        assert self.contract.status == ContractStatus.ACTIVE

    def test_custom_window(self):
        service = LifecycleService(expiring_soon_days=60)
        assert service.effective_status(self.contract, date(2024, 11, 20)) == EffectiveStatus.EXPIRING_SOON


class TestPayableContracts:
    """Test cases for payable_contracts."""

    def setup_method(self):
        self.service = LifecycleService()
        self.as_of = date(2024, 4, 20)
        self.clients = [
            Client(id="c1", full_name="Youssef"),
            Client(id="c2", full_name="Élodie"),
            Client(id="c3", full_name="amine"),
        ]

    def test_partial_sale_is_payable(self):
        contract = sale()
        payments = [Payment(contract_id="s1", amount_dh=300000.0)]
        assert self.service.payable_contracts([contract], payments, self.clients, self.as_of) == [contract]

    def test_fully_paid_sale_is_not_payable(self):
        payments = [Payment(contract_id="s1", amount_dh=850000.0)]
        assert self.service.payable_contracts([sale()], payments, self.clients, self.as_of) == []

    def test_rental_with_unpaid_months_is_payable(self):
        contract = rental()
        assert self.service.payable_contracts([contract], [], self.clients, self.as_of) == [contract]

    def test_up_to_date_rental_is_not_payable(self):
        labels = ["Janvier 2024", "Février 2024", "Mars 2024", "Avril 2024"]
        payments = [Payment(contract_id="k1", amount_dh=4000.0, payment_for=f"Loyer {label}") for label in labels]
        assert self.service.payable_contracts([rental()], payments, self.clients, self.as_of) == []

    def test_canceled_contracts_are_never_payable(self):
        canceled = rental()
        canceled.status = ContractStatus.CANCELED
        canceled_sale = sale()
        canceled_sale.status = ContractStatus.SALE_CANCELED

        assert self.service.payable_contracts([canceled, canceled_sale], [], self.clients, self.as_of) == []

    def test_late_payment_does_not_settle(self):
        payments = [Payment(contract_id="s1", amount_dh=850000.0, status=PaymentStatus.LATE)]
        assert len(self.service.payable_contracts([sale()], payments, self.clients, self.as_of)) == 1

    def test_sorted_by_client_name_ignoring_accents(self):
        contracts = [
            rental("k1", client_id="c1"),
            rental("k2", client_id="c2"),
            rental("k3", client_id="c3"),
        ]

        result = self.service.payable_contracts(contracts, [], self.clients, self.as_of)

        assert [c.id for c in result] == ["k3", "k2", "k1"]

    def test_sort_key(self):
        assert sort_key("Élodie") == "elodie"
        assert sort_key("ÇA") == "ca"


class TestPlanRenewal:
    """Test cases for plan_renewal."""

    def setup_method(self):
        self.service = LifecycleService()
        self.old = rental()

    def test_renewal_links_both_contracts(self):
        result = self.service.plan_renewal(
            self.old, RenewalTerms(amount_dh=4200.0, duration_months=12), new_contract_id="k2"
        )

        assert result.success is True
        plan = result.plan
        assert plan.new_contract.id == "k2"
        assert plan.new_contract.previous_contract_id == "k1"
        assert plan.new_contract.start_date == date(2025, 1, 15)
        assert plan.new_contract.end_date == date(2026, 1, 15)
        assert plan.new_contract.amount_dh == 4200.0
        assert plan.new_contract.client_id == "c1"
        assert plan.old_contract_patch.document_id == "k1"
        assert plan.old_contract_patch.changes == {
            "status": ContractStatus.RENEWED,
            "renewed_contract_id": "k2",
        }
        assert plan.unit_patch.changes["current_contract_id"] == "k2"
        assert plan.unit_patch.changes["status"] == ApartmentStatus.RENTED
        assert plan.client_patch.array_union == {"contracts": ["k2"]}

    def test_explicit_start_date(self):
        terms = RenewalTerms(amount_dh=4000.0, duration_months=6, start_date=date(2025, 2, 1))
        result = self.service.plan_renewal(self.old, terms, new_contract_id="k2")
        assert result.plan.new_contract.end_date == date(2025, 8, 1)

    def test_ended_rental_can_be_renewed(self):
        self.old.status = ContractStatus.ENDED
        assert self.service.plan_renewal(self.old, RenewalTerms(4000.0, 12)).success is True

    def test_generates_id_when_missing(self):
        result = self.service.plan_renewal(self.old, RenewalTerms(4000.0, 12))
        assert result.plan.new_contract.id
        assert result.plan.new_contract.id != "k1"

    def test_canceled_rental_cannot_be_renewed(self):
        self.old.status = ContractStatus.CANCELED
        result = self.service.plan_renewal(self.old, RenewalTerms(4000.0, 12))

        assert result.success is False
        assert result.plan is None
        assert result.error_code == "ILLEGAL_TRANSITION"

    def test_sale_cannot_be_renewed(self):
        result = self.service.plan_renewal(sale(), RenewalTerms(4000.0, 12))
        assert result.error_code == "ILLEGAL_TRANSITION"

    def test_invalid_terms_are_rejected(self):
        result = self.service.plan_renewal(self.old, RenewalTerms(4000.0, 0))
        assert result.success is False
        assert result.error_code == "VALIDATION_ERROR"


class TestPlanEndAndCancel:
    """Test cases for plan_end_contract and plan_cancel_contract."""

    def setup_method(self):
        self.service = LifecycleService()

    def test_end_uses_months_actually_started(self):
        contract = rental(start=date(2024, 1, 10))

        result = self.service.plan_end_contract(contract, date(2024, 6, 10))

        assert result.success is True
        assert result.plan.contract_patch.changes == {
            "status": ContractStatus.ENDED,
            "duration_months": 5,
            "end_date": date(2024, 6, 10),
            "months_left": 0,
        }
        assert result.plan.unit_patch.document_id == "a1"
        assert result.plan.unit_patch.changes["status"] == ApartmentStatus.AVAILABLE

    def test_end_on_start_day_keeps_one_month(self):
        contract = rental(start=date(2024, 1, 10))
        result = self.service.plan_end_contract(contract, date(2024, 1, 10))
        assert result.plan.contract_patch.changes["duration_months"] == 1

    def test_only_active_rentals_can_end(self):
        contract = rental()
        contract.status = ContractStatus.RENEWED

        assert self.service.plan_end_contract(contract, date(2024, 6, 1)).error_code == "ILLEGAL_TRANSITION"
        assert self.service.plan_end_contract(sale(), date(2024, 6, 1)).error_code == "ILLEGAL_TRANSITION"

    def test_cancel_rental_frees_unit(self):
        result = self.service.plan_cancel_contract(rental())

        assert result.plan.contract_patch.changes == {"status": ContractStatus.CANCELED}
        assert result.plan.unit_patch.changes["status"] == ApartmentStatus.AVAILABLE

    def test_cancel_sale_returns_unit_to_market(self):
        unit = Apartment(id="a1", name="B1", sale_price_dh=900000.0)

        result = self.service.plan_cancel_contract(sale(), unit)

        assert result.plan.contract_patch.changes == {"status": ContractStatus.SALE_CANCELED}
        assert result.plan.unit_patch.changes["status"] == ApartmentStatus.FOR_SALE

    def test_cancel_sale_without_sale_price(self):
        result = self.service.plan_cancel_contract(sale(), Apartment(id="a1", name="B1"))
        assert result.plan.unit_patch.changes["status"] == ApartmentStatus.AVAILABLE

    def test_cancel_completed_sale_is_illegal(self):
        contract = sale()
        contract.status = ContractStatus.SALE_COMPLETED

        result = self.service.plan_cancel_contract(contract)

        assert result.success is False
        assert result.error_code == "ILLEGAL_TRANSITION"

    def test_cancel_ended_rental_is_illegal(self):
        contract = rental()
        contract.status = ContractStatus.ENDED
        assert self.service.plan_cancel_contract(contract).error_code == "ILLEGAL_TRANSITION"


class TestPlanCreateAndDelete:
    """Test cases for plan_create_contract and plan_delete_contract."""

    def setup_method(self):
        self.service = LifecycleService()

    def test_create_rental_occupies_unit(self):
        contract = rental(contract_id=None)

        result = self.service.plan_create_contract(contract)

        assert result.success is True
        assert contract.id is not None
        assert result.plan.unit_patch.changes == {
            "status": ApartmentStatus.RENTED,
            "current_contract_id": contract.id,
        }
        assert result.plan.client_patch.array_union == {"contracts": [contract.id]}
        assert result.plan.initial_payment is None

    def test_create_sale_with_deposit(self):
        contract = sale()
        deposit = Payment(amount_dh=100000.0, payment_for="Avance", payment_date=date(2024, 2, 1))

        result = self.service.plan_create_contract(contract, deposit)

        assert result.plan.unit_patch.changes["status"] == ApartmentStatus.SOLD
        assert result.plan.initial_payment.contract_id == "s1"
        assert result.plan.initial_payment.client_id == "c1"

    def test_invalid_deposit_rejects_plan(self):
        result = self.service.plan_create_contract(sale(), Payment(amount_dh=0.0, payment_for="Avance"))
        assert result.success is False
        assert result.error_code == "VALIDATION_ERROR"

    def test_delete_cascades_to_payments_client_and_unit(self):
        contract = rental()
        payments = [
            Payment(id="p1", contract_id="k1", amount_dh=4000.0),
            Payment(id="p2", contract_id="k1", amount_dh=4000.0, status=PaymentStatus.CANCELED),
            Payment(id="p3", contract_id="other", amount_dh=4000.0),
        ]
        unit = Apartment(id="a1", name="A1", status=ApartmentStatus.RENTED, current_contract_id="k1")

        result = self.service.plan_delete_contract(contract, payments, Client(id="c1"), unit)

        plan = result.plan
        assert plan.contract_id == "k1"
        assert plan.payment_ids_to_delete == ["p1", "p2"]
        assert plan.client_patch.array_remove == {"contracts": ["k1"]}
        assert plan.unit_patch.changes == {
            "status": ApartmentStatus.AVAILABLE,
            "current_contract_id": None,
        }

    def test_delete_leaves_unit_held_by_another_contract(self):
        unit = Apartment(id="a1", name="A1", status=ApartmentStatus.RENTED, current_contract_id="k2")

        result = self.service.plan_delete_contract(rental(), [], None, unit)

        assert result.plan.unit_patch is None
        assert result.plan.client_patch.document_id == "c1"
