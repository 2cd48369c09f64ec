"""
Unit tests for RentLedgerService domain service.
"""

from datetime import date

from backoffice.domain.models.contract import Contract, ContractStatus, ContractType
from backoffice.domain.models.payment import Payment, PaymentStatus
from backoffice.domain.services.rent_ledger_service import RentLedgerService


def rent(contract_id: str, label: str, amount: float = 4000.0, status=PaymentStatus.PAID) -> Payment:
    return Payment(
        contract_id=contract_id,
        amount_dh=amount,
        payment_for=f"Loyer {label}",
        payment_date=date(2024, 1, 20),
        status=status,
    )


class TestRentLedgerService:
    """Test cases for RentLedgerService domain service."""

    def setup_method(self):
        """Set up test fixtures."""
        self.ledger = RentLedgerService()
        self.contract = Contract.create_rental(
            client_id="c1",
            apartment_id="a1",
            project_id="p1",
            amount_dh=4000.0,
            start_date=date(2024, 1, 15),
            duration_months=12,
            contract_id="k1",
        )
        self.as_of = date(2024, 4, 20)

    def test_no_payments_all_due_months_overdue(self):
        """Nothing paid after four due dates."""
        assert self.ledger.months_elapsed(self.contract, self.as_of) == 4
        assert self.ledger.expected_total(self.contract, self.as_of) == 16000.0
        assert self.ledger.months_overdue(self.contract, [], self.as_of) == 4

    def test_one_month_paid(self):
        payments = [rent("k1", "Janvier 2024")]

        assert self.ledger.unpaid_months(self.contract, payments, self.as_of) == [
            "Février 2024", "Mars 2024", "Avril 2024"
        ]
        assert self.ledger.months_overdue(self.contract, payments, self.as_of) == 3

    def test_month_before_due_date_is_not_listed(self):
        # April's due date (the 15th) is not reached on the 14th
        unpaid = self.ledger.unpaid_months(self.contract, [], date(2024, 4, 14))
        assert unpaid == ["Janvier 2024", "Février 2024", "Mars 2024"]

    def test_label_matching_is_case_insensitive(self):
        payments = [rent("k1", "JANVIER 2024"), rent("k1", "février 2024")]
        assert self.ledger.unpaid_months(self.contract, payments, self.as_of) == [
            "Mars 2024", "Avril 2024"
        ]

    def test_partial_month_counts_as_unpaid(self):
        payments = [rent("k1", "Janvier 2024", amount=2000.0)]
        assert "Janvier 2024" in self.ledger.unpaid_months(self.contract, payments, self.as_of)

    def test_split_payments_for_one_month_add_up(self):
        payments = [rent("k1", "Janvier 2024", 2000.0), rent("k1", "Janvier 2024", 2000.0)]
        assert "Janvier 2024" not in self.ledger.unpaid_months(self.contract, payments, self.as_of)

    def test_non_paid_payments_are_ignored(self):
        payments = [
            rent("k1", "Janvier 2024", status=PaymentStatus.LATE),
            rent("k1", "Février 2024", status=PaymentStatus.CANCELED),
        ]
        assert self.ledger.months_overdue(self.contract, payments, self.as_of) == 4
        assert len(self.ledger.unpaid_months(self.contract, payments, self.as_of)) == 4

    def test_other_contract_payments_are_ignored(self):
        payments = [rent("other", "Janvier 2024")]
        assert self.ledger.months_overdue(self.contract, payments, self.as_of) == 4

    def test_unpaid_months_bounded_by_end_date(self):
        """The due date falling on end_date is the last one walked."""
        unpaid = self.ledger.unpaid_months(self.contract, [], date(2025, 6, 1))

        assert len(unpaid) == 13
        assert unpaid[0] == "Janvier 2024"
        assert unpaid[-1] == "Janvier 2025"

    def test_end_date_month_listed_once_it_is_reached(self):
        assert self.ledger.unpaid_months(self.contract, [], date(2025, 1, 14))[-1] == "Décembre 2024"
        assert self.ledger.unpaid_months(self.contract, [], date(2025, 1, 15))[-1] == "Janvier 2025"

    def test_months_overdue_capped_at_duration(self):
        assert self.ledger.months_overdue(self.contract, [], date(2027, 1, 1)) == 12

    def test_months_elapsed_stops_at_end_date_without_duration(self):
        legacy = Contract(
            id="k9", type=ContractType.RENTAL, status=ContractStatus.ENDED, amount_dh=4000.0,
            start_date=date(2024, 1, 15), end_date=date(2024, 6, 10),
        )

        assert self.ledger.months_elapsed(legacy, date(2024, 6, 10)) == 5
        assert self.ledger.months_elapsed(legacy, date(2026, 1, 1)) == 5
        assert self.ledger.months_overdue(legacy, [], date(2026, 1, 1)) == 5

    def test_fully_paid_has_no_arrears(self):
        labels = ["Janvier 2024", "Février 2024", "Mars 2024", "Avril 2024"]
        payments = [rent("k1", label) for label in labels]

        assert self.ledger.months_overdue(self.contract, payments, self.as_of) == 0
        assert self.ledger.unpaid_months(self.contract, payments, self.as_of) == []

    def test_overpayment_never_negative(self):
        payments = [rent("k1", "Janvier 2024", amount=100000.0)]
        assert self.ledger.months_overdue(self.contract, payments, self.as_of) == 0

    def test_shortfall_within_tolerance_is_ignored(self):
        payments = [rent("k1", "Janvier 2024", amount=15999.5)]
        assert self.ledger.months_overdue(self.contract, payments, self.as_of) == 0

    def test_custom_tolerance(self):
        ledger = RentLedgerService(overdue_tolerance_dh=0.0)
        payments = [rent("k1", "Janvier 2024", amount=15999.5)]
        assert ledger.months_overdue(self.contract, payments, self.as_of) == 1

    def test_cash_view_and_month_view_may_disagree(self):
        """Mislabeled rent covers the cash total but not the calendar month."""
        payments = [rent("k1", label) for label in ["Janvier 2024"] * 4]

        assert self.ledger.months_overdue(self.contract, payments, self.as_of) == 0
        assert self.ledger.unpaid_months(self.contract, payments, self.as_of) == [
            "Février 2024", "Mars 2024", "Avril 2024"
        ]

    def test_before_start_nothing_is_due(self):
        as_of = date(2024, 1, 1)
        assert self.ledger.months_overdue(self.contract, [], as_of) == 0
        assert self.ledger.unpaid_months(self.contract, [], as_of) == []

    def test_idempotent(self):
        payments = [rent("k1", "Janvier 2024")]
        first = self.ledger.rental_ledger(self.contract, payments, self.as_of)
        second = self.ledger.rental_ledger(self.contract, payments, self.as_of)
        assert first == second

    def test_sale_contract_has_neutral_figures(self):
        sale = Contract.create_sale("c1", "a1", "p1", 850000.0, date(2024, 1, 1), contract_id="s1")

        assert self.ledger.unpaid_months(sale, [], self.as_of) == []
        assert self.ledger.months_overdue(sale, [], self.as_of) == 0

    def test_zero_rent_has_no_arrears(self):
        contract = Contract(
            id="k0", type=ContractType.RENTAL, amount_dh=0.0,
            start_date=date(2024, 1, 1), duration_months=12, end_date=date(2025, 1, 1),
        )
        assert self.ledger.months_overdue(contract, [], self.as_of) == 0


class TestDurationText:
    """Test cases for render_duration_text and months_left."""

    def setup_method(self):
        self.ledger = RentLedgerService()
        self.contract = Contract.create_rental(
            "c1", "a1", "p1", 4000.0, date(2024, 1, 15), 12, contract_id="k1"
        )

    def test_months_remaining(self):
        assert self.ledger.render_duration_text(self.contract, date(2024, 4, 20)) == "9 months remaining"

    def test_less_than_a_month(self):
        assert self.ledger.render_duration_text(self.contract, date(2025, 1, 10)) == "Less than a month"

    def test_expires_this_month(self):
        assert self.ledger.render_duration_text(self.contract, date(2025, 1, 15)) == "Expires this month"

    def test_expired(self):
        assert self.ledger.render_duration_text(self.contract, date(2025, 1, 16)) == "Expired"

    def test_sale(self):
        sale = Contract.create_sale("c1", "a1", "p1", 1.0, date(2024, 1, 1))
        assert self.ledger.render_duration_text(sale, date(2024, 1, 1)) == "Sale"

    def test_ended_rental_shows_duration(self):
        self.contract.status = ContractStatus.ENDED
        assert self.ledger.render_duration_text(self.contract, date(2024, 4, 20)) == "12 months"

    def test_months_left(self):
        assert self.ledger.months_left(self.contract, date(2024, 4, 20)) == 8
        assert self.ledger.months_left(self.contract, date(2025, 2, 1)) == 0
