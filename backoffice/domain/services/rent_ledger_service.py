"""Rent ledger service.
Computes arrears and unpaid calendar months for rental contracts.
"""

import math
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple

from backoffice.domain.calendar import (
    add_months,
    due_dates_reached,
    month_label,
    months_between,
    parse_month_label,
    today_utc,
)
from backoffice.domain.models.contract import Contract
from backoffice.domain.models.payment import Payment, paid_total


class RentLedgerService:
    """
    Domain service for rental arrears.

    Two views of the same ledger are exposed and may legitimately disagree when
    payments are mislabeled:
    - `unpaid_months` lists calendar months lacking a matching rent payment;
    - `months_overdue` compares cumulative cash paid with cumulative rent due.
    """

    def __init__(self, overdue_tolerance_dh: float = 1.0):
        self.overdue_tolerance_dh = overdue_tolerance_dh

    def paid_by_month(
        self,
        contract: Contract,
        payments: Iterable[Payment]
    ) -> Dict[Tuple[int, int], float]:
        """Paid rent per (year, month) taken from 'Loyer <Month> <Year>' descriptions."""
        totals: Dict[Tuple[int, int], float] = {}
        for payment in payments:
            if payment.contract_id != contract.id or not payment.is_paid:
                continue
            label = payment.rent_month_label
            key = parse_month_label(label) if label else None
            if key is None:
                continue
            totals[key] = totals.get(key, 0.0) + payment.amount_dh
        return totals

    def unpaid_months(
        self,
        contract: Contract,
        payments: Iterable[Payment],
        as_of: Optional[date] = None
    ) -> List[str]:
        """
        Month labels from the lease start up to min(as_of, end_date), both
        inclusive, whose recorded rent is below the monthly amount. Partial
        payments count as unpaid.
        """
        if not contract.is_rental or contract.end_date is None or contract.start_date is None:
            return []

        as_of = as_of or today_utc()
        paid = self.paid_by_month(contract, payments)

        unpaid: List[str] = []
        limit = min(as_of, contract.end_date)
        index = 0
        due_date = contract.start_date
        while due_date <= limit:
            if paid.get((due_date.year, due_date.month), 0.0) < contract.amount_dh:
                unpaid.append(month_label(due_date))
            index += 1
            due_date = add_months(contract.start_date, index)
        return unpaid

    def months_elapsed(self, contract: Contract, as_of: date) -> int:
        """Monthly due dates reached by as_of, capped at the lease end and duration."""
        if contract.start_date is None:
            return 0
        if contract.end_date is not None and contract.end_date < as_of:
            as_of = contract.end_date
        elapsed = due_dates_reached(contract.start_date, as_of)
        if contract.duration_months and elapsed > contract.duration_months:
            elapsed = contract.duration_months
        return elapsed

    def expected_total(self, contract: Contract, as_of: date) -> float:
        """Cumulative rent due by as_of."""
        return max(0.0, self.months_elapsed(contract, as_of) * contract.amount_dh)

    def months_overdue(
        self,
        contract: Contract,
        payments: Iterable[Payment],
        as_of: Optional[date] = None
    ) -> int:
        """Months of rent the tenant is behind, on a cumulative cash basis."""
        if not contract.is_rental or contract.start_date is None or contract.amount_dh <= 0:
            return 0

        as_of = as_of or today_utc()
        expected = self.expected_total(contract, as_of)
        total_paid = paid_total(payments, contract.id)

        if total_paid < expected - self.overdue_tolerance_dh:
            return math.ceil((expected - total_paid) / contract.amount_dh)
        return 0

    def months_left(self, contract: Contract, as_of: Optional[date] = None) -> int:
        """Recompute the advisory `months_left` cache of a lease."""
        if contract.end_date is None:
            return 0
        as_of = as_of or today_utc()
        if contract.end_date <= as_of:
            return 0
        return max(0, months_between(as_of, contract.end_date))

    def render_duration_text(self, contract: Contract, as_of: Optional[date] = None) -> str:
        """Short duration/expiry label shown next to a contract."""
        if contract.is_sale:
            return "Sale"

        if not contract.is_active or contract.end_date is None:
            return f"{contract.duration_months or 0} months"

        as_of = as_of or today_utc()
        end_date = contract.end_date
        if end_date < as_of:
            return "Expired"

        months_left = (end_date.year - as_of.year) * 12 + (end_date.month - as_of.month)
        if months_left == 0 and end_date.day > as_of.day:
            return "Less than a month"
        if months_left <= 0:
            return "Expires this month"
        return f"{months_left} months remaining"

    def rental_ledger(
        self,
        contract: Contract,
        payments: List[Payment],
        as_of: Optional[date] = None
    ) -> Dict[str, Any]:
        """All rent figures for one contract, computed against a single as_of date."""
        as_of = as_of or today_utc()
        return {
            "contract_id": contract.id,
            "monthly_rent": contract.amount_dh,
            "months_elapsed": self.months_elapsed(contract, as_of),
            "expected_total": self.expected_total(contract, as_of),
            "total_paid": paid_total(payments, contract.id),
            "months_overdue": self.months_overdue(contract, payments, as_of),
            "unpaid_months": self.unpaid_months(contract, payments, as_of),
            "months_left": self.months_left(contract, as_of),
            "duration_text": self.render_duration_text(contract, as_of),
        }
