"""
Calendar utilities working at month granularity.

All computations use plain calendar dates. Datetimes are converted to their UTC
calendar day first so that a payment recorded late in the evening never drifts
into the next month.
"""

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple, Union

MONTH_NAMES = (
    "Janvier", "Février", "Mars", "Avril", "Mai", "Juin",
    "Juillet", "Août", "Septembre", "Octobre", "Novembre", "Décembre",
)

_MONTH_NUMBERS = {name.lower(): index + 1 for index, name in enumerate(MONTH_NAMES)}

DateLike = Union[date, datetime, str]


def today_utc() -> date:
    """Today's calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def as_calendar_date(value: DateLike) -> date:
    """Normalize a date, datetime or ISO string to a calendar date."""
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return date.fromisoformat(text)
        value = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def add_months(value: date, months: int) -> date:
    """
    Shift a date by whole months.
    The day of month is clamped to the last day of the target month.
    """
    month_index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(value.day, last_day))


def months_between(start: date, end: date) -> int:
    """
    Whole months elapsed from start to end.

    A month counts once its monthly due date (start's day of month, clamped) has
    been reached. The result is negative when end precedes start.
    """
    if end < start:
        return -months_between(end, start)
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if add_months(start, months) > end:
        months -= 1
    return months


def due_dates_reached(start: date, as_of: date) -> int:
    """Number of monthly due dates on or after start that fall on or before as_of."""
    if as_of < start:
        return 0
    return months_between(start, as_of) + 1


def started_months(start: date, end: date) -> int:
    """Whole months from start to end, counting a started month as a full one."""
    months = months_between(start, end)
    if add_months(start, months) < end:
        months += 1
    return months


def month_label(value: date) -> str:
    """Human label for the month of a date, e.g. 'Février 2024'."""
    return f"{MONTH_NAMES[value.month - 1]} {value.year}"


def parse_month_label(label: str) -> Optional[Tuple[int, int]]:
    """
    Parse '<MonthName> <Year>' (any case) into a (year, month) key.
    Returns None when the text is not a month label.
    """
    parts = label.strip().lower().split()
    if len(parts) != 2 or parts[0] not in _MONTH_NUMBERS:
        return None
    try:
        year = int(parts[1])
    except ValueError:
        return None
    return year, _MONTH_NUMBERS[parts[0]]


def month_start(value: date) -> date:
    """First day of the month containing value."""
    return value.replace(day=1)


def previous_month_range(value: date) -> Tuple[date, date]:
    """First and last day of the calendar month before value."""
    last_day = month_start(value) - timedelta(days=1)
    return month_start(last_day), last_day
