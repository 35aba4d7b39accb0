"""Calendar helpers for dated sessions."""

import calendar
from datetime import date

from club_attendance.domain.errors import ValidationError
from club_attendance.domain.models import Ledger

POLISH_HOLIDAYS = frozenset(
    {
        "01-01",
        "01-06",
        "05-01",
        "05-03",
        "08-15",
        "11-01",
        "11-11",
        "12-25",
        "12-26",
    }
)


def validate_iso_date(value: str) -> str:
    """Return the value if it is a zero-padded ``YYYY-MM-DD`` calendar date."""
    try:
        parsed = date.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid date: {value!r}") from exc
    # fromisoformat also accepts compact forms like 20240301
    if parsed.isoformat() != value:
        raise ValidationError(f"Invalid date: {value!r}")
    return value


def is_polish_holiday(day: date) -> bool:
    """Return True for fixed-date Polish public holidays."""
    return f"{day.month:02d}-{day.day:02d}" in POLISH_HOLIDAYS


def month_days(year: int, month: int) -> list[date]:
    """Return every date of a month."""
    _, days_in_month = calendar.monthrange(year, month)
    return [date(year, month, day) for day in range(1, days_in_month + 1)]


def session_days(
    ledger: Ledger, year: int, month: int, group_id: str | None = None
) -> set[int]:
    """Return the day numbers of a month that have at least one session."""
    prefix = f"{year:04d}-{month:02d}-"
    days: set[int] = set()
    for session in ledger.sessions:
        if group_id is not None and session.group_id != group_id:
            continue
        if session.date.startswith(prefix):
            days.add(int(session.date[len(prefix) :]))
    return days
