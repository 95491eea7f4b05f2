"""Calendar month helpers working on naive local dates."""

from collections.abc import Iterator
import calendar
from datetime import date, datetime


def parse_local_date(value: object) -> date | None:
    """Normalize a stored date value into a local calendar date.

    Accepts ``date`` and ``datetime`` instances, ``YYYY-MM-DD`` strings and
    ISO datetime strings. Time and timezone components are dropped so a
    balance recorded late in the day never shifts to another day.

    Args:
        value: Raw date value from storage or a caller.

    Returns:
        date | None: Parsed date, or None when the value is not a valid date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def month_key(day: date) -> str:
    """Return the ``YYYY-MM`` key of the month containing ``day``."""
    return f"{day.year:04d}-{day.month:02d}"


def parse_month_key(key: str) -> date:
    """Return the first day of the month named by a ``YYYY-MM`` key.

    Raises:
        ValueError: If the key is not a valid month key.
    """
    year, _, month = key.partition("-")
    return date(int(year), int(month), 1)


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_end(day: date) -> date:
    """Return the last calendar day of the month containing ``day``."""
    last_day = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=last_day)


def add_months(day: date, months: int) -> date:
    """Shift ``day`` by whole months, clamping to the target month length."""
    year = day.year + (day.month - 1 + months) // 12
    month = (day.month - 1 + months) % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def iter_months(start: date, end: date) -> Iterator[date]:
    """Yield the first day of every month from ``start`` to ``end``.

    Both bounds are inclusive; nothing is yielded when ``start`` falls in a
    later month than ``end``.
    """
    current = month_start(start)
    last = month_start(end)
    while current <= last:
        yield current
        current = add_months(current, 1)


__all__ = [
    "parse_local_date",
    "month_key",
    "parse_month_key",
    "month_start",
    "month_end",
    "add_months",
    "iter_months",
]
