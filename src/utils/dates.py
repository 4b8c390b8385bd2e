from __future__ import annotations

from datetime import date, datetime, timedelta

from src.application.errors import InvalidDate

DateLike = date | datetime | str


def to_day(value: DateLike | None) -> date:
    """Normalize a date-like value to a calendar day.

    Accepts `date`, `datetime` (time of day is dropped, tzinfo ignored) and ISO
    strings, with an optional time part and trailing 'Z'. Anything else raises
    InvalidDate.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDate(f"Unsupported date value: {value!r}")
    s = value.strip()
    if not s:
        raise InvalidDate("Empty date value")
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(s[:10])
    except ValueError as exc:
        raise InvalidDate(f"Unparseable date: {value!r}", details={"value": value}) from exc


def days_between(a: DateLike, b: DateLike) -> int:
    """Signed number of calendar days from `b` to `a` (a - b)."""
    return (to_day(a) - to_day(b)).days


def is_within(value: DateLike, start: DateLike, end: DateLike) -> bool:
    """True when start <= value <= end."""
    return to_day(start) <= to_day(value) <= to_day(end)


def add_days(value: DateLike, n: int) -> date:
    return to_day(value) + timedelta(days=n)


_DOW_EN = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
_MON_EN = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def format_day_date(d: DateLike | None) -> str:
    """Return 'Fri 05 Oct 2024'. Unparseable input is echoed back as-is."""
    if d is None:
        return ""
    try:
        day = to_day(d)
    except InvalidDate:
        return str(d)
    return f"{_DOW_EN[day.weekday()]} {day.day:02d} {_MON_EN[day.month - 1]} {day.year}"
