"""Human readable date strings shared by the PDF report and the emails."""

from datetime import date, datetime, timezone, tzinfo
from typing import Optional, Union

DateLike = Union[date, datetime, str, None]


def _coerce(value: DateLike) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, (date, datetime)):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def _clock_time(value: datetime) -> str:
    hour = value.hour % 12 or 12
    return f"{hour}:{value:%M} {'AM' if value.hour < 12 else 'PM'}"


def short_date(value: DateLike) -> str:
    """Oct 5, 2025"""
    d = _coerce(value)
    if d is None:
        return ""
    return f"{d:%b} {d.day}, {d.year}"


def long_date(value: DateLike) -> str:
    """Sunday, October 5, 2025"""
    d = _coerce(value)
    if d is None:
        return ""
    return f"{d:%A}, {d:%B} {d.day}, {d.year}"


def to_zone(value: DateLike, tz: tzinfo) -> DateLike:
    """Datetimes converted to tz; naive ones are stored UTC. Other values pass through."""
    d = _coerce(value)
    if not isinstance(d, datetime):
        return d
    if d.tzinfo is None:
        d = d.replace(tzinfo=timezone.utc)
    return d.astimezone(tz)


def short_datetime(value: DateLike) -> str:
    """Oct 5, 2025 3:04 PM"""
    d = _coerce(value)
    if d is None:
        return ""
    if not isinstance(d, datetime):
        return short_date(d)
    return f"{short_date(d)} {_clock_time(d)}"


def month_day_time(value: DateLike) -> str:
    """Oct 5, 3:04 PM"""
    d = _coerce(value)
    if d is None:
        return ""
    if not isinstance(d, datetime):
        return f"{d:%b} {d.day}"
    return f"{d:%b} {d.day}, {_clock_time(d)}"


def person_name(person) -> str:
    """'First Last' for anything carrying first_name/last_name, '' when missing."""
    if person is None:
        return ""
    first = getattr(person, "first_name", None) or ""
    last = getattr(person, "last_name", None) or ""
    return f"{first} {last}".strip()
