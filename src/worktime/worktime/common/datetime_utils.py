from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence, Union

from ..core.constants import HOURS_DECIMALS
from ..core.exceptions import ValidationError


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mock it easily.
    """
    return datetime.now()


def start_of_day(value: Union[date, datetime]) -> datetime:
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, time.min)


def end_of_day(value: Union[date, datetime]) -> datetime:
    """Last millisecond of the day (23:59:59.999), inclusive upper bound."""
    return start_of_day(value) + timedelta(days=1) - timedelta(milliseconds=1)


def day_window(value: Union[date, datetime]) -> tuple[datetime, datetime]:
    """Half-open window [midnight, next midnight) of the given day."""
    start = start_of_day(value)
    return start, start + timedelta(days=1)


def at_clock_time(value: Union[date, datetime], clock: time) -> datetime:
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, clock)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (expected YYYY-MM-DD): {value!r}") from None


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into a naive local datetime.

    Offsets are converted to local time and dropped, so stored values stay
    comparable with ``now_local()``.
    """
    text = (value or "").strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid timestamp: {value!r}") from None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_clock_time(value: str) -> time:
    """Parse HH:MM into a time of day."""
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid clock time (expected HH:MM): {value!r}") from None


def round_half_up(value: float, decimals: int = HOURS_DECIMALS) -> float:
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def hours_between(start: datetime, end: datetime) -> float:
    """Elapsed hours from start to end, rounded to 2 decimals."""
    return round_half_up((end - start).total_seconds() / 3600)


def mean_instant(values: Sequence[datetime]) -> datetime | None:
    """Arithmetic mean of timestamps, None for an empty sequence."""
    if not values:
        return None
    base = values[0]
    offset = sum(((v - base) for v in values), timedelta()) / len(values)
    return base + offset


def format_clock(value: datetime | None) -> str | None:
    """H:MM with the minute zero-padded (e.g. 9:05)."""
    if value is None:
        return None
    return f"{value.hour}:{value.minute:02d}"
