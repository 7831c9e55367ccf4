from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Optional, Tuple

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def day_bounds(moment: datetime) -> Tuple[datetime, datetime]:
    """Return [start of day, end of day] for the calendar day of ``moment``."""

    start = datetime.combine(moment.date(), time.min)
    end = datetime.combine(moment.date(), time.max)
    return start, end


def _local_naive(value: datetime) -> datetime:
    # Stored and compared as naive local time, like now_local().
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def coerce_datetime(value: Any, field_name: str) -> Optional[datetime]:
    """Accept a datetime, a date or an ISO string (date or datetime).

    Values carrying a UTC offset are converted to local time before the
    offset is dropped, so two spellings of one instant compare equal.
    """

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _local_naive(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        v = value.strip()
        try:
            if len(v) == 10:
                return datetime.combine(parse_iso_date(v), time.min)
            return _local_naive(datetime.fromisoformat(v.replace("Z", "+00:00")))
        except ValueError:
            raise ValidationError(f"{field_name} is not a valid date")
    raise ValidationError(f"{field_name} is not a valid date")


def previous_day(moment: datetime) -> datetime:
    return moment - timedelta(days=1)
