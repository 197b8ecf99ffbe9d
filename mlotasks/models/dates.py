"""Date/time helpers shared by the models and the derived-state engine.

All instants are handled as timezone-aware UTC datetimes. Naive values
(e.g. from older exports) are interpreted as UTC.
"""

from datetime import date, datetime, time, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current instant (timezone-aware, UTC)."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a datetime to aware UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def combine_utc(day: date, at: Optional[time] = None) -> datetime:
    """Combine a date and optional time-of-day into a UTC instant (midnight when no time)."""
    moment = at or time(0, 0)
    if moment.tzinfo is not None:
        moment = moment.replace(tzinfo=None)
    return datetime.combine(day, moment, tzinfo=timezone.utc)


def whole_days_between(earlier: datetime, later: datetime) -> int:
    """Floor of the number of days elapsed from `earlier` to `later`."""
    delta = ensure_utc(later) - ensure_utc(earlier)
    return delta.days


def parse_instant(value: str) -> datetime:
    """Parse an ISO-8601 instant such as "2024-05-01T18:00:00.000Z" to aware UTC."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))
