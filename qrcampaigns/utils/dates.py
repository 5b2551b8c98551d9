"""
Timestamp helpers. Everything is stored as naive UTC; analytics windows are
computed in a configurable local zone.
"""
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    """Current time as naive UTC, matching how timestamps are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Normalise an aware datetime to naive UTC; naive values are assumed to be UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def resolve_day(value: str, tz_name: str, now: datetime = None) -> date:
    """
    Turn "today" or an ISO "YYYY-MM-DD" string into a calendar day in `tz_name`.
    Raises ValueError for anything else.
    """
    if value == "today":
        current = now or utcnow()
        return current.replace(tzinfo=timezone.utc).astimezone(ZoneInfo(tz_name)).date()
    return date.fromisoformat(value)


def day_bounds_utc(day: date, tz_name: str) -> tuple[datetime, datetime]:
    """[start, end) of a local calendar day, expressed as naive UTC."""
    tz = ZoneInfo(tz_name)
    start_local = datetime.combine(day, time.min, tzinfo=tz)
    end_local = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return to_naive_utc(start_local), to_naive_utc(end_local)


def local_hour(value: datetime, tz_name: str) -> int:
    """Hour of day (0-23) of a naive UTC timestamp, seen from `tz_name`."""
    return value.replace(tzinfo=timezone.utc).astimezone(ZoneInfo(tz_name)).hour
