"""Time helpers for the deal pipeline.

`utc_now()` is the only function here that reads the wall clock. Everything
else takes "now" explicitly so snapshots stay reproducible for a fixed instant.
"""

from datetime import datetime, timedelta, timezone, tzinfo

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    """Current instant, truncated to whole milliseconds."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def ensure_utc(dt: datetime) -> datetime:
    """Return `dt` in UTC. Naive datetimes are taken to be UTC already."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def epoch_millis(dt: datetime) -> int:
    """Whole milliseconds since the Unix epoch."""
    return (ensure_utc(dt) - _EPOCH) // timedelta(milliseconds=1)


def to_iso(dt: datetime) -> str:
    """ISO-8601 UTC string with millisecond precision, e.g. 2025-01-15T12:00:00.000Z."""
    utc = ensure_utc(dt)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 string (accepts a trailing Z) into an aware UTC datetime."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(value))


def minutes_ago(minutes: float, now: datetime) -> datetime:
    return ensure_utc(now) - timedelta(minutes=minutes)


def hours_from_now(hours: float, now: datetime) -> datetime:
    return ensure_utc(now) + timedelta(hours=hours)


def format_time_of_day(dt: datetime, tz: tzinfo = timezone.utc) -> str:
    """24-hour HH:MM in the display timezone."""
    return ensure_utc(dt).astimezone(tz).strftime("%H:%M")
