"""
Time utilities for the diagnosis backend.
"""

from datetime import datetime, timedelta, timezone

JST = timezone(timedelta(hours=9), name="JST")


def utcnow() -> datetime:
    """Get current UTC time (timezone-aware, Python 3.12+ compatible)."""
    return datetime.now(timezone.utc)


def jst_timestamp(now: datetime | None = None) -> str:
    """
    ISO-8601 timestamp in Japan Standard Time with millisecond precision.

    The offset is always written as +09:00, independent of the host timezone.

    Examples:
        >>> jst_timestamp(datetime(2025, 6, 29, 6, 0, tzinfo=timezone.utc))
        '2025-06-29T15:00:00.000+09:00'
    """
    moment = now or utcnow()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(JST).isoformat(timespec="milliseconds")
