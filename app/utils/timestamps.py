"""
Timestamp helpers.

Timestamps are created as timezone-aware UTC datetimes. Some backends (SQLite)
hand them back without tzinfo, so formatting treats a naive value as UTC.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def as_utc(dt: datetime) -> datetime:
    """Attach UTC to a naive datetime, convert an aware one to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_iso_millis(dt: datetime) -> str:
    """Format a datetime in UTC as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    dt = as_utc(dt)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"
