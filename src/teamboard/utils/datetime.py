"""Utilities for millisecond timestamps."""

from datetime import UTC, datetime, timedelta

DAY_MS = 24 * 60 * 60 * 1000

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)


def now_ms() -> int:
    """Get current UTC time as epoch milliseconds."""
    return (datetime.now(UTC) - _EPOCH) // _ONE_MS


def from_ms(value: int) -> datetime:
    """Epoch milliseconds to an aware UTC datetime."""
    return _EPOCH + timedelta(milliseconds=value)


def to_iso(value: int) -> str:
    """Convert epoch milliseconds to an ISO format string (UTC)."""
    return from_ms(value).isoformat()


def from_iso(value: str) -> int:
    """Parse ISO format string to epoch milliseconds."""
    # Handle both 'Z' suffix and explicit timezone
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return (dt - _EPOCH) // _ONE_MS


def format_date(value: int) -> str:
    """Short display form, e.g. 'Mar 4, 2025'."""
    dt = from_ms(value)
    return f"{dt:%b} {dt.day}, {dt.year}"
