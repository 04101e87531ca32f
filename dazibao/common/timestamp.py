"""
Timestamp Utilities

RFC 3339 formatting and parsing for the persisted configuration, plus the
monotonic stamping used when a block commits a tick.

Example:
    A block last stamped at 10:00:00.000001 that finishes a tick within the
    same microsecond is stamped 10:00:00.000002, so last_updated always
    moves forward.
"""

import re
from datetime import datetime, timedelta, timezone

# Timestamp of a block that has never been updated (Go-style zero time)
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_FRACTION_RE = re.compile(r"\.(\d+)")


def utc_now() -> datetime:
    """Current UTC time (timezone-aware)"""
    return datetime.now(timezone.utc)


def format_timestamp(ts: datetime) -> str:
    """
    Format a datetime as an RFC 3339 string.

    Naive datetimes are treated as UTC.
    """
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.isoformat()


def parse_timestamp(value: str | None) -> datetime:
    """
    Parse an RFC 3339 timestamp string.

    Accepts a trailing "Z" and fractional seconds of any precision
    (nanosecond values are truncated to microseconds). Missing or empty
    values map to ZERO_TIME.

    Args:
        value: Timestamp string (e.g., "2024-01-15T10:30:17.234567891Z")

    Returns:
        Timezone-aware datetime

    Raises:
        ValueError: If the string is not a valid timestamp
    """
    if not value:
        return ZERO_TIME

    cleaned = value.strip()
    if cleaned.endswith(("Z", "z")):
        cleaned = cleaned[:-1] + "+00:00"

    # fromisoformat wants at most 6 fractional digits
    cleaned = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), cleaned, count=1)

    parsed = datetime.fromisoformat(cleaned)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def next_stamp(previous: datetime, now: datetime | None = None) -> datetime:
    """
    Get a stamp strictly later than previous.

    Args:
        previous: Last stamp recorded
        now: Current time (defaults to utc_now())

    Returns:
        now, or previous + 1 microsecond if the clock has not moved past it
    """
    now = now or utc_now()
    if now <= previous:
        return previous + timedelta(microseconds=1)
    return now
