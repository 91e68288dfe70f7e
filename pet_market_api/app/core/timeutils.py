"""Timestamp helpers.

Records carry ISO-8601 UTC timestamps with millisecond precision and a
trailing ``Z`` (``2026-10-19T08:30:00.123Z``), the format browsers
produce with ``Date.toISOString``.
"""

from datetime import datetime, timezone
from typing import Any

# Sort key for records whose timestamp is missing or unreadable.
OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def now_iso() -> str:
    """Return the current instant formatted for storage."""
    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Any) -> datetime:
    """Parse a stored timestamp into an aware ``datetime``.

    Naive values are taken to be UTC.  Anything that cannot be parsed
    returns ``OLDEST`` so it sorts as the oldest entry.
    """
    if not isinstance(value, str) or not value:
        return OLDEST
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return OLDEST
