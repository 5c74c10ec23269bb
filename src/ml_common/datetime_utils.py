"""UTC datetime utilities."""

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def unix_now() -> int:
    """Return the current unix time in whole seconds."""
    return int(time.time())


def format_unix_timestamp(timestamp: int) -> str:
    """Human-readable UTC time for a unix timestamp; '—' when unset (0).

    Timestamps past what datetime can represent (year 9999) are shown raw.
    """
    if timestamp <= 0:
        return "—"
    try:
        moment = datetime.fromtimestamp(timestamp, timezone.utc)
    except (OverflowError, ValueError, OSError):
        return f"{timestamp} (unix)"
    return moment.strftime("%Y-%m-%d %H:%M:%S UTC")
