"""
UTC datetime utilities for consistent timezone handling.

Record-store dates arrive as ISO strings (either YYYY-MM-DD or full
timestamps with a trailing Z). Parse them here instead of ad hoc.
"""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def parse_iso_datetime(value: str | None) -> datetime | None:
    """
    Parse an ISO date or datetime string into a UTC-aware datetime.

    Date-only values map to midnight UTC. Unparseable input returns None
    (record-store values are user-editable and may be malformed).
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def parse_iso_date(value: str | None) -> date | None:
    """Return the calendar date of an ISO date/datetime string, or None."""
    parsed = parse_iso_datetime(value)
    return parsed.date() if parsed else None
