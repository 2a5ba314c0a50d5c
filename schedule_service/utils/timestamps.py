"""Timestamp parsing and formatting helpers.

All timestamps travel on the wire as RFC 3339 strings and are stored in UTC.
"""

import re
from datetime import datetime, timezone
from typing import Optional

_RFC3339_PATTERN = re.compile(
    r'^(?P<date>\d{4}-\d{2}-\d{2})[Tt]'
    r'(?P<time>\d{2}:\d{2}:\d{2})'
    r'(?:\.(?P<fraction>\d+))?'
    r'(?P<offset>[Zz]|[+-]\d{2}:\d{2})$'
)


def parse_rfc3339(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp into a timezone-aware datetime.

    A time zone designator is mandatory. Fractional seconds beyond
    microsecond precision are truncated.

    Raises:
        ValueError: If the value is not a valid RFC 3339 timestamp
    """
    match = _RFC3339_PATTERN.fullmatch(value)
    if not match:
        raise ValueError(f"not an RFC 3339 timestamp: {value!r}")

    offset = match.group('offset')
    if offset in ('Z', 'z'):
        offset = '+00:00'

    iso = f"{match.group('date')}T{match.group('time')}"
    fraction = match.group('fraction')
    if fraction:
        iso += '.' + fraction[:6].ljust(6, '0')

    # fromisoformat validates the calendar values (month 13, hour 25, ...)
    return datetime.fromisoformat(iso + offset)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to UTC.

    Naive datetimes are assumed to already be UTC, which is how they come
    back from backends that do not keep the offset (SQLite).
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def now_utc() -> datetime:
    """Get the current time in UTC."""
    return datetime.now(timezone.utc)


def format_rfc3339(value: datetime) -> str:
    """Format a datetime as an RFC 3339 string in UTC with a ``Z`` suffix."""
    return ensure_utc(value).isoformat().replace('+00:00', 'Z')
