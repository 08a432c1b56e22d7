"""Datetime utility functions for expiry timestamps and reference instants."""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

# Format of the to="..." attribute
TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'

TIMESTAMP_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$')
OFFSET_PATTERN = re.compile(r'^([+-])(\d{2}):?(\d{2})$')


def parse_time_offset(offset: Optional[str]) -> timezone:
    """
    Parse a UTC offset such as "+09:00", "-0530" or "Z".

    Raises:
        ValueError: If the offset is not in a recognised format
    """
    if not offset or offset.strip().upper() in ('Z', 'UTC'):
        return timezone.utc

    match = OFFSET_PATTERN.match(offset.strip())
    if not match:
        raise ValueError(f"time offset must look like +HH:MM, got: {offset}")

    sign, hours, minutes = match.groups()
    delta = timedelta(hours=int(hours), minutes=int(minutes))
    if delta >= timedelta(hours=24):
        raise ValueError(f"time offset out of range: {offset}")
    return timezone(-delta if sign == '-' else delta)


def parse_timestamp(value: str, offset: Optional[str] = None) -> datetime:
    """
    Parse a marker timestamp (YYYY-MM-DD HH:MM:SS) into an aware datetime.

    Args:
        value: The timestamp text
        offset: UTC offset the timestamp is written in, default UTC

    Raises:
        ValueError: If the timestamp is not in the expected format
    """
    value = value.strip()
    if not TIMESTAMP_PATTERN.match(value):
        raise ValueError(f"timestamp must be in format YYYY-MM-DD HH:MM:SS, got: {value!r}")
    try:
        parsed = datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError as exc:
        raise ValueError(f"invalid timestamp {value!r}: {exc}") from exc
    return parsed.replace(tzinfo=parse_time_offset(offset))


def ensure_aware(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_reference_instant(value: str) -> datetime:
    """
    Parse a reference instant given on the command line.

    Accepts the marker format, ISO-8601 (a trailing Z is allowed) or a bare
    date, which means midnight UTC.

    Raises:
        ValueError: If the value cannot be parsed
    """
    value = value.strip()
    if TIMESTAMP_PATTERN.match(value):
        return parse_timestamp(value)
    try:
        parsed = datetime.fromisoformat(value[:-1] + '+00:00' if value.endswith('Z') else value)
    except ValueError as exc:
        raise ValueError(f"reference instant must be YYYY-MM-DD HH:MM:SS or ISO-8601, got: {value}") from exc
    return ensure_aware(parsed)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """Format an aware datetime the way markers write it, plus its offset."""
    offset = dt.strftime('%z')
    if offset in ('', '+0000'):
        return f"{dt.strftime(TIMESTAMP_FORMAT)} UTC"
    return f"{dt.strftime(TIMESTAMP_FORMAT)} {offset[:3]}:{offset[3:]}"
