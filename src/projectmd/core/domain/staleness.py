"""
Staleness Policy - Decide whether a task needs remote synchronization.

Both sides of the comparison are converted to aware UTC datetimes with
microsecond precision before comparing.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from ..exceptions import MalformedTimestampError


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_ONE_MICROSECOND = timedelta(microseconds=1)


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """
    Parse a stored timestamp into an aware UTC datetime.

    Accepts ISO-8601 strings (a trailing 'Z' is allowed) and datetime
    objects. Naive values are taken to be UTC.

    Raises:
        MalformedTimestampError: If the value is not a valid timestamp
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise MalformedTimestampError(value, cause=e)
    else:
        raise MalformedTimestampError(value)

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Canonical serialization used for created_at/updated_at."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_mtime_ns(mtime_ns: int) -> datetime:
    """Convert a filesystem nanosecond clock to a UTC datetime."""
    # Truncates to microseconds; rounding down never makes a file look newer.
    return EPOCH + timedelta(microseconds=mtime_ns // 1000)


def to_mtime_ns(value: datetime) -> int:
    """Convert a datetime to an integer nanosecond clock, without float math."""
    value = parse_timestamp(value)
    return ((value - EPOCH) // _ONE_MICROSECOND) * 1000


def should_sync(
    file_modified_time: datetime,
    stored_updated_at: Optional[Union[str, datetime]],
    force: bool = False,
) -> bool:
    """
    Decide whether a task must be pushed to the remote tracker.

    Args:
        file_modified_time: Last modification time of the task file
        stored_updated_at: The task's recorded synchronization time, if any
        force: Bypass the policy entirely

    Returns:
        True if the task should be synchronized

    Raises:
        MalformedTimestampError: If stored_updated_at is present but invalid
    """
    if force:
        return True

    if stored_updated_at is None:
        return True

    last_synced = parse_timestamp(stored_updated_at)
    # Equal timestamps mean the file was written by the last sync itself.
    return parse_timestamp(file_modified_time) > last_synced


__all__ = [
    "EPOCH",
    "utc_now",
    "parse_timestamp",
    "format_timestamp",
    "from_mtime_ns",
    "to_mtime_ns",
    "should_sync",
]
