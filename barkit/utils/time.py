"""Conversions between UTC datetimes and epoch microseconds."""

from datetime import datetime, timedelta, timezone
from typing import Union

MICROS_PER_SECOND = 1_000_000
MICROS_PER_DAY = 86_400 * MICROS_PER_SECOND

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_epoch_micro(value: datetime) -> int:
    """
    Convert a datetime to microseconds since the Unix epoch.

    Naive datetimes are interpreted as UTC.

    Args:
        value: Datetime to convert

    Returns:
        Integer microseconds since 1970-01-01T00:00Z
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    delta = value - EPOCH
    return (delta.days * 86_400 + delta.seconds) * MICROS_PER_SECOND + delta.microseconds


def to_datetime(epoch_micro: int) -> datetime:
    """Convert epoch microseconds to an aware UTC datetime."""
    return EPOCH + timedelta(microseconds=epoch_micro)


def as_epoch_micro(value: Union[int, datetime]) -> int:
    """Accept either epoch microseconds or a datetime."""
    if isinstance(value, datetime):
        return to_epoch_micro(value)
    return int(value)
