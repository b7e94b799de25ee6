import calendar
from datetime import UTC, datetime


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite drops tzinfo so all stored datetimes are naive UTC."""
    return datetime.now(UTC).replace(tzinfo=None)


def to_epoch_seconds(value: datetime) -> int:
    """Whole seconds since the epoch for a naive-UTC or aware datetime."""
    return calendar.timegm(value.utctimetuple())
