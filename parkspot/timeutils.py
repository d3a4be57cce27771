"""Timestamp helpers.

Everything inside the service is a timezone-aware UTC ``datetime``. Inputs
without an offset are interpreted in a configured zone before conversion.
"""

from datetime import datetime, timezone
from functools import lru_cache
from typing import Callable, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from parkspot.exceptions import ValidationError

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@lru_cache(maxsize=None)
def get_zone(name: str) -> Union[ZoneInfo, timezone]:
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError as exc:
        raise ValidationError(f"Unknown timezone: {name}") from exc


def to_utc(value: datetime, naive_zone: Optional[str] = None) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    A naive value is read as wall-clock time in ``naive_zone`` (UTC when not
    given), so ``to_utc(datetime(2024, 1, 1, 10, 0), "Asia/Kolkata")`` yields
    04:30 UTC.
    """
    if not isinstance(value, datetime):
        raise ValidationError("Timestamp must be a datetime.")
    if value.tzinfo is None:
        value = value.replace(tzinfo=get_zone(naive_zone or "UTC"))
    return value.astimezone(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Attach UTC to naive values loaded from backends without tz support."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
