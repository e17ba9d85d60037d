# app/services/timestamps.py
from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.exceptions import ConfigurationError, InvalidTimestampError


def to_local(value: Any, tz: tzinfo = timezone.utc, event_id: str | None = None) -> datetime:
    """
    Normalize a raw punch timestamp into an aware datetime in `tz`.

    Accepted inputs
    ---------------
    - datetime: naive values are read as wall-clock time in `tz`,
      aware values are converted to `tz`.
    - int / float: epoch milliseconds.
    - str: ISO-8601, a trailing 'Z' is accepted for UTC.

    Anything else (None, empty strings, booleans, garbage) raises
    InvalidTimestampError.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=tz)
        except (OverflowError, OSError, ValueError) as exc:
            raise InvalidTimestampError(value, event_id) from exc
    elif isinstance(value, str) and value.strip():
        try:
            dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as exc:
            raise InvalidTimestampError(value, event_id) from exc
    else:
        raise InvalidTimestampError(value, event_id)

    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    try:
        return dt.astimezone(tz)
    except (OverflowError, ValueError) as exc:
        raise InvalidTimestampError(value, event_id) from exc


def as_instant(dt: datetime) -> datetime:
    """
    The same moment in UTC.

    Aware datetimes sharing one tzinfo object compare and subtract by wall
    clock, ignoring DST offset changes; ordering and durations go through
    this instead.
    """
    return dt.astimezone(timezone.utc)


def today_in(tz: tzinfo) -> date:
    """
    Current calendar day in `tz`.

    This is the only wall-clock read in the service and is used by the HTTP
    layer; the reconciliation engine always receives `today` explicitly.
    """
    return datetime.now(tz=tz).date()


def resolve_timezone(name: str | None) -> tzinfo:
    """
    Resolve an IANA timezone name. Empty or 'UTC' yields timezone.utc.
    """
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown timezone '{name}'") from exc
