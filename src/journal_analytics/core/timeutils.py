"""Timestamp parsing and calendar bucketing helpers.

Every trade date, and every date-range bound in a filter, goes through
:func:`parse_timestamp` so that comparisons always use one parser.

Convention
----------
* Naive ISO date-times (``2024-01-05T10:00:00``) are wall-clock local time.
* Bare dates (``2024-01-05``) are UTC midnight, so a date-range bound
  selects the same instant on every machine.
* Aware strings (``...Z`` / ``...+02:00``) are converted to the requested
  zone, or to the system local zone when none is given, before a calendar
  key (hour, day, week, month) is derived.
* Instants are compared with :func:`timestamp_of`, which treats naive values
  as local time, so naive and aware values can be ordered together.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ConfigError, InvalidTimestampError

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

SUNDAY = 6  # datetime.weekday() value

_DATE_ONLY = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 date or date-time string.

    Raises :class:`InvalidTimestampError` for anything ``fromisoformat``
    rejects; malformed dates are a caller contract violation.
    """
    if not isinstance(value, str):
        raise InvalidTimestampError(value)
    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise InvalidTimestampError(value) from exc
    if _DATE_ONLY.fullmatch(text):
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Turn an IANA zone name into a tzinfo (None keeps system local)."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"Unknown timezone: {name!r}") from exc


def to_local(moment: datetime, tz: tzinfo | None = None) -> datetime:
    """Wall-clock view of *moment* used for calendar bucketing."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(tz)


def timestamp_of(value: str) -> float:
    """POSIX seconds for an ISO string, naive values read as local time."""
    return parse_timestamp(value).timestamp()


def local_time(value: str, tz: tzinfo | None = None) -> datetime:
    return to_local(parse_timestamp(value), tz)


def day_key(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d")


def month_key(moment: datetime) -> str:
    return moment.strftime("%Y-%m")


def hour_key(moment: datetime) -> str:
    return f"{moment.hour}:00"


def weekday_name(moment: datetime) -> str:
    return DAY_NAMES[moment.weekday()]


def start_of_week(moment: datetime, week_start: int = SUNDAY) -> date:
    """First calendar day of the week containing *moment*.

    ``week_start`` uses ``datetime.weekday()`` numbering (0=Monday,
    6=Sunday).
    """
    offset = (moment.weekday() - week_start) % 7
    return moment.date() - timedelta(days=offset)


def date_portion(value: str) -> str:
    """Date part of an ISO string exactly as written (no zone conversion)."""
    return value.split("T", 1)[0]
