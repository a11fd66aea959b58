"""Datetime helpers bound to the portal's local timezone.

Deadlines (policy expiry, review dates, anniversaries) are stored as naive
wall-clock values in the application timezone, New Zealand by default.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from compliance_notifier.config import get_settings

FALLBACK_TIMEZONE: Final[str] = "Pacific/Auckland"

_UTC_OFFSET: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)\s*(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)
_DAY: Final[timedelta] = timedelta(days=1)


def _fixed_offset(name: str) -> tzinfo | None:
    match = _UTC_OFFSET.match(name)
    if match is None:
        return None
    offset = timedelta(
        hours=int(match.group("hours")), minutes=int(match.group("minutes") or 0)
    )
    return timezone(-offset if match.group("sign") == "-" else offset)


@lru_cache(maxsize=8)
def _zone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return _fixed_offset(name) or ZoneInfo(FALLBACK_TIMEZONE)


def get_app_timezone() -> tzinfo:
    """Return the zone named by ``APP_TIMEZONE``.

    IANA names and ``UTC+12``-style offsets are accepted; anything else falls
    back to ``Pacific/Auckland``.
    """

    name = (get_settings().app_timezone or "").strip()
    return _zone(name or FALLBACK_TIMEZONE)


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def now_in_app_naive_datetime() -> datetime:
    """Current wall-clock time in the app timezone, as stored in the database."""

    return now_in_app_timezone().replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Attach (naive input) or convert to (aware input) the app timezone."""

    if value is None:
        return None
    zone = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Return the app-timezone wall-clock value of ``value`` for storage."""

    if value is None:
        return None
    return ensure_app_timezone(value).replace(tzinfo=None)


def days_until(target: datetime, now: datetime) -> int:
    """Whole days from ``now`` until ``target``, rounded up; negative once past."""

    remaining = ensure_app_timezone(target) - ensure_app_timezone(now)
    return math.ceil(remaining / _DAY)
