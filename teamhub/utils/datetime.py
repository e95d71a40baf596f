"""Timezone handling for stored and presented timestamps.

Timestamps are stored as naive datetimes expressed in the application
timezone and handed back to callers as aware datetimes. The timezone is
chosen once at startup with :func:`configure_app_timezone`.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE: Final[str] = "America/Sao_Paulo"
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)

_timezone_name: str = DEFAULT_TIMEZONE


def configure_app_timezone(tz_name: str | None) -> None:
    """Use ``tz_name`` (an IANA name or ``UTC±HH[:MM]``) from now on."""

    global _timezone_name
    _timezone_name = (tz_name or "").strip() or DEFAULT_TIMEZONE
    get_app_timezone.cache_clear()


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    zone = parse_timezone(_timezone_name)
    if zone is None:
        logger.warning(
            "Unknown timezone %r, falling back to %s", _timezone_name, DEFAULT_TIMEZONE
        )
        zone = ZoneInfo(DEFAULT_TIMEZONE)
    return zone


def parse_timezone(name: str) -> tzinfo | None:
    """Return the zone called ``name`` or a fixed offset, ``None`` if neither."""

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        pass
    match = _OFFSET_PATTERN.match(name)
    if match is None:
        return None
    offset = timedelta(hours=int(match["hours"]), minutes=int(match["minutes"] or 0))
    return timezone(-offset if match["sign"] == "-" else offset)


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def now_in_app_naive_datetime() -> datetime:
    """Current wall-clock time in the app timezone, as stored in the database."""

    return now_in_app_timezone().replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Attach the app timezone to naive values, convert aware ones."""

    if value is None:
        return None
    zone = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Return ``value`` in the app timezone with ``tzinfo`` stripped.

    SQLite ``DATETIME`` columns silently drop offsets, so the localized
    wall-clock time is what gets stored.
    """

    localized = ensure_app_timezone(value)
    return None if localized is None else localized.replace(tzinfo=None)
