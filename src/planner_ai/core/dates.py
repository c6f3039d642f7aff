# src/planner_ai/core/dates.py

"""
Date helpers.

normalize_date() is the single place where raw sheet cells become canonical ISO dates.
Everything else here is small formatting around weekdays and the configured timezone.

Known imprecise boundary: "A/B/YYYY" with both A and B <= 12 cannot be disambiguated,
month/day order is assumed ("02/03/2026" -> 2026-02-03).
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime
from typing import Any, Final
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as date_parser

WEEKDAY_NAMES: Final = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

_MONTH_ABBR: Final = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_ISO_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_SLASH_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")

# Two far-apart defaults: if a generic parse depends on them, a component was missing.
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)


def _iso_or_empty(year: int, month: int, day: int) -> str:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return ""


def _generic_parse(raw: str) -> str:
    try:
        a = date_parser.parse(raw, default=_DEFAULT_A)
        b = date_parser.parse(raw, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        return ""
    if a.date() != b.date():
        return ""
    return a.date().isoformat()


def normalize_date(value: Any) -> str:
    """Return the ISO form of a sheet date cell, or "" if it cannot be read as a full date."""
    raw = "" if value is None else str(value).strip()
    if not raw:
        return ""

    m = _ISO_RE.match(raw)
    if m:
        return _iso_or_empty(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    m = _SLASH_RE.match(raw)
    if m:
        first, second, year = int(m.group(1)), int(m.group(2)), int(m.group(3))
        if first > 12:
            day, month = first, second
        else:
            month, day = first, second
        return _iso_or_empty(year, month, day)

    return _generic_parse(raw)


def to_iso(value: date | str) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return normalize_date(value)


def normalize_day_name(value: Any) -> str:
    """Canonical weekday name ("Monday") for any casing/whitespace, else ""."""
    raw = "" if value is None else str(value).strip().lower()
    if not raw:
        return ""
    for name in WEEKDAY_NAMES:
        if name.lower() == raw:
            return name
    return ""


def weekday_name(d: date) -> str:
    # date.weekday(): Monday == 0
    return WEEKDAY_NAMES[(d.weekday() + 1) % 7]


def get_zone(tz_name: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {tz_name!r}") from e


def now_in_timezone(tz_name: str, now: datetime | None = None) -> datetime:
    current = now if now is not None else datetime.now(UTC)
    if current.tzinfo is None:
        current = current.replace(tzinfo=UTC)
    return current.astimezone(get_zone(tz_name))


def today_in_timezone(tz_name: str, now: datetime | None = None) -> date:
    """The user's civil date in tz_name (not the server's)."""
    return now_in_timezone(tz_name, now).date()


def format_display_date(value: Any) -> str:
    """'20 Feb 2026' for anything normalize_date understands, else the trimmed raw text."""
    iso = normalize_date(value)
    if not iso:
        return "" if value is None else str(value).strip()
    d = date.fromisoformat(iso)
    return f"{d.day:02d} {_MONTH_ABBR[d.month - 1]} {d.year}"


def format_update_datetime(iso_string: str, tz_name: str) -> str:
    """'20 Feb 2026, 08:05 am' in tz_name; "" when the timestamp or zone is unusable."""
    if not iso_string:
        return ""
    try:
        parsed = datetime.fromisoformat(str(iso_string).replace("Z", "+00:00"))
        local = now_in_timezone(tz_name, parsed)
    except (ValueError, OverflowError):
        return ""
    hour12 = local.hour % 12 or 12
    suffix = "am" if local.hour < 12 else "pm"
    return (
        f"{local.day:02d} {_MONTH_ABBR[local.month - 1]} {local.year}, "
        f"{hour12:02d}:{local.minute:02d} {suffix}"
    )
