# tests/test_dates.py

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from planner_ai.core.dates import (
    format_display_date,
    format_update_datetime,
    normalize_date,
    normalize_day_name,
    today_in_timezone,
    weekday_name,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2026-02-20", "2026-02-20"),
        ("  2026-02-20 ", "2026-02-20"),
        ("13/02/2026", "2026-02-13"),
        ("02/03/2026", "2026-02-03"),
        ("2/3/2026", "2026-02-03"),
        ("12/31/2026", "2026-12-31"),
        ("Feb 20, 2026", "2026-02-20"),
        ("20 February 2026", "2026-02-20"),
    ],
)
def test_normalize_date_accepts_known_formats(raw: str, expected: str) -> None:
    assert normalize_date(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["", "   ", None, "pending", "later", "2026-02-30", "31/02/2026", "02/30/2026", "Feb 20", "20"],
)
def test_normalize_date_returns_empty_for_unusable_values(raw) -> None:
    assert normalize_date(raw) == ""


def test_ambiguous_slash_date_assumes_month_first() -> None:
    # Both fields <= 12: cannot be told apart, month/day order wins.
    assert normalize_date("02/03/2026") == "2026-02-03"
    assert normalize_date("05/06/2026") == "2026-05-06"
    assert normalize_date("25/06/2026") == "2026-06-25"


def test_day_names() -> None:
    assert normalize_day_name(" monday ") == "Monday"
    assert normalize_day_name("SATURDAY") == "Saturday"
    assert normalize_day_name("Mon") == ""
    assert normalize_day_name(None) == ""
    assert weekday_name(date(2026, 2, 20)) == "Friday"
    assert weekday_name(date(2026, 2, 22)) == "Sunday"


def test_today_uses_user_timezone_not_utc() -> None:
    late_utc = datetime(2026, 2, 19, 20, 0, tzinfo=UTC)
    assert today_in_timezone("UTC", late_utc) == date(2026, 2, 19)
    assert today_in_timezone("Asia/Dhaka", late_utc) == date(2026, 2, 20)


def test_today_rejects_unknown_timezone() -> None:
    with pytest.raises(ValueError):
        today_in_timezone("Mars/Olympus")


def test_format_display_date() -> None:
    assert format_display_date("2/20/2026") == "20 Feb 2026"
    assert format_display_date("2026-12-01") == "01 Dec 2026"
    assert format_display_date(" someday ") == "someday"


def test_format_update_datetime() -> None:
    assert format_update_datetime("2026-02-20T02:05:00.000Z", "Asia/Dhaka") == "20 Feb 2026, 08:05 am"
    assert format_update_datetime("2026-02-20T08:30:00Z", "Asia/Dhaka") == "20 Feb 2026, 02:30 pm"
    assert format_update_datetime("2026-02-19T18:00:00Z", "Asia/Dhaka") == "20 Feb 2026, 12:00 am"
    assert format_update_datetime("", "Asia/Dhaka") == ""
    assert format_update_datetime("garbage", "Asia/Dhaka") == ""
    assert format_update_datetime("2026-02-20T02:05:00Z", "Mars/Olympus") == ""
