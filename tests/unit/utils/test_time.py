from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

from weatherseries.errors import SeriesConfigError
from weatherseries.utils.time import (
    format_local_iso,
    format_utc_iso,
    parse_datetime,
    parse_timecode,
    resolve_day_range,
    resolve_timezone,
)

BRISBANE = timezone(timedelta(hours=10))


def test_previous_day_in_brisbane(now):
    day = resolve_day_range(-1, BRISBANE, now=now)

    assert day.start == datetime(2025, 6, 9, 14, tzinfo=timezone.utc)
    assert day.end == datetime(2025, 6, 10, 14, tzinfo=timezone.utc)
    assert day.local_date.isoformat() == "2025-06-10"


def test_today_uses_local_calendar_date(now):
    day = resolve_day_range(0, BRISBANE, now=now)

    # 23:30 UTC is already the next morning in Brisbane.
    assert format_local_iso(day.start, BRISBANE) == "2025-06-11T00:00:00+10:00"
    assert day.contains(now)


def test_day_range_is_half_open(now):
    day = resolve_day_range(0, BRISBANE, now=now)

    assert day.contains(day.start)
    assert not day.contains(day.end)
    assert day.contains(day.end - timedelta(microseconds=1))


@pytest.mark.parametrize("offset", [0, -1, -2, -14, -365, -1000, 3])
@pytest.mark.parametrize(
    "now_value",
    [
        datetime(2025, 6, 10, 23, 30, tzinfo=timezone.utc),
        datetime(2024, 2, 29, 13, 59, tzinfo=timezone.utc),
        datetime(2024, 12, 31, 14, 0, tzinfo=timezone.utc),
    ],
)
def test_fixed_offset_day_is_exactly_24_hours(offset, now_value):
    day = resolve_day_range(offset, BRISBANE, now=now_value)

    assert day.duration == timedelta(hours=24)
    assert day.start.tzinfo == timezone.utc
    assert day.local_start.hour == 0 and day.local_start.minute == 0


def test_naive_now_is_rejected():
    with pytest.raises(ValueError):
        resolve_day_range(0, BRISBANE, now=datetime(2025, 1, 1))


def test_resolve_timezone_accepts_offsets_and_utc():
    assert resolve_timezone("UTC") is timezone.utc
    assert resolve_timezone("+10:00").utcoffset(None) == timedelta(hours=10)
    assert resolve_timezone("-0530").utcoffset(None) == -timedelta(hours=5, minutes=30)
    assert resolve_timezone("UTC+10").utcoffset(None) == timedelta(hours=10)
    assert resolve_timezone(BRISBANE) is BRISBANE


def test_resolve_timezone_rejects_unknown_names():
    with pytest.raises(SeriesConfigError):
        resolve_timezone("Not/AZone")
    with pytest.raises(SeriesConfigError):
        resolve_timezone("+25:00")


def test_parse_datetime_accepts_zulu_suffix():
    parsed = parse_datetime("2025-01-01T00:01:00Z")

    assert parsed == datetime(2025, 1, 1, 0, 1, tzinfo=timezone.utc)
    assert parse_datetime("2025-01-01T10:01:00+10:00") == parsed


def test_parse_datetime_rejects_garbage():
    with pytest.raises(ValueError):
        parse_datetime("yesterday")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("30m", timedelta(minutes=30)),
        ("10min", timedelta(minutes=10)),
        ("1h", timedelta(hours=1)),
        ("90s", timedelta(seconds=90)),
        ("15", timedelta(minutes=15)),
    ],
)
def test_parse_timecode(text, expected):
    assert parse_timecode(text) == expected


def test_format_utc_iso_uses_zulu_and_milliseconds():
    stamp = datetime(2025, 1, 1, 10, tzinfo=BRISBANE)

    assert format_utc_iso(stamp) == "2025-01-01T00:00:00.000Z"


def _zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        pytest.skip(f"tz database has no {name}")


def test_resolve_timezone_accepts_iana_names():
    zone = _zone("Australia/Brisbane")

    assert resolve_timezone("Australia/Brisbane") == zone


def test_brisbane_zone_matches_fixed_offset(now):
    zone = _zone("Australia/Brisbane")

    named = resolve_day_range(-1, zone, now=now)
    fixed = resolve_day_range(-1, BRISBANE, now=now)

    assert (named.start, named.end) == (fixed.start, fixed.end)
    assert named.start == datetime(2025, 6, 9, 14, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "now_value, hours",
    [
        # Sydney clocks go forward on 5 October 2025 and back on 6 April 2025.
        (datetime(2025, 10, 5, 3, tzinfo=timezone.utc), 23),
        (datetime(2025, 4, 6, 3, tzinfo=timezone.utc), 25),
        (datetime(2025, 6, 10, 3, tzinfo=timezone.utc), 24),
    ],
)
def test_daylight_saving_days_follow_local_midnights(now_value, hours):
    zone = _zone("Australia/Sydney")

    day = resolve_day_range(0, zone, now=now_value)

    assert day.duration == timedelta(hours=hours)
    assert day.local_start.hour == 0
    assert day.end.astimezone(zone).hour == 0


@pytest.mark.parametrize("offset", [-800000, 3000000])
def test_offsets_beyond_the_calendar_raise_value_error(now, offset):
    with pytest.raises(ValueError, match="outside the supported calendar"):
        resolve_day_range(offset, BRISBANE, now=now)
