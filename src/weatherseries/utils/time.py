from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from weatherseries.domain.day import DayRange
from weatherseries.errors import SeriesConfigError

_OFFSET_RE = re.compile(r"^(?:UTC)?([+-])(\d{1,2}):?(\d{2})?$", re.IGNORECASE)
_TIMECODE_RE = re.compile(r"^\s*(\d+)\s*(s|sec|m|min|h|hr|d)?\s*$", re.IGNORECASE)
_TIMECODE_UNITS = {
    "s": "seconds",
    "sec": "seconds",
    "m": "minutes",
    "min": "minutes",
    "h": "hours",
    "hr": "hours",
    "d": "days",
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def resolve_timezone(name: str | tzinfo) -> tzinfo:
    """Resolve ``UTC``, a fixed ``±HH:MM`` offset, or an IANA zone name."""
    if isinstance(name, tzinfo):
        return name
    text = str(name).strip()
    if text.upper() in {"UTC", "Z"}:
        return timezone.utc
    match = _OFFSET_RE.match(text)
    if match:
        sign, hours, minutes = match.groups()
        delta = timedelta(hours=int(hours), minutes=int(minutes or 0))
        try:
            return timezone(-delta if sign == "-" else delta)
        except ValueError as exc:
            raise SeriesConfigError(f"Invalid UTC offset {text!r}: {exc}") from exc
    try:
        return ZoneInfo(text)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise SeriesConfigError(f"Unknown timezone {text!r}") from exc


def resolve_day_range(
    offset_days: int,
    tz: tzinfo,
    now: datetime | None = None,
) -> DayRange:
    """Return the UTC range of the local civil day ``offset_days`` from today.

    ``0`` is the current day in ``tz`` and negative offsets step back in time.
    The range runs from local midnight to the next local midnight; in a
    fixed-offset zone that is always exactly 24 hours.
    """
    now = now or utc_now()
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")
    try:
        target = now.astimezone(tz).date() + timedelta(days=offset_days)
        local_start = datetime.combine(target, time.min, tzinfo=tz)
        local_end = datetime.combine(target + timedelta(days=1), time.min, tzinfo=tz)
        start = local_start.astimezone(timezone.utc)
        end = local_end.astimezone(timezone.utc)
    except OverflowError as exc:
        raise ValueError(
            f"Day offset {offset_days} is outside the supported calendar "
            f"(years {date.min.year}-{date.max.year})"
        ) from exc
    return DayRange(start=start, end=end, tz=tz)


def parse_datetime(value: str | datetime) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z`` for UTC."""
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO-8601 timestamp: {value!r}") from exc


def parse_timecode(value: str) -> timedelta:
    """Parse a duration such as ``30m``, ``1h`` or ``90s``; bare numbers are minutes."""
    match = _TIMECODE_RE.match(str(value))
    if not match:
        raise ValueError(f"Invalid timecode: {value!r}")
    amount, unit = match.groups()
    field = _TIMECODE_UNITS[(unit or "m").lower()]
    return timedelta(**{field: int(amount)})


def format_local_iso(instant: datetime, tz: tzinfo) -> str:
    return instant.astimezone(tz).isoformat(timespec="seconds")


def format_utc_iso(instant: datetime) -> str:
    text = instant.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")
