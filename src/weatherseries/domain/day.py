from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo


@dataclass(frozen=True)
class DayRange:
    """Half-open ``[start, end)`` UTC interval covering one civil day in ``tz``."""

    start: datetime
    end: datetime
    tz: tzinfo

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("day range bounds must be timezone-aware")
        if not self.start < self.end:
            raise ValueError("day range start must precede end")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def local_start(self) -> datetime:
        return self.start.astimezone(self.tz)

    @property
    def local_date(self) -> date:
        return self.local_start.date()

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end
