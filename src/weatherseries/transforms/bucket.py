from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Iterator

from weatherseries.domain.observation import ObservationRow
from weatherseries.domain.series import Bucket

_MINUTE = timedelta(minutes=1)


def bucket(timestamp: datetime, day_start: datetime, width_minutes: int) -> Bucket:
    """Round ``timestamp`` down to the start of its ``width_minutes`` bucket.

    The offset is counted in whole minutes from ``day_start`` and floored to a
    multiple of the width, so every instant in ``[b, b + width)`` maps to the
    same bucket. Range is not checked: instants before ``day_start`` floor to
    negative offsets.
    """
    if width_minutes <= 0:
        raise ValueError("width_minutes must be positive")
    offset = (timestamp - day_start) // _MINUTE
    offset -= offset % width_minutes
    return Bucket(key=day_start + offset * _MINUTE, offset_minutes=offset)


def bucket_key(day_start: datetime, offset_minutes: int) -> datetime:
    return day_start + offset_minutes * _MINUTE


def bucket_rows(
    rows: Iterable[ObservationRow],
    day_start: datetime,
    width_minutes: int,
) -> Iterator[tuple[ObservationRow, Bucket]]:
    for row in rows:
        yield row, bucket(row.time, day_start, width_minutes)
