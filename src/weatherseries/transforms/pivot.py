from __future__ import annotations

import logging
from datetime import datetime
from statistics import mean
from typing import Iterable

from weatherseries.domain.observation import ObservationRow
from weatherseries.domain.series import SeriesPivot
from weatherseries.transforms.bucket import bucket_rows
from weatherseries.transforms.utils import is_missing

logger = logging.getLogger(__name__)

COLLISION_POLICIES = ("first", "last", "mean")


def _resolve(values: list, collision: str):
    if collision == "last":
        value = values[-1]
    elif collision == "first":
        value = values[0]
    else:
        present = [v for v in values if not is_missing(v)]
        value = mean(present) if present else None
    return None if is_missing(value) else value


def build_series(
    rows: Iterable[ObservationRow],
    day_start: datetime,
    width_minutes: int,
    collision: str = "last",
) -> SeriesPivot:
    """Pivot observation rows into per-location series keyed by bucket offset.

    Rows are processed in ascending time order (stable for equal times), so
    with the default ``last`` policy the latest reading in a bucket wins, even
    when that reading is missing. ``first`` keeps the earliest reading and
    ``mean`` averages the non-missing ones.

    The bucket axis is every offset observed in ``rows``; no empty buckets are
    synthesized. Locations without a single non-missing value are dropped.
    """
    if collision not in COLLISION_POLICIES:
        raise ValueError(f"Unsupported collision policy: {collision!r}")
    if width_minutes <= 0:
        raise ValueError("width_minutes must be positive")

    ordered = sorted(rows, key=lambda row: row.time)
    offsets: set[int] = set()
    cells: dict[str, dict[int, list]] = {}
    for row, bucket in bucket_rows(ordered, day_start, width_minutes):
        offsets.add(bucket.offset_minutes)
        cells.setdefault(row.location_id, {}).setdefault(bucket.offset_minutes, []).append(row.value)

    series: dict[str, dict[int, float]] = {}
    dropped = 0
    for location_id, buckets in cells.items():
        resolved = {}
        for offset, values in buckets.items():
            value = _resolve(values, collision)
            if value is not None:
                resolved[offset] = value
        if not resolved:
            dropped += 1
            logger.debug("No values for location=%s; omitted from series", location_id)
            continue
        series[location_id] = resolved

    logger.debug(
        "Pivoted %d rows into %d buckets for %d locations (%d omitted)",
        len(ordered),
        len(offsets),
        len(series),
        dropped,
    )
    return SeriesPivot(
        day_start=day_start,
        width_minutes=width_minutes,
        offsets=sorted(offsets),
        series=series,
    )
