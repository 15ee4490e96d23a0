from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping

from weatherseries.config.series import SeriesConfig, series_config
from weatherseries.domain.day import DayRange
from weatherseries.io.encoders import SeriesDocument, encode
from weatherseries.sources.rows import RowSource
from weatherseries.transforms.pivot import build_series
from weatherseries.utils.time import format_local_iso, resolve_day_range, utc_now

logger = logging.getLogger(__name__)


def generate_series(
    config: SeriesConfig | Mapping[str, Any],
    source: RowSource,
    *,
    now: datetime | None = None,
) -> SeriesDocument:
    """Build one series document for a measurement and civil day.

    The configuration is validated before the source is queried, so a bad
    selector or bucket width never produces a partial document. Errors raised
    by ``source`` propagate unchanged.
    """
    config = series_config(config)
    document, _ = build_document(config, source, now=now)
    return document


def build_document(
    config: SeriesConfig,
    source: RowSource,
    *,
    now: datetime | None = None,
) -> tuple[SeriesDocument, DayRange]:
    """Like ``generate_series`` for a validated config, also returning the day range."""
    tz = config.tz
    now = now or utc_now()
    day = resolve_day_range(config.day_offset, tz, now=now)
    logger.info(
        "Date range (UTC): %s to %s", day.start.isoformat(), day.end.isoformat()
    )
    logger.info(
        "Date range (local): %s to %s",
        format_local_iso(day.start, tz),
        format_local_iso(day.end, tz),
    )

    rows = source.fetch_rows(config.measurement, day.start, day.end)
    pivot = build_series(
        rows,
        day.start,
        config.bucket_minutes,
        collision=config.collision,
    )
    if not pivot.offsets:
        logger.warning(
            "No %s rows for %s; writing an empty series", config.measurement, day.local_date
        )
    document = encode(
        pivot,
        config.mode,
        tz=tz,
        generated_at=now,
        measurement=config.measurement.value,
    )
    return document, day


def get_time_series(
    source: RowSource,
    measurement: str = "tempC",
    day_offset: int = 0,
    *,
    now: datetime | None = None,
    **options: Any,
) -> SeriesDocument:
    """Keyword shortcut for ``generate_series``."""
    config = series_config(measurement=measurement, day_offset=day_offset, **options)
    return generate_series(config, source, now=now)
