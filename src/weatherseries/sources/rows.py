"""Row sources feeding the series engine.

A row source returns, for one measurement and a half-open UTC range, the
observation rows ordered by generation time. Sources own no global state:
callers pass in whatever handle they hold (an open SQLite connection, a list
of records already in memory).
"""

from __future__ import annotations

import logging
import re
import sqlite3
from datetime import datetime
from typing import Any, Iterable, Iterator, Mapping, Protocol, runtime_checkable

from weatherseries.config.measurements import Measurement, parse_measurement
from weatherseries.domain.observation import ObservationRow
from weatherseries.utils.time import parse_datetime

logger = logging.getLogger(__name__)

TABLE_NAME = "weather_data"
LOCATION_COLUMN = "auroraId"
TIME_COLUMN = "generationTime"

MEASUREMENT_COLUMNS: dict[Measurement, str] = {m: m.value for m in Measurement}

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@runtime_checkable
class RowSource(Protocol):
    def fetch_rows(
        self,
        measurement: Measurement,
        start: datetime,
        end: datetime,
    ) -> Iterable[ObservationRow]:
        ...


def _coerce_value(value: Any) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return float(value)


def row_from_record(record: Mapping[str, Any], measurement: Measurement) -> ObservationRow:
    """Build an ``ObservationRow`` from a stored record mapping.

    Accepts the store's column names (``auroraId``, ``generationTime``) as
    well as ``location_id``/``time``.
    """
    location = record.get(LOCATION_COLUMN, record.get("location_id"))
    stamp = record.get(TIME_COLUMN, record.get("time"))
    if location is None or stamp is None:
        raise ValueError(f"Record is missing a location id or generation time: {dict(record)!r}")
    value = record.get(MEASUREMENT_COLUMNS[measurement], record.get("value"))
    return ObservationRow(
        location_id=str(location),
        time=parse_datetime(stamp),
        value=_coerce_value(value),
    )


class MemoryRowSource:
    """Serve rows from records already held in memory."""

    def __init__(self, records: Iterable[Mapping[str, Any]]) -> None:
        self._records = list(records)

    def fetch_rows(
        self,
        measurement: Measurement,
        start: datetime,
        end: datetime,
    ) -> list[ObservationRow]:
        measurement = parse_measurement(measurement)
        rows = []
        for record in self._records:
            row = row_from_record(record, measurement)
            if start <= row.time < end:
                rows.append(row)
        rows.sort(key=lambda r: (r.time, r.location_id))
        return rows


class SqliteRowSource:
    """Read rows from the observation table over an explicit SQLite connection."""

    def __init__(self, connection: sqlite3.Connection, table: str = TABLE_NAME) -> None:
        if not _IDENTIFIER_RE.match(table):
            raise ValueError(f"Invalid table name: {table!r}")
        self._connection = connection
        self._table = table

    def _query(self, column: str) -> str:
        return f"""
            SELECT {LOCATION_COLUMN}, {TIME_COLUMN}, {column} AS value
            FROM {self._table}
            WHERE datetime({TIME_COLUMN}) >= datetime(?)
              AND datetime({TIME_COLUMN}) < datetime(?)
            ORDER BY datetime({TIME_COLUMN}) ASC, {LOCATION_COLUMN} ASC
        """

    def iter_rows(
        self,
        measurement: Measurement,
        start: datetime,
        end: datetime,
    ) -> Iterator[ObservationRow]:
        measurement = parse_measurement(measurement)
        column = MEASUREMENT_COLUMNS[measurement]
        cursor = self._connection.execute(
            self._query(column),
            (start.isoformat(), end.isoformat()),
        )
        try:
            for location, stamp, value in cursor:
                yield ObservationRow(
                    location_id=str(location),
                    time=parse_datetime(stamp),
                    value=_coerce_value(value),
                )
        finally:
            cursor.close()

    def fetch_rows(
        self,
        measurement: Measurement,
        start: datetime,
        end: datetime,
    ) -> list[ObservationRow]:
        rows = list(self.iter_rows(measurement, start, end))
        logger.info(
            "Fetched %d %s rows from %s between %s and %s",
            len(rows),
            measurement,
            self._table,
            start.isoformat(),
            end.isoformat(),
        )
        return rows
