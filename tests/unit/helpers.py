from __future__ import annotations

from datetime import datetime, timezone

from weatherseries.domain.observation import ObservationRow
from weatherseries.utils.time import parse_datetime

DAY_START = datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_row(location_id: str, stamp: str, value: float | None) -> ObservationRow:
    return ObservationRow(location_id=location_id, time=parse_datetime(stamp), value=value)


def scenario_rows() -> list[ObservationRow]:
    return [
        make_row("A", "2025-01-01T00:01:00Z", 24.8),
        make_row("A", "2025-01-01T00:31:00Z", 24.3),
        make_row("B", "2025-01-01T00:05:00Z", 10.1),
    ]


class RecordingSource:
    """Row source stub that records each request."""

    def __init__(self, rows=None, error: Exception | None = None):
        self.rows = list(rows or [])
        self.error = error
        self.calls: list[tuple] = []

    def fetch_rows(self, measurement, start, end):
        self.calls.append((measurement, start, end))
        if self.error is not None:
            raise self.error
        return [row for row in self.rows if start <= row.time < end]
