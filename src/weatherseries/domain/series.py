from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import NamedTuple


class Bucket(NamedTuple):
    key: datetime
    offset_minutes: int


@dataclass
class SeriesPivot:
    """Location-keyed series aligned to bucket offsets from ``day_start``.

    ``offsets`` is the ascending set of distinct buckets observed that day
    across every location. ``series`` keeps only non-missing values, keyed by
    offset, so each location's sparse form is just its own items.
    """

    day_start: datetime
    width_minutes: int
    offsets: list[int] = field(default_factory=list)
    series: dict[str, dict[int, float]] = field(default_factory=dict)

    @property
    def locations(self) -> list[str]:
        return sorted(self.series)

    def dense(self, location_id: str) -> list[float | None]:
        values = self.series[location_id]
        return [values.get(offset) for offset in self.offsets]

    def sparse(self, location_id: str) -> list[tuple[int, float]]:
        return sorted(self.series[location_id].items())

    def __len__(self) -> int:
        return len(self.series)
