from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass
class ObservationRow:
    """One location's reading for a single measurement at one sampling event."""

    location_id: str
    time: datetime
    value: float | None = None

    def __post_init__(self) -> None:
        if self.time.tzinfo is None:
            raise ValueError("time must be timezone-aware")
        self.time = self.time.astimezone(timezone.utc)
