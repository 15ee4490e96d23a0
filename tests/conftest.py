from __future__ import annotations

import sqlite3
from datetime import datetime, timezone

import pytest


@pytest.fixture
def now() -> datetime:
    """23:30 UTC on 10 June, i.e. 09:30 on 11 June in Brisbane."""
    return datetime(2025, 6, 10, 23, 30, tzinfo=timezone.utc)


@pytest.fixture
def store_records() -> list[dict]:
    return [
        {"auroraId": "A", "generationTime": "2025-01-01T00:01:00Z", "tempC": 24.8, "relativeHumidityPct": 60.0},
        {"auroraId": "A", "generationTime": "2025-01-01T00:31:00Z", "tempC": 24.3, "relativeHumidityPct": None},
        {"auroraId": "B", "generationTime": "2025-01-01T00:05:00Z", "tempC": 10.1, "relativeHumidityPct": None},
        {"auroraId": "B", "generationTime": "2025-01-01T00:35:00Z", "tempC": None, "relativeHumidityPct": None},
        {"auroraId": "C", "generationTime": "2025-01-01T00:07:00Z", "tempC": None, "relativeHumidityPct": 71.0},
        {"auroraId": "A", "generationTime": "2024-12-31T23:59:00Z", "tempC": 30.0, "relativeHumidityPct": 50.0},
        {"auroraId": "A", "generationTime": "2025-01-02T00:00:00Z", "tempC": 31.0, "relativeHumidityPct": 51.0},
    ]


@pytest.fixture
def sqlite_conn(store_records):
    conn = sqlite3.connect(":memory:")
    conn.execute(
        """
        CREATE TABLE weather_data (
          auroraId TEXT NOT NULL,
          fetchTime TEXT NOT NULL,
          generationTime TEXT,
          tempC REAL,
          relativeHumidityPct REAL
        )
        """
    )
    conn.executemany(
        "INSERT INTO weather_data VALUES (?, ?, ?, ?, ?)",
        [
            (
                rec["auroraId"],
                rec["generationTime"],
                rec["generationTime"],
                rec["tempC"],
                rec["relativeHumidityPct"],
            )
            for rec in store_records
        ],
    )
    yield conn
    conn.close()
