from __future__ import annotations

from datetime import timedelta, tzinfo
from pathlib import Path
from typing import Any, Iterable, Iterator, Literal, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from weatherseries.config.measurements import (
    DEFAULT_DATASET_MEASUREMENTS,
    Measurement,
    parse_measurement,
)
from weatherseries.errors import SeriesConfigError
from weatherseries.utils.load import load_yaml
from weatherseries.utils.time import parse_timecode, resolve_timezone

VALID_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

SeriesMode = Literal["dense", "sparse"]
CollisionPolicy = Literal["first", "last", "mean"]


def day_offsets(days: int) -> list[int]:
    """Offsets for today and the ``days - 1`` days before it: ``[0, -1, ...]``."""
    if days < 1:
        raise ValueError("days must be at least 1")
    return [-day for day in range(days)]


class SeriesOptions(BaseModel):
    """Bucketing and encoding options shared by single and batch runs."""

    bucket_minutes: int = Field(
        default=30,
        description="Bucket width in minutes; timecodes such as '30m' or '1h' are accepted.",
    )
    mode: SeriesMode = Field(
        default="dense",
        description="dense (shared timestamp axis) | sparse (per-location offset/value pairs)",
    )
    timezone: str = Field(
        default="+10:00",
        description="Civil timezone defining day boundaries: UTC, a fixed ±HH:MM offset, or an IANA name.",
    )
    collision: CollisionPolicy = Field(
        default="last",
        description="Which reading wins when a location has several in one bucket: first | last | mean",
    )

    @field_validator("bucket_minutes", mode="before")
    @classmethod
    def _parse_bucket_width(cls, value: object):
        if isinstance(value, str):
            text = value.strip()
            if text.lstrip("-").isdigit():
                return int(text)
            step = parse_timecode(text)
            if step % timedelta(minutes=1):
                raise ValueError("bucket width must be a whole number of minutes")
            return step // timedelta(minutes=1)
        return value

    @field_validator("bucket_minutes")
    @classmethod
    def _check_bucket_width(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("bucket_minutes must be positive")
        return value

    @field_validator("mode", "collision", mode="before")
    @classmethod
    def _normalize_choice(cls, value: object):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("timezone", mode="before")
    @classmethod
    def _check_timezone(cls, value: object):
        if value is None:
            return "+10:00"
        text = str(value).strip()
        resolve_timezone(text)
        return text

    @property
    def tz(self) -> tzinfo:
        return resolve_timezone(self.timezone)


class SeriesConfig(SeriesOptions):
    """Parameters for one (measurement, day) series document."""

    measurement: Measurement = Field(..., description="Measurement column to aggregate.")
    day_offset: int = Field(
        default=0,
        description="Civil day relative to today in the configured timezone (0, -1, -2, ...).",
    )

    @field_validator("measurement", mode="before")
    @classmethod
    def _parse_measurement(cls, value: object):
        return parse_measurement(value)  # type: ignore[arg-type]


class DatasetsConfig(SeriesOptions):
    """Batch generation of one document per measurement and day."""

    measurements: list[Measurement] = Field(
        default_factory=lambda: list(DEFAULT_DATASET_MEASUREMENTS),
        description="Measurements to generate; a comma separated string is accepted.",
    )
    days: int = Field(
        default=1,
        ge=1,
        description="Number of days to generate, counting back from today.",
    )
    output_dir: Path = Field(
        default=Path("data/assets"),
        description="Root directory for <measurement>/<YYYY-MM-DD>.json artifacts.",
    )
    log_level: Optional[str] = Field(default=None, description="DEFAULT LOG LEVEL")

    @field_validator("measurements", mode="before")
    @classmethod
    def _parse_measurements(cls, value: object):
        if value is None:
            return list(DEFAULT_DATASET_MEASUREMENTS)
        if isinstance(value, str):
            value = [part for part in value.split(",") if part.strip()]
        elif not isinstance(value, Iterable):
            raise ValueError("measurements must be a list or a comma separated string")
        parsed = [parse_measurement(item) for item in value]  # type: ignore[union-attr]
        if not parsed:
            raise ValueError("at least one measurement is required")
        # Keep first occurrence order, drop repeats.
        return list(dict.fromkeys(parsed))

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object):
        if value is None:
            return None
        text = str(value).strip().upper()
        if not text:
            return None
        if text not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(VALID_LOG_LEVELS)}")
        return text

    def day_offsets(self) -> list[int]:
        return day_offsets(self.days)

    def series_configs(self) -> Iterator[SeriesConfig]:
        shared = self.model_dump(include=set(SeriesOptions.model_fields))
        for measurement in self.measurements:
            for offset in self.day_offsets():
                yield SeriesConfig(measurement=measurement, day_offset=offset, **shared)


def _validate(model: type[BaseModel], data: Mapping[str, Any], source: str):
    try:
        return model.model_validate(dict(data))
    except ValidationError as exc:
        raise SeriesConfigError(f"Invalid {source}: {exc}") from exc


def series_config(data: Mapping[str, Any] | SeriesConfig | None = None, **overrides: Any) -> SeriesConfig:
    """Build a ``SeriesConfig`` raising ``SeriesConfigError`` on bad input."""
    if isinstance(data, SeriesConfig):
        if not overrides:
            return data
        data = data.model_dump()
    merged = {**dict(data or {}), **overrides}
    return _validate(SeriesConfig, merged, "series configuration")


def load_series_config(path: Path) -> SeriesConfig:
    data = load_yaml(path)
    block = data.get("series", data)
    if not isinstance(block, dict):
        raise SeriesConfigError(f"'series' in {path} must be a mapping")
    return _validate(SeriesConfig, block, f"series configuration in {path}")


def load_datasets_config(path: Path) -> DatasetsConfig:
    data = load_yaml(path)
    block = data.get("datasets", data)
    if not isinstance(block, dict):
        raise SeriesConfigError(f"'datasets' in {path} must be a mapping")
    config = _validate(DatasetsConfig, block, f"datasets configuration in {path}")
    if not config.output_dir.is_absolute():
        config.output_dir = (path.parent / config.output_dir).resolve()
    return config
