from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Literal, Mapping

from weatherseries.domain.series import SeriesPivot
from weatherseries.transforms.bucket import bucket_key
from weatherseries.utils.time import format_local_iso, format_utc_iso, parse_datetime, utc_now

Mode = Literal["dense", "sparse"]
SeriesDocument = dict[str, Any]


class _BaseEncoder:
    mode: Mode

    def __init__(self, tz: tzinfo = timezone.utc) -> None:
        self._tz = tz

    def _header(
        self,
        pivot: SeriesPivot,
        generated_at: datetime | None,
        measurement: str | None,
    ) -> SeriesDocument:
        doc: SeriesDocument = {
            "createdDate": format_utc_iso(generated_at or utc_now()),
            "startDate": format_local_iso(pivot.day_start, self._tz),
            "bucketMinutes": pivot.width_minutes,
            "mode": self.mode,
        }
        if measurement is not None:
            doc["measurement"] = str(measurement)
        return doc


class DenseEncoder(_BaseEncoder):
    """Shared timestamp axis plus one value array per location, ``None`` for gaps."""

    mode: Mode = "dense"

    def __call__(
        self,
        pivot: SeriesPivot,
        *,
        generated_at: datetime | None = None,
        measurement: str | None = None,
    ) -> SeriesDocument:
        doc = self._header(pivot, generated_at, measurement)
        doc["timestamps"] = [
            format_local_iso(bucket_key(pivot.day_start, offset), self._tz)
            for offset in pivot.offsets
        ]
        doc["series"] = {loc: pivot.dense(loc) for loc in pivot.locations}
        return doc


class SparseEncoder(_BaseEncoder):
    """Per-location ``[offsetMinutes, value]`` pairs; gaps are omitted."""

    mode: Mode = "sparse"

    def __call__(
        self,
        pivot: SeriesPivot,
        *,
        generated_at: datetime | None = None,
        measurement: str | None = None,
    ) -> SeriesDocument:
        doc = self._header(pivot, generated_at, measurement)
        doc["series"] = {
            loc: [[offset, value] for offset, value in pivot.sparse(loc)]
            for loc in pivot.locations
        }
        return doc


def dense_encoder(tz: tzinfo = timezone.utc) -> DenseEncoder:
    return DenseEncoder(tz)


def sparse_encoder(tz: tzinfo = timezone.utc) -> SparseEncoder:
    return SparseEncoder(tz)


def encoder_for(mode: str, tz: tzinfo = timezone.utc) -> DenseEncoder | SparseEncoder:
    if mode == "dense":
        return dense_encoder(tz)
    if mode == "sparse":
        return sparse_encoder(tz)
    raise ValueError(f"Unsupported series mode: {mode!r}")


def encode(
    pivot: SeriesPivot,
    mode: str = "dense",
    *,
    tz: tzinfo = timezone.utc,
    generated_at: datetime | None = None,
    measurement: str | None = None,
) -> SeriesDocument:
    """Render ``pivot`` as a JSON-ready series document in the given mode."""
    encoder = encoder_for(mode, tz)
    return encoder(pivot, generated_at=generated_at, measurement=measurement)


def dense_to_sparse(doc: Mapping[str, Any]) -> SeriesDocument:
    """Convert a dense document to the sparse shape, dropping ``None`` entries."""
    start = parse_datetime(doc["startDate"])
    offsets = [
        (parse_datetime(ts) - start) // timedelta(minutes=1)
        for ts in doc["timestamps"]
    ]
    out = {k: v for k, v in doc.items() if k not in {"timestamps", "series"}}
    out["mode"] = "sparse"
    series = {}
    for loc, values in doc["series"].items():
        pairs = [[offset, value] for offset, value in zip(offsets, values) if value is not None]
        if pairs:
            series[loc] = pairs
    out["series"] = series
    return out


def sparse_to_dense(doc: Mapping[str, Any]) -> SeriesDocument:
    """Convert a sparse document to the dense shape over the union of its offsets."""
    start = parse_datetime(doc["startDate"])
    offsets = sorted({offset for pairs in doc["series"].values() for offset, _ in pairs})
    out = {k: v for k, v in doc.items() if k != "series"}
    out["mode"] = "dense"
    out["timestamps"] = [
        bucket_key(start, offset).isoformat(timespec="seconds") for offset in offsets
    ]
    series = {}
    for loc, pairs in doc["series"].items():
        by_offset = dict((offset, value) for offset, value in pairs)
        series[loc] = [by_offset.get(offset) for offset in offsets]
    out["series"] = series
    return out


def dumps_document(doc: Mapping[str, Any]) -> str:
    """Serialize a document to compact, key-sorted JSON."""
    return json.dumps(
        doc,
        ensure_ascii=False,
        sort_keys=True,
        separators=(",", ":"),
        allow_nan=False,
    )
