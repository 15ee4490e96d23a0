from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Mapping

from weatherseries.domain.day import DayRange
from weatherseries.io.encoders import dumps_document


def dataset_artifact_path(root: Path, measurement: str, day: DayRange) -> Path:
    """Return ``<root>/<measurement>/<YYYY-MM-DD>.json`` for the day's local date."""
    return Path(root) / str(measurement) / f"{day.local_date.isoformat()}.json"


def read_json_artifact(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        payload = json.load(fh)
    if not isinstance(payload, dict):
        raise ValueError(f"Expected JSON object in artifact '{path}'")
    return payload


def write_json_artifact(path: Path, payload: Mapping[str, Any]) -> None:
    """Write ``payload`` as compact JSON, replacing ``path`` atomically."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(dumps_document(payload))
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
