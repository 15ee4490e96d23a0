from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from weatherseries.config.series import DatasetsConfig, load_datasets_config
from weatherseries.io.artifacts import dataset_artifact_path, write_json_artifact
from weatherseries.pipeline.series import build_document
from weatherseries.sources.rows import RowSource
from weatherseries.utils.logs import configure_logging
from weatherseries.utils.time import utc_now

logger = logging.getLogger(__name__)


def generate_datasets(
    config: DatasetsConfig,
    source: RowSource,
    *,
    now: datetime | None = None,
    progress: bool = True,
) -> list[Path]:
    """Write one series artifact per configured measurement and day.

    All documents in a batch share the same ``now`` so day boundaries do not
    shift if the run crosses midnight.
    """
    now = now or utc_now()
    jobs = list(config.series_configs())
    written: list[Path] = []
    with logging_redirect_tqdm():
        bar = tqdm(
            jobs,
            desc="datasets",
            unit="doc",
            disable=not progress,
            dynamic_ncols=True,
            leave=False,
        )
        for job in bar:
            bar.set_postfix_str(f"{job.measurement} {job.day_offset:+d}")
            document, day = build_document(job, source, now=now)
            path = dataset_artifact_path(config.output_dir, job.measurement.value, day)
            write_json_artifact(path, document)
            logger.info("Wrote %s (%d locations)", path, len(document["series"]))
            written.append(path)
    logger.info("Generated %d dataset artifacts under %s", len(written), config.output_dir)
    return written


def run_datasets(
    config_path: Path,
    source: RowSource,
    *,
    now: datetime | None = None,
    progress: bool = True,
) -> list[Path]:
    """Load a datasets YAML, configure logging from it, and generate artifacts."""
    config = load_datasets_config(Path(config_path))
    configure_logging(config.log_level or "INFO")
    return generate_datasets(config, source, now=now, progress=progress)
