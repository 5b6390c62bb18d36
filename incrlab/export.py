from __future__ import annotations

import csv
import json
import logging
from dataclasses import fields
from pathlib import Path
from typing import Iterable, List

from incrlab.engine import EngineCounts
from incrlab.models import LabExpParams, Sample

logger = logging.getLogger("incrlab.export")

ENGINES = ("naive", "dcg")
PHASES = ("generate_input", "compute_output", "batch_edit_input")
COUNTERS = tuple(f.name for f in fields(EngineCounts))


def sample_columns() -> List[str]:
    """Column names of the per-sample CSV, e.g. ``naive_compute_output_time_ns``."""
    columns = ["batch_name", "output_valid"]
    for engine in ENGINES:
        for phase in PHASES:
            columns.append(f"{engine}_{phase}_time_ns")
            columns.extend(f"{engine}_{phase}_{c}" for c in COUNTERS)
    return columns


def sample_row(sample: Sample) -> list:
    row: list = [sample.batch_name, sample.output_valid]
    for engine_sample in (sample.naive_sample, sample.dcg_sample):
        for metrics in engine_sample.phases().values():
            row.append(metrics.time_ns)
            row.extend(getattr(metrics.engine_cnt, c) for c in COUNTERS)
    return row


def write_samples_csv(path: Path, samples: Iterable[Sample]) -> Path:
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(sample_columns())
        for s in samples:
            writer.writerow(sample_row(s))
    logger.info("Samples written: %s", path)
    return path


def write_results_json(
    path: Path, name: str, params: LabExpParams, samples: Iterable[Sample]
) -> Path:
    payload = {
        "name": name,
        "params": params.to_dict(),
        "samples": [s.to_dict() for s in samples],
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    logger.info("Results written: %s", path)
    return path


def compute_time_totals(samples: Iterable[Sample]) -> tuple[int, int]:
    """Sum of naive and incremental compute times (ns) over all samples."""
    naive = 0
    dcg = 0
    for s in samples:
        naive += s.naive_sample.compute_output.time_ns
        dcg += s.dcg_sample.compute_output.time_ns
    return naive, dcg
