from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Sequence

from incrlab.errors import UnimplementedStrategyError
from incrlab.experiment import LabExp
from incrlab.export import compute_time_totals, write_results_json, write_samples_csv
from incrlab.models import LabExpParams, LabExpResults
from incrlab.visualization import plot_compute_times

logger = logging.getLogger("incrlab.runner")


@dataclass
class ExperimentOutcome:
    name: str
    status: str  # 'ok' | 'unimplemented'
    results: LabExpResults | None = None
    error: str | None = None

    def summary_row(self) -> list:
        if self.results is None:
            return [self.name, self.status, 0, None, None, None, None]
        naive_ns, dcg_ns = compute_time_totals(self.results.samples)
        speedup = (naive_ns / dcg_ns) if dcg_ns else None
        return [
            self.name,
            self.status,
            len(self.results.samples),
            self.results.all_valid(),
            naive_ns,
            dcg_ns,
            speedup,
        ]


SUMMARY_COLUMNS = [
    "name",
    "status",
    "samples",
    "all_valid",
    "naive_compute_ns",
    "dcg_compute_ns",
    "speedup",
]


class LabRunner:
    def __init__(self, base_results_dir: str = "results/lab", plots: bool = True):
        """Each batch gets its own UTC timestamp directory; older ones stay."""
        self.base_dir = Path(base_results_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.timestamp_dir = self.base_dir / datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        self.timestamp_dir.mkdir(parents=True, exist_ok=True)
        self.plots = plots

    def run(self, tests: Sequence[LabExp], params: LabExpParams) -> List[ExperimentOutcome]:
        """Run every experiment in order.

        A missing strategy only fails its own experiment; the batch goes on.
        Any other exception aborts the batch.
        """
        params.validate()
        outcomes: List[ExperimentOutcome] = []
        for idx, test in enumerate(tests, start=1):
            name = test.name()
            logger.info("(%d/%d) Running: %s", idx, len(tests), name)
            try:
                results = test.run(params)
            except UnimplementedStrategyError as e:
                logger.warning("Skipping %s: %s", name, e)
                outcomes.append(ExperimentOutcome(name, "unimplemented", error=str(e)))
                continue
            self._persist(name, results, params)
            outcomes.append(ExperimentOutcome(name, "ok", results=results))
        write_summary_csv(self.timestamp_dir / "summary.csv", outcomes)
        return outcomes

    def _persist(self, name: str, results: LabExpResults, params: LabExpParams) -> None:
        samples = results.samples
        write_results_json(self.timestamp_dir / f"{name}.json", name, params, samples)
        write_samples_csv(self.timestamp_dir / f"{name}.csv", samples)
        if self.plots and samples:
            png = self.timestamp_dir / f"{name}_compute.png"
            path = plot_compute_times(name, samples, str(png))
            logger.info("Saved plot %s", path)


def write_summary_csv(path: Path, outcomes: Sequence[ExperimentOutcome]) -> Path:
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(SUMMARY_COLUMNS)
        for o in outcomes:
            writer.writerow(o.summary_row())
    logger.info("Summary written: %s", path)
    return path
