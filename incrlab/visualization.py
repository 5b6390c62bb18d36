import os
from typing import List, Optional

import matplotlib

matplotlib.use("Agg")  # Must be set before importing pyplot
import matplotlib.pyplot as plt  # noqa: E402

from incrlab.models import Sample  # noqa: E402

COLORS = {
    "naive": "#FF00CC",  # neon magenta
    "dcg": "#00FFFF",  # neon cyan
}


def _ensure_dir(path: str) -> None:
    if path and not os.path.exists(path):
        os.makedirs(path, exist_ok=True)


def plot_compute_times(
    name: str,
    samples: List[Sample],
    filepath: str,
    phase: str = "compute_output",
    log_scale: Optional[bool] = None,
) -> str:
    """Plot naive vs incremental time of one phase across rounds and save it.

    Uses constrained_layout and a log y-axis when the two series differ by
    more than two orders of magnitude (unless ``log_scale`` is forced).
    """
    rounds = [s.batch_name for s in samples]
    naive = [getattr(s.naive_sample, phase).time_ns / 1000.0 for s in samples]
    dcg = [getattr(s.dcg_sample, phase).time_ns / 1000.0 for s in samples]

    fig, ax = plt.subplots(figsize=(10, 6), constrained_layout=True)
    for label, values in (("naive", naive), ("dcg", dcg)):
        ax.plot(
            rounds,
            values,
            label=label,
            linewidth=2,
            marker="o",
            markersize=4,
            markerfacecolor="white",
            markeredgewidth=1.0,
            color=COLORS[label],
        )
    if log_scale is None:
        positive = [v for v in naive + dcg if v > 0]
        log_scale = bool(positive) and max(positive) / min(positive) > 100
    if log_scale:
        ax.set_yscale("log")
    ax.set_xlabel("Round", fontsize=12)
    ax.set_ylabel(f"{phase} time [us]", fontsize=12)
    ax.set_title(f"{name}: naive vs incremental", fontsize=14, fontweight="bold")
    ax.grid(True, alpha=0.25, linestyle="--", linewidth=0.7)
    ax.legend(loc="upper right", frameon=False)

    _ensure_dir(os.path.dirname(filepath))
    fig.savefig(filepath, dpi=180)
    plt.close(fig)
    return filepath
