"""Timing and counter capture around one measured phase."""

from __future__ import annotations

import time
from typing import Callable, TypeVar

from incrlab.engine import EngineSwitch
from incrlab.models import EngineMetrics

T = TypeVar("T")


def measure(switch: EngineSwitch, work: Callable[[], T]) -> tuple[T, EngineMetrics]:
    """Run ``work`` once and report its wall time and engine counter delta.

    The counters are read from whichever engine is active in ``switch`` right
    before and right after the call, so the caller must select the engine
    first. Exactly one phase (generate, compute or edit) goes into ``work``.
    """
    t0 = time.perf_counter_ns()
    cnt0 = switch.snapshot_counts()
    result = work()
    cnt1 = switch.snapshot_counts()
    t1 = time.perf_counter_ns()
    return result, EngineMetrics(time_ns=t1 - t0, engine_cnt=cnt1 - cnt0)
