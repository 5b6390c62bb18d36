"""Master list of all lab experiments, in reporting order."""

from __future__ import annotations

from incrlab.experiment import LabExp, TestComputer
from incrlab.strategies import (
    EagerFilter,
    EagerMap,
    EagerMergesort,
    LazyFilter,
    LazyMap,
    LazyMergesort,
    ListIntUniformPrepend,
    ListPt2DUniformPrepend,
    Quickhull,
    Reverse,
)


def all_tests() -> list[LabExp]:
    ints = ListIntUniformPrepend()
    return [
        TestComputer("eager-map", ints, EagerMap()),
        TestComputer("eager-filter", ints, EagerFilter()),
        TestComputer("lazy-map", ints, LazyMap()),
        TestComputer("lazy-filter", ints, LazyFilter()),
        TestComputer("reverse", ints, Reverse()),
        TestComputer("eager-mergesort", ints, EagerMergesort()),
        TestComputer("lazy-mergesort", ints, LazyMergesort()),
        TestComputer("quickhull", ListPt2DUniformPrepend(), Quickhull()),
    ]


def experiment_names() -> list[str]:
    return [t.name() for t in all_tests()]
