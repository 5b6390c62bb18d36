"""Pluggable input distributions and computations.

Contains:
- list generators with uniform prepend edits (ints and 2-D points)
- map / filter / reverse / mergesort / quickhull computations
"""

from incrlab.strategies.computations import (
    EagerFilter,
    EagerMap,
    EagerMergesort,
    LazyFilter,
    LazyMap,
    LazyMergesort,
    Quickhull,
    Reverse,
)
from incrlab.strategies.lists import ListIntUniformPrepend, ListPt2DUniformPrepend, NominalList

__all__ = [
    "EagerFilter",
    "EagerMap",
    "EagerMergesort",
    "LazyFilter",
    "LazyMap",
    "LazyMergesort",
    "ListIntUniformPrepend",
    "ListPt2DUniformPrepend",
    "NominalList",
    "Quickhull",
    "Reverse",
]
