"""Named-cell lists and their uniform prepend distributions.

Concepts
--------
NominalList
    Immutable list stored as a tuple of named cells, head first. Every cell
    holds between 1 and ``gauge`` items. Only the head cell is ever partial
    and edits only touch the head, so the names of all other cells survive
    every edit.
Naming
    ``NominalStrategy.REGULAR`` names a cell by allocation order (the n-th
    cell ever created for the list is named ``n``) and keeps the name while
    the head cell grows. ``NominalStrategy.BY_CONTENT`` names a cell by the
    items it holds, so a growing head cell gets a new name on every edit.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Hashable, Iterator

from incrlab.engine import Cell, Engine
from incrlab.models import GenerateParams, NominalStrategy
from incrlab.traits import InputDist

UNIFORM_INT_MAX = 1000
UNIFORM_COORD_MAX = 1000

Pt2D = tuple[int, int]


@dataclass(frozen=True)
class NominalList:
    cells: tuple[Cell, ...]
    allocated: int  # number of cells allocated so far (REGULAR naming counter)

    def __iter__(self) -> Iterator:
        for c in self.cells:
            yield from c.items

    def __len__(self) -> int:
        return sum(len(c.items) for c in self.cells)

    def items(self) -> tuple:
        return tuple(self)


def _cell_name(params: GenerateParams, counter: int, items: tuple) -> Hashable:
    if params.nominal_strategy is NominalStrategy.BY_CONTENT:
        return ("content", items)
    return counter


def prepend(engine: Engine, lst: NominalList, item, params: GenerateParams) -> NominalList:
    """Return ``lst`` with ``item`` placed at its head."""
    cells = lst.cells
    if cells and len(cells[0].items) < params.gauge:
        head = cells[0]
        items = (item,) + head.items
        if params.nominal_strategy is NominalStrategy.BY_CONTENT:
            name = _cell_name(params, lst.allocated, items)
        else:
            name = head.name
        return NominalList((engine.cell(name, items),) + cells[1:], lst.allocated)
    items = (item,)
    new = engine.cell(_cell_name(params, lst.allocated, items), items)
    return NominalList((new,) + cells, lst.allocated + 1)


def from_items(engine: Engine, items: list, params: GenerateParams) -> NominalList:
    """Build a list holding ``items`` in order by prepending from the tail."""
    lst = NominalList((), 0)
    for item in reversed(items):
        lst = prepend(engine, lst, item, params)
    return lst


class ListIntUniformPrepend(InputDist[NominalList]):
    """``size`` uniform integers; each edit prepends one more."""

    def generate(self, engine: Engine, rng: random.Random, params: GenerateParams) -> NominalList:
        items = [rng.randrange(UNIFORM_INT_MAX) for _ in range(params.size)]
        return from_items(engine, items, params)

    def edit(
        self, engine: Engine, state: NominalList, rng: random.Random, params: GenerateParams
    ) -> NominalList:
        return prepend(engine, state, rng.randrange(UNIFORM_INT_MAX), params)


class ListPt2DUniformPrepend(InputDist[NominalList]):
    """``size`` uniform 2-D points; each edit prepends one more."""

    def generate(self, engine: Engine, rng: random.Random, params: GenerateParams) -> NominalList:
        points = [_uniform_point(rng) for _ in range(params.size)]
        return from_items(engine, points, params)

    def edit(
        self, engine: Engine, state: NominalList, rng: random.Random, params: GenerateParams
    ) -> NominalList:
        return prepend(engine, state, _uniform_point(rng), params)


def _uniform_point(rng: random.Random) -> Pt2D:
    x = rng.randrange(UNIFORM_COORD_MAX)
    y = rng.randrange(UNIFORM_COORD_MAX)
    return (x, y)
