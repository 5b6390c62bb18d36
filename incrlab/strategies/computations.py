"""Computations over :class:`NominalList` inputs.

Every computation memoises its per-cell work under the cell's name, so the
incremental engine only re-evaluates cells touched by an edit while the naive
engine evaluates everything. Outputs are plain tuples: equal outputs from the
two engines compare equal structurally.

"Eager" variants call ``engine.memo`` directly while walking the cells.
"Lazy" variants first build a structure of thunks and force it afterwards.
"""

from __future__ import annotations

import heapq
from typing import Callable, Hashable, TypeVar

from incrlab.engine import Engine
from incrlab.strategies.lists import NominalList, Pt2D
from incrlab.traits import Compute

Node = TypeVar("Node")


def _map_items(items: tuple) -> tuple:
    return tuple(x + 1 for x in items)


def _filter_items(items: tuple) -> tuple:
    return tuple(x for x in items if x % 2 == 0)


def _reverse_items(items: tuple) -> tuple:
    return items[::-1]


def _sort_items(items: tuple) -> tuple:
    return tuple(sorted(items))


def _merge(pair: tuple[tuple, tuple]) -> tuple:
    left, right = pair
    return tuple(heapq.merge(left, right))


class EagerMap(Compute[NominalList, tuple]):
    def compute(self, engine: Engine, inp: NominalList) -> tuple:
        out: list = []
        for cell in inp.cells:
            out.extend(engine.memo("map", cell.name, _map_items, cell.items))
        return tuple(out)


class LazyMap(Compute[NominalList, tuple]):
    def compute(self, engine: Engine, inp: NominalList) -> tuple:
        thunks = [engine.thunk("lazy-map", c.name, _map_items, c.items) for c in inp.cells]
        return tuple(x for t in thunks for x in t.force())


class EagerFilter(Compute[NominalList, tuple]):
    def compute(self, engine: Engine, inp: NominalList) -> tuple:
        out: list = []
        for cell in inp.cells:
            out.extend(engine.memo("filter", cell.name, _filter_items, cell.items))
        return tuple(out)


class LazyFilter(Compute[NominalList, tuple]):
    def compute(self, engine: Engine, inp: NominalList) -> tuple:
        thunks = [
            engine.thunk("lazy-filter", c.name, _filter_items, c.items) for c in inp.cells
        ]
        return tuple(x for t in thunks for x in t.force())


class Reverse(Compute[NominalList, tuple]):
    def compute(self, engine: Engine, inp: NominalList) -> tuple:
        out: list = []
        for cell in reversed(inp.cells):
            out.extend(engine.memo("reverse", cell.name, _reverse_items, cell.items))
        return tuple(out)


def _merge_tree(
    level: list[tuple[Hashable, Node]], combine: Callable[[Hashable, Node, Node], Node]
) -> Node | None:
    """Pair adjacent nodes bottom-up until one root remains.

    ``level`` is ordered tail first, so a prepend only appends nodes at the
    end and existing pairs (hence merge names) are kept.
    """
    if not level:
        return None
    while len(level) > 1:
        nxt: list[tuple[Hashable, Node]] = []
        for i in range(0, len(level) - 1, 2):
            (lname, lval), (rname, rval) = level[i], level[i + 1]
            name = (lname, rname)
            nxt.append((name, combine(name, lval, rval)))
        if len(level) % 2:
            nxt.append(level[-1])
        level = nxt
    return level[0][1]


class EagerMergesort(Compute[NominalList, tuple]):
    def compute(self, engine: Engine, inp: NominalList) -> tuple:
        leaves = [
            (c.name, engine.memo("sort", c.name, _sort_items, c.items))
            for c in reversed(inp.cells)
        ]
        root = _merge_tree(
            leaves, lambda name, left, right: engine.memo("merge", name, _merge, (left, right))
        )
        return root if root is not None else ()


class LazyMergesort(Compute[NominalList, tuple]):
    def compute(self, engine: Engine, inp: NominalList) -> tuple:
        leaves = [
            (c.name, engine.thunk("lazy-sort", c.name, _sort_items, c.items))
            for c in reversed(inp.cells)
        ]
        root = _merge_tree(
            leaves,
            lambda name, left, right: engine.thunk("lazy-merge", name, _merge, (left, right)),
        )
        return root.force() if root is not None else ()


def _cross(o: Pt2D, a: Pt2D, b: Pt2D) -> int:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def _hull_side(p: Pt2D, q: Pt2D, pts: list[Pt2D]) -> list[Pt2D]:
    """Hull vertices strictly left of ``p -> q``, ordered from ``p`` to ``q``."""
    if not pts:
        return []
    far = max(pts, key=lambda r: (_cross(p, q, r), r))
    left_a = [r for r in pts if _cross(p, far, r) > 0]
    left_b = [r for r in pts if _cross(far, q, r) > 0]
    return _hull_side(p, far, left_a) + [far] + _hull_side(far, q, left_b)


def quickhull(points) -> tuple[Pt2D, ...]:
    """Convex hull vertices, counter-clockwise, starting at the lowest point.

    Collinear boundary points are not vertices. Ties for the lowest point are
    broken by the smaller x.
    """
    pts = sorted(set(points))
    if len(pts) <= 2:
        cw = pts
    else:
        a, b = pts[0], pts[-1]
        upper = [p for p in pts if _cross(a, b, p) > 0]
        lower = [p for p in pts if _cross(b, a, p) > 0]
        cw = [a] + _hull_side(a, b, upper) + [b] + _hull_side(b, a, lower)
    if not cw:
        return ()
    ccw = cw[::-1]
    start = ccw.index(min(ccw, key=lambda p: (p[1], p[0])))
    return tuple(ccw[start:] + ccw[:start])


class Quickhull(Compute[NominalList, tuple]):
    def compute(self, engine: Engine, inp: NominalList) -> tuple:
        hulls = [engine.memo("hull", c.name, quickhull, c.items) for c in inp.cells]
        candidates = tuple(p for h in hulls for p in h)
        return engine.memo("hull", "all", quickhull, candidates)
