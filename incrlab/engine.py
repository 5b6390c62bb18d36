"""Naive and incremental execution engines plus the engine switch.

The harness never looks inside an engine; it only selects one, hands it to
the strategies, and snapshots its counters. Two kinds exist:

``NAIVE``
    Every ``memo`` call evaluates its function. Nothing is retained.
``INCREMENTAL``
    ``memo`` calls are keyed by ``(tag, name)``. A call whose argument equals
    the stored one reuses the stored result; a known name with a changed
    argument is re-evaluated ("dirty"); an unknown name is evaluated and
    stored ("create").

Counters are cumulative per engine; :class:`EngineCounts` supports
subtraction so that a measured phase can report only its own work.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Callable, Generic, Hashable, TypeVar

from incrlab.errors import EngineStateError

logger = logging.getLogger("incrlab.engine")

T = TypeVar("T")
A = TypeVar("A")


class EngineKind(Enum):
    NAIVE = "naive"
    INCREMENTAL = "incremental"


@dataclass(frozen=True)
class EngineCounts:
    """Snapshot of engine operation counters."""

    evals: int = 0  # function evaluations
    hits: int = 0  # memo reuses
    creates: int = 0  # new memo entries
    dirty: int = 0  # memo entries re-evaluated after argument change
    allocs: int = 0  # named cells allocated

    def __sub__(self, other: EngineCounts) -> EngineCounts:
        return EngineCounts(
            **{f.name: getattr(self, f.name) - getattr(other, f.name) for f in fields(self)}
        )

    def __add__(self, other: EngineCounts) -> EngineCounts:
        return EngineCounts(
            **{f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)}
        )


@dataclass(frozen=True)
class Cell:
    """Named chunk of a list input."""

    name: Hashable
    items: tuple


class Thunk(Generic[T]):
    """Deferred ``engine.memo`` call, evaluated at most once."""

    __slots__ = ("_engine", "_tag", "_name", "_fn", "_arg", "_forced", "_value")

    def __init__(self, engine: Engine, tag: str, name: Hashable, fn: Callable, arg: Any):
        self._engine = engine
        self._tag = tag
        self._name = name
        self._fn = fn
        self._arg = arg
        self._forced = False
        self._value = None

    def force(self) -> T:
        if not self._forced:
            arg = _resolve(self._arg)
            self._value = self._engine.memo(self._tag, self._name, self._fn, arg)
            self._forced = True
            self._fn = None
            self._arg = None
        return self._value  # type: ignore[return-value]


def _resolve(arg: Any) -> Any:
    # thunks directly in the argument (or in a tuple argument) are forced first
    if isinstance(arg, Thunk):
        return arg.force()
    if isinstance(arg, tuple) and any(isinstance(a, Thunk) for a in arg):
        return tuple(a.force() if isinstance(a, Thunk) else a for a in arg)
    return arg


class Engine:
    """Execution context handed explicitly to every strategy call."""

    def __init__(self, kind: EngineKind):
        self.kind = kind
        self._counts = EngineCounts()
        self._table: dict[tuple[str, Hashable], tuple[Any, Any]] = {}

    def __repr__(self) -> str:
        return f"Engine(kind={self.kind.value}, entries={len(self._table)}, counts={self._counts})"

    @property
    def counts(self) -> EngineCounts:
        return self._counts

    def _bump(self, **delta: int) -> None:
        current = self._counts
        self._counts = EngineCounts(
            **{f.name: getattr(current, f.name) + delta.get(f.name, 0) for f in fields(current)}
        )

    def cell(self, name: Hashable, items: tuple) -> Cell:
        self._bump(allocs=1)
        return Cell(name=name, items=tuple(items))

    def memo(self, tag: str, name: Hashable, fn: Callable[[A], T], arg: A) -> T:
        """Evaluate ``fn(arg)`` under this engine's reuse policy.

        Args:
            tag: Namespace of the memoised function (e.g. ``"map"``).
            name: Structural name of the node inside that namespace.
            fn: Pure function to evaluate.
            arg: Argument; compared by equality against the stored one.

        Returns:
            The (possibly reused) value of ``fn(arg)``.
        """
        if self.kind is EngineKind.NAIVE:
            self._bump(evals=1)
            return fn(arg)
        key = (tag, name)
        entry = self._table.get(key)
        if entry is not None and entry[0] == arg:
            self._bump(hits=1)
            return entry[1]
        if entry is None:
            self._bump(creates=1, evals=1)
        else:
            self._bump(dirty=1, evals=1)
        value = fn(arg)
        self._table[key] = (arg, value)
        return value

    def thunk(self, tag: str, name: Hashable, fn: Callable[[A], T], arg: Any) -> Thunk[T]:
        return Thunk(self, tag, name, fn, arg)


class EngineSwitch:
    """Single mutable register holding the active engine.

    ``activate`` and ``use`` both return the previously active engine so the
    caller can restore or keep it (the sample generator keeps the incremental
    engine aside between rounds and leaves the naive one active).
    """

    def __init__(self) -> None:
        self._active = Engine(EngineKind.NAIVE)

    @property
    def active(self) -> Engine:
        return self._active

    def activate(self, kind: EngineKind) -> Engine:
        """Install a fresh engine of ``kind`` and return the previous one."""
        return self.use(Engine(kind))

    def use(self, engine: Engine) -> Engine:
        previous = self._active
        self._active = engine
        logger.debug("Engine switch: %s -> %s", previous.kind.value, engine.kind.value)
        return previous

    def is_naive(self) -> bool:
        return self._active.kind is EngineKind.NAIVE

    def is_incremental(self) -> bool:
        return self._active.kind is EngineKind.INCREMENTAL

    def expect(self, kind: EngineKind) -> Engine:
        if self._active.kind is not kind:
            raise EngineStateError(
                f"expected {kind.value} engine, active is {self._active.kind.value}"
            )
        return self._active

    def snapshot_counts(self) -> EngineCounts:
        return self._active.counts
