"""Capability traits an experiment is parameterised over.

Generate
    ``generate(engine, rng, params) -> Input``; deterministic given the
    random source state and parameters.
Edit
    ``edit(engine, input, rng, params) -> Input``; one change, consuming
    randomness only from ``rng``.
Compute
    ``compute(engine, input) -> Output``; pure from the harness' view.

All methods are static-style: strategies carry no state, so the same
strategy object can serve both engine tracks. A method that a concrete
strategy does not override raises :class:`UnimplementedStrategyError`.
"""

from __future__ import annotations

import random
from abc import ABC
from typing import Generic, TypeVar

from incrlab.engine import Engine
from incrlab.errors import UnimplementedStrategyError
from incrlab.models import GenerateParams

Input = TypeVar("Input")
Output = TypeVar("Output")


class Generate(ABC, Generic[Input]):
    def generate(self, engine: Engine, rng: random.Random, params: GenerateParams) -> Input:
        raise UnimplementedStrategyError(type(self).__name__, "generate")


class Edit(ABC, Generic[Input]):
    def edit(
        self, engine: Engine, state: Input, rng: random.Random, params: GenerateParams
    ) -> Input:
        raise UnimplementedStrategyError(type(self).__name__, "edit")


class InputDist(Generate[Input], Edit[Input]):
    """Input distribution: a generator together with its edit operator."""


class Compute(ABC, Generic[Input, Output]):
    def compute(self, engine: Engine, inp: Input) -> Output:
        raise UnimplementedStrategyError(type(self).__name__, "compute")
