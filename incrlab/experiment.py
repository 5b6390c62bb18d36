"""Named, runnable experiments with their type parameters hidden.

A :class:`TestComputer` binds a display name to one input distribution and
one computation; callers only see the :class:`LabExp` interface, so a list of
experiments over different input and output types can be driven uniformly.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Generic

from incrlab.engine import EngineSwitch
from incrlab.models import LabExpParams, LabExpResults
from incrlab.sampling import SampleGenerator
from incrlab.traits import Compute, Input, InputDist, Output

logger = logging.getLogger("incrlab.experiment")


class LabExp(ABC):
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def run(self, params: LabExpParams) -> LabExpResults: ...


class TestComputer(LabExp, Generic[Input, Output]):
    """Experiment over a concrete (input distribution, computation) pair."""

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        identity: str,
        inputdist: InputDist[Input],
        computer: Compute[Input, Output],
        switch: EngineSwitch | None = None,
    ):
        self.identity = identity
        self.inputdist = inputdist
        self.computer = computer
        self.switch = switch

    def __repr__(self) -> str:
        return (
            f"TestComputer({self.identity!r}, {type(self.inputdist).__name__}, "
            f"{type(self.computer).__name__})"
        )

    def name(self) -> str:
        return self.identity

    def run(self, params: LabExpParams) -> LabExpResults:
        """Drive a fresh sample generator to completion.

        Raises:
            LabConfigError: Malformed ``params``.
            UnimplementedStrategyError: A strategy method is missing.
            EngineStateError: The engine register did not hold the requested
                engine.
        """
        gen = SampleGenerator(params, self.inputdist, self.computer, switch=self.switch)
        for _ in gen:
            pass
        logger.info("%s: %d samples", self.identity, len(gen.samples))
        return LabExpResults(samples=gen.samples)
