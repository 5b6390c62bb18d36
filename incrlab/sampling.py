"""Sample generator: the round-by-round experiment state machine.

States::

    INITIALIZING --sample()--> SAMPLING --sample()--> ... --> FINISHED

Each call to :meth:`SampleGenerator.sample` produces the sample of one round.
A round runs the naive track and then the incremental track; within a track
the phases are generate, compute, edit batch, each measured separately. In
round 0 the generate phase draws a fresh input; afterwards it hands over the
input left by the previous edit batch.

Both tracks own a ``random.Random`` built from the same seed material. They
are never shared, and since each track performs the same calls in the same
order they stay in lockstep: the naive and incremental inputs of every round
are equal.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Iterator, Sequence

from incrlab.engine import Engine, EngineKind, EngineSwitch
from incrlab.metrics import measure
from incrlab.models import EngineSample, LabExpParams, Sample
from incrlab.traits import Compute, Input, InputDist, Output

logger = logging.getLogger("incrlab.sampling")


class SamplerState(Enum):
    INITIALIZING = "initializing"
    SAMPLING = "sampling"
    FINISHED = "finished"


def rng_from_seeds(seeds: Sequence[int]) -> random.Random:
    """Build a fresh deterministic random source from seed material."""
    return random.Random(",".join(str(int(s)) for s in seeds))


@dataclass
class TrackState(Generic[Input]):
    """Mutable per-engine state of one experiment."""

    kind: EngineKind
    rng: random.Random
    engine: Engine
    input: Any = None  # only meaningful once the track has generated


class SampleGenerator(Generic[Input, Output]):
    """Runs one experiment round by round.

    Args:
        params: Experiment parameters; validated on construction.
        inputdist: Input generator and edit operator.
        computer: Computation under test.
        switch: Active-engine register; a private one is created if omitted.
        record_inputs: Keep every input consumed by each track in
            :attr:`input_trace` (for determinism checks).

    Raises:
        LabConfigError: If ``params`` are malformed. Nothing has been run yet.
    """

    def __init__(
        self,
        params: LabExpParams,
        inputdist: InputDist[Input],
        computer: Compute[Input, Output],
        switch: EngineSwitch | None = None,
        record_inputs: bool = False,
    ):
        self.params = params.validate()
        self.inputdist = inputdist
        self.computer = computer
        self.switch = switch if switch is not None else EngineSwitch()
        self.record_inputs = record_inputs
        self.state = SamplerState.INITIALIZING
        self.change_batch_num = 0
        self.samples: list[Sample] = []
        self.input_trace: dict[EngineKind, list[Any]] = {
            EngineKind.NAIVE: [],
            EngineKind.INCREMENTAL: [],
        }
        seeds = self.params.sample_params.input_seeds
        self._naive: TrackState[Input] = TrackState(
            EngineKind.NAIVE, rng_from_seeds(seeds), Engine(EngineKind.NAIVE)
        )
        self._dcg: TrackState[Input] = TrackState(
            EngineKind.INCREMENTAL, rng_from_seeds(seeds), Engine(EngineKind.INCREMENTAL)
        )

    def __iter__(self) -> Iterator[Sample]:
        while True:
            sample = self.sample()
            if sample is None:
                return
            yield sample

    def sample(self) -> Sample | None:
        """Run the next round; ``None`` once the generator is finished."""
        if self.state is SamplerState.FINISHED:
            return None
        initial = self.state is SamplerState.INITIALIZING
        if initial:
            # fresh engines: the incremental one starts with an empty memo table
            self.switch.activate(EngineKind.NAIVE)
            self._naive.engine = self.switch.expect(EngineKind.NAIVE)
            self.switch.activate(EngineKind.INCREMENTAL)
            self._dcg.engine = self.switch.expect(EngineKind.INCREMENTAL)

        self.switch.use(self._naive.engine)
        self.switch.expect(EngineKind.NAIVE)
        naive_output, naive_sample = self._engine_sample(self._naive, initial)

        self.switch.use(self._dcg.engine)
        self.switch.expect(EngineKind.INCREMENTAL)
        dcg_output, dcg_sample = self._engine_sample(self._dcg, initial)
        # swap the incremental engine out; naive is the resting engine
        self._dcg.engine = self.switch.use(self._naive.engine)

        sp = self.params.sample_params
        output_valid = (naive_output == dcg_output) if sp.validate_output else None
        if output_valid is False:
            logger.warning(
                "Output mismatch in round %d: naive=%r incremental=%r",
                self.change_batch_num,
                naive_output,
                dcg_output,
            )
        sample = Sample(
            params=sp,
            batch_name=self.change_batch_num,
            dcg_sample=dcg_sample,
            naive_sample=naive_sample,
            output_valid=output_valid,
        )
        self.samples.append(sample)
        self.change_batch_num += 1
        if self.change_batch_num >= self.params.change_batch_loopc:
            self.state = SamplerState.FINISHED
        else:
            self.state = SamplerState.SAMPLING
        return sample

    def _engine_sample(
        self, track: TrackState[Input], initial: bool
    ) -> tuple[Output, EngineSample]:
        engine = track.engine
        gp = self.params.sample_params.generate_params
        if initial:
            inp, generate_input = measure(
                self.switch, lambda: self.inputdist.generate(engine, track.rng, gp)
            )
        else:
            current = track.input
            inp, generate_input = measure(self.switch, lambda: current)
        if self.record_inputs:
            self.input_trace[track.kind].append(inp)
        output, compute_output = measure(self.switch, lambda: self.computer.compute(engine, inp))
        edited, batch_edit_input = measure(
            self.switch, lambda: self._edit_batch(engine, inp, track.rng)
        )
        track.input = edited
        engine_sample = EngineSample(
            generate_input=generate_input,
            compute_output=compute_output,
            batch_edit_input=batch_edit_input,
        )
        logger.debug(
            "Round %d %s: %s", self.change_batch_num, track.kind.value, engine_sample
        )
        return output, engine_sample

    def _edit_batch(self, engine: Engine, inp: Input, rng: random.Random) -> Input:
        gp = self.params.sample_params.generate_params
        for _ in range(self.params.sample_params.change_batch_size):
            inp = self.inputdist.edit(engine, inp, rng, gp)
        return inp
