"""Tests for the sample generator state machine.

Uses a trivial integer-sequence input (plain tuples) and an identity
computation so that every property depends only on the orchestration.
"""

from __future__ import annotations

import pytest
from conftest import make_params

from incrlab.engine import Engine, EngineCounts, EngineKind, EngineSwitch
from incrlab.errors import EngineStateError, LabConfigError, UnimplementedStrategyError
from incrlab.sampling import SampleGenerator, SamplerState
from incrlab.traits import Compute, InputDist


class IntSeq(InputDist[tuple]):
    def __init__(self, log: list | None = None):
        self.log = log

    def generate(self, engine, rng, params):
        if self.log is not None:
            self.log.append((engine.kind, "generate"))
        return tuple(rng.randrange(100) for _ in range(params.size))

    def edit(self, engine, state, rng, params):
        if self.log is not None:
            self.log.append((engine.kind, "edit"))
        return (rng.randrange(100),) + state


class Identity(Compute[tuple, tuple]):
    def __init__(self, log: list | None = None):
        self.log = log

    def compute(self, engine, inp):
        if self.log is not None:
            self.log.append((engine.kind, "compute"))
        return engine.memo("id", 0, lambda x: x, inp)


class EngineDependent(Compute[tuple, tuple]):
    """Deliberately buggy: the output depends on the engine."""

    def compute(self, engine, inp):
        return (engine.kind.value,) + inp


class NoGenerate(InputDist[tuple]):
    def edit(self, engine, state, rng, params):
        return state


class ConsList(InputDist[tuple | None]):
    """Linked list of nested pairs; the empty list is ``None``."""

    def __init__(self):
        self.generated = 0

    def generate(self, engine, rng, params):
        self.generated += 1
        state = None
        for _ in range(params.size):
            state = (rng.randrange(100), state)
        return state

    def edit(self, engine, state, rng, params):
        return state[1] if state is not None else None


class ConsLength(Compute[tuple | None, int]):
    def compute(self, engine, inp):
        n = 0
        while inp is not None:
            n, inp = n + 1, inp[1]
        return n


class BrokenSwitch(EngineSwitch):
    """Register that ignores requests and always installs a naive engine."""

    def use(self, engine):
        return super().use(Engine(EngineKind.NAIVE))


def test_scenario_three_rounds_valid() -> None:
    gen = SampleGenerator(make_params(loopc=3), IntSeq(), Identity())
    samples = list(gen)
    assert len(samples) == 3
    assert [s.batch_name for s in samples] == [0, 1, 2]
    assert all(s.output_valid is True for s in samples)
    assert gen.samples == samples


def test_scenario_validation_off() -> None:
    gen = SampleGenerator(make_params(loopc=3, validate=False), IntSeq(), Identity())
    samples = list(gen)
    assert len(samples) == 3
    assert all(s.output_valid is None for s in samples)


def test_scenario_single_round_then_finished() -> None:
    gen = SampleGenerator(make_params(loopc=1), IntSeq(), Identity())
    assert gen.state is SamplerState.INITIALIZING
    first = gen.sample()
    assert first is not None and first.batch_name == 0
    assert gen.state is SamplerState.FINISHED
    assert gen.sample() is None
    assert gen.sample() is None
    assert list(gen) == []
    assert len(gen.samples) == 1


def test_state_transitions() -> None:
    gen = SampleGenerator(make_params(loopc=3), IntSeq(), Identity())
    gen.sample()
    assert gen.state is SamplerState.SAMPLING
    gen.sample()
    assert gen.state is SamplerState.SAMPLING
    gen.sample()
    assert gen.state is SamplerState.FINISHED


@pytest.mark.parametrize("loopc", [1, 2, 5, 10])
def test_round_count_matches_loopc(loopc: int) -> None:
    gen = SampleGenerator(make_params(loopc=loopc), IntSeq(), Identity())
    assert len(list(gen)) == loopc


def test_zero_loopc_rejected_before_engine_activation() -> None:
    switch = EngineSwitch()
    resting = switch.active
    with pytest.raises(LabConfigError):
        SampleGenerator(make_params(loopc=0), IntSeq(), Identity(), switch=switch)
    assert switch.active is resting


@pytest.mark.parametrize(
    "kwargs",
    [{"gauge": 0}, {"size": -1}, {"batch": -1}, {"seeds": ()}],
)
def test_malformed_params_rejected(kwargs: dict) -> None:
    with pytest.raises(LabConfigError):
        SampleGenerator(make_params(**kwargs), IntSeq(), Identity())


def test_runs_are_deterministic() -> None:
    params = make_params(loopc=6, batch=2, seeds=(7, 3))
    a = SampleGenerator(params, IntSeq(), Identity(), record_inputs=True)
    b = SampleGenerator(params, IntSeq(), Identity(), record_inputs=True)
    list(a)
    list(b)
    for kind in EngineKind:
        assert a.input_trace[kind] == b.input_trace[kind]
        assert len(a.input_trace[kind]) == 6


def test_tracks_consume_identical_inputs() -> None:
    params = make_params(loopc=5, size=4, batch=3)
    gen = SampleGenerator(params, IntSeq(), Identity(), record_inputs=True)
    list(gen)
    naive = gen.input_trace[EngineKind.NAIVE]
    dcg = gen.input_trace[EngineKind.INCREMENTAL]
    assert naive == dcg
    # each round sees the input left by the previous batch of edits
    assert [len(x) for x in naive] == [4, 7, 10, 13, 16]
    for prev, cur in zip(naive, naive[1:]):
        assert cur[3:] == prev


def test_different_seeds_give_different_inputs() -> None:
    a = SampleGenerator(make_params(seeds=(0,)), IntSeq(), Identity(), record_inputs=True)
    b = SampleGenerator(make_params(seeds=(1,)), IntSeq(), Identity(), record_inputs=True)
    list(a)
    list(b)
    assert a.input_trace[EngineKind.NAIVE] != b.input_trace[EngineKind.NAIVE]


def test_buggy_computation_is_reported_not_raised() -> None:
    gen = SampleGenerator(make_params(loopc=3), IntSeq(), EngineDependent())
    samples = list(gen)
    assert len(samples) == 3
    assert any(s.output_valid is False for s in samples)


def test_phase_order_naive_first() -> None:
    log: list = []
    gen = SampleGenerator(make_params(loopc=2, batch=2), IntSeq(log), Identity(log))
    list(gen)
    naive, dcg = EngineKind.NAIVE, EngineKind.INCREMENTAL
    assert log == [
        (naive, "generate"),
        (naive, "compute"),
        (naive, "edit"),
        (naive, "edit"),
        (dcg, "generate"),
        (dcg, "compute"),
        (dcg, "edit"),
        (dcg, "edit"),
        (naive, "compute"),
        (naive, "edit"),
        (naive, "edit"),
        (dcg, "compute"),
        (dcg, "edit"),
        (dcg, "edit"),
    ]


def test_naive_is_resting_engine_between_rounds() -> None:
    switch = EngineSwitch()
    gen = SampleGenerator(make_params(loopc=3), IntSeq(), Identity(), switch=switch)
    while gen.sample() is not None:
        assert switch.is_naive()


def test_incremental_engine_survives_across_rounds() -> None:
    gen = SampleGenerator(make_params(loopc=3), IntSeq(), Identity())
    samples = list(gen)
    first, second = samples[0], samples[1]
    assert first.dcg_sample.compute_output.engine_cnt == EngineCounts(evals=1, creates=1)
    # same name, new argument: the stored entry is re-evaluated, not recreated
    assert second.dcg_sample.compute_output.engine_cnt == EngineCounts(evals=1, dirty=1)
    assert second.naive_sample.compute_output.engine_cnt == EngineCounts(evals=1)


def test_handover_phase_has_no_engine_work() -> None:
    samples = list(SampleGenerator(make_params(loopc=3), IntSeq(), Identity()))
    for s in samples[1:]:
        assert s.naive_sample.generate_input.engine_cnt == EngineCounts()
        assert s.dcg_sample.generate_input.engine_cnt == EngineCounts()


def test_empty_input_is_handed_over_not_regenerated() -> None:
    dist = ConsList()
    gen = SampleGenerator(make_params(loopc=3, size=1), dist, ConsLength(), record_inputs=True)
    samples = list(gen)
    # one draw per track in round 0; the edit empties the list and later rounds keep it
    assert dist.generated == 2
    assert [s.batch_name for s in samples] == [0, 1, 2]
    assert all(s.output_valid for s in samples)
    assert gen.input_trace[EngineKind.NAIVE] == gen.input_trace[EngineKind.INCREMENTAL]
    assert gen.input_trace[EngineKind.NAIVE][1:] == [None, None]


def test_samples_carry_params() -> None:
    params = make_params(loopc=2)
    for s in SampleGenerator(params, IntSeq(), Identity()):
        assert s.params == params.sample_params


def test_engine_mismatch_is_fatal() -> None:
    gen = SampleGenerator(make_params(), IntSeq(), Identity(), switch=BrokenSwitch())
    with pytest.raises(EngineStateError):
        gen.sample()


def test_unimplemented_strategy_aborts_experiment() -> None:
    gen = SampleGenerator(make_params(), NoGenerate(), Identity())
    with pytest.raises(UnimplementedStrategyError) as exc:
        gen.sample()
    assert exc.value.operation == "generate"
    assert exc.value.strategy == "NoGenerate"
