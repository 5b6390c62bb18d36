"""Parameter model and result records for lab experiments.

This module defines:
    NominalStrategy -- how structural names of input cells are assigned.
    GenerateParams  -- shape of the generated input.
    SampleParams    -- per-sample configuration shared by all samples.
    LabExpParams    -- top-level configuration of one experiment run.
    EngineMetrics   -- time and engine counters of one measured phase.
    EngineSample    -- generate / compute / edit metrics of one engine.
    Sample          -- outcome of one round for both engines.
    LabExpResults   -- ordered samples of one experiment.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

from incrlab.engine import EngineCounts
from incrlab.errors import LabConfigError


class NominalStrategy(Enum):
    REGULAR = "regular"
    BY_CONTENT = "by_content"

    @classmethod
    def parse(cls, value: str | NominalStrategy) -> NominalStrategy:
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_")
        if key == "bycontent":
            key = "by_content"
        for member in cls:
            if member.value == key:
                return member
        raise LabConfigError(f"Unknown nominal strategy: {value!r}")


@dataclass(frozen=True)
class GenerateParams:
    """Shape of the generated input.

    Attributes:
        size: Number of items in the initial input.
        gauge: Maximum number of items held by one named cell.
        nominal_strategy: Naming policy for cells.
    """

    size: int
    gauge: int
    nominal_strategy: NominalStrategy = NominalStrategy.REGULAR


@dataclass(frozen=True)
class SampleParams:
    input_seeds: tuple[int, ...]  # seed material for every track's Random
    generate_params: GenerateParams
    validate_output: bool  # compare naive and incremental outputs each round
    change_batch_size: int  # edits per change batch


@dataclass(frozen=True)
class LabExpParams:
    sample_params: SampleParams
    change_batch_loopc: int  # total rounds, round 0 included

    def validate(self) -> LabExpParams:
        """Reject malformed parameters before any engine is touched.

        Returns:
            ``self`` so the call can be chained.

        Raises:
            LabConfigError: On an empty seed list, non-positive loop count or
                gauge, or negative size / batch size.
        """
        sp = self.sample_params
        gp = sp.generate_params
        if not sp.input_seeds:
            raise LabConfigError("input_seeds must be non-empty")
        if any(int(s) < 0 for s in sp.input_seeds):
            raise LabConfigError(f"input_seeds must be unsigned: {sp.input_seeds}")
        if self.change_batch_loopc < 1:
            raise LabConfigError(
                f"change_batch_loopc must be >= 1, got {self.change_batch_loopc}"
            )
        if gp.gauge < 1:
            raise LabConfigError(f"gauge must be >= 1, got {gp.gauge}")
        if gp.size < 0:
            raise LabConfigError(f"size must be >= 0, got {gp.size}")
        if sp.change_batch_size < 0:
            raise LabConfigError(
                f"change_batch_size must be >= 0, got {sp.change_batch_size}"
            )
        return self

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["sample_params"]["input_seeds"] = list(self.sample_params.input_seeds)
        d["sample_params"]["generate_params"]["nominal_strategy"] = (
            self.sample_params.generate_params.nominal_strategy.value
        )
        return d


@dataclass(frozen=True)
class EngineMetrics:
    time_ns: int
    engine_cnt: EngineCounts


@dataclass(frozen=True)
class EngineSample:
    generate_input: EngineMetrics
    compute_output: EngineMetrics
    batch_edit_input: EngineMetrics

    def phases(self) -> dict[str, EngineMetrics]:
        return {
            "generate_input": self.generate_input,
            "compute_output": self.compute_output,
            "batch_edit_input": self.batch_edit_input,
        }


@dataclass(frozen=True)
class Sample:
    """Recorded outcome of one round.

    Fields:
        params: Sample parameters the round ran with (provenance copy).
        batch_name: Round index, 0 for the initial round.
        dcg_sample: Metrics of the incremental engine track.
        naive_sample: Metrics of the naive engine track.
        output_valid: ``None`` when validation is off, otherwise whether both
            engines produced equal outputs.
    """

    params: SampleParams
    batch_name: int
    dcg_sample: EngineSample
    naive_sample: EngineSample
    output_valid: bool | None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["params"]["input_seeds"] = list(self.params.input_seeds)
        d["params"]["generate_params"]["nominal_strategy"] = (
            self.params.generate_params.nominal_strategy.value
        )
        return d


@dataclass
class LabExpResults:
    samples: list[Sample]

    def all_valid(self) -> bool | None:
        """``None`` when no sample was validated, else AND of all verdicts."""
        verdicts = [s.output_valid for s in self.samples if s.output_valid is not None]
        if not verdicts:
            return None
        return all(verdicts)


def labexp_params_defaults() -> LabExpParams:
    """Canonical default configuration of a lab experiment."""
    return LabExpParams(
        sample_params=SampleParams(
            input_seeds=(0,),
            generate_params=GenerateParams(
                size=10,
                gauge=1,
                nominal_strategy=NominalStrategy.REGULAR,
            ),
            validate_output=True,
            change_batch_size=1,
        ),
        change_batch_loopc=10,
    )
