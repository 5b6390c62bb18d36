"""Differential benchmarking of naive vs incremental recomputation.

Exports the parameter model, the experiment interface and the registry.
"""

from incrlab.experiment import LabExp, TestComputer  # noqa: F401
from incrlab.models import (  # noqa: F401
    GenerateParams,
    LabExpParams,
    LabExpResults,
    NominalStrategy,
    Sample,
    SampleParams,
    labexp_params_defaults,
)
from incrlab.registry import all_tests  # noqa: F401

__all__ = [
    "GenerateParams",
    "LabExp",
    "LabExpParams",
    "LabExpResults",
    "NominalStrategy",
    "Sample",
    "SampleParams",
    "TestComputer",
    "all_tests",
    "labexp_params_defaults",
]
