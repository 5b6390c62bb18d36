"""Pytest configuration, shared fixtures & custom summary hook.

Also ensures the project root is on sys.path so 'import incrlab' and
'import main' work without installing the package.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_root = Path(__file__).resolve().parents[1]
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from incrlab.models import (  # noqa: E402
    GenerateParams,
    LabExpParams,
    NominalStrategy,
    SampleParams,
)


def make_params(
    loopc: int = 3,
    size: int = 10,
    gauge: int = 1,
    validate: bool = True,
    batch: int = 1,
    seeds: tuple[int, ...] = (0,),
    nominal: NominalStrategy = NominalStrategy.REGULAR,
) -> LabExpParams:
    return LabExpParams(
        sample_params=SampleParams(
            input_seeds=seeds,
            generate_params=GenerateParams(size=size, gauge=gauge, nominal_strategy=nominal),
            validate_output=validate,
            change_batch_size=batch,
        ),
        change_batch_loopc=loopc,
    )


@pytest.fixture
def small_params() -> LabExpParams:
    return make_params(loopc=4, size=12, gauge=3)


def pytest_terminal_summary(
    terminalreporter: pytest.TerminalReporter,
    exitstatus: int,
    config: pytest.Config,
) -> None:  # noqa: D401
    """Append a compact custom summary at the end of test session."""
    stats = terminalreporter.stats
    passed = len(stats.get("passed", []))
    failed = len(stats.get("failed", []))
    errors = len(stats.get("error", []))
    skipped = len(stats.get("skipped", []))

    terminalreporter.section("Lab test summary", sep="=")
    terminalreporter.write_line(
        f"Passed: {passed} | Failed: {failed} | Errors: {errors} | Skipped: {skipped}"
    )
    if failed:
        terminalreporter.write_line("Failed tests:")
        for rep in stats["failed"]:
            terminalreporter.write_line(f"  - {rep.nodeid}")
