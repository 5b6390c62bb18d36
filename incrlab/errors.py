"""Exception taxonomy for the lab harness.

Only :class:`UnimplementedStrategyError` is recoverable, and only at the
granularity of a whole experiment (see :mod:`incrlab.runner`). An output
mismatch between engines is never raised; it is recorded in the sample.
"""


class LabError(Exception):
    """Base class for all harness errors."""


class LabConfigError(LabError, ValueError):
    """Malformed experiment parameters or configuration file."""


class EngineStateError(LabError, RuntimeError):
    """The active engine is not the one that was just requested."""


class UnimplementedStrategyError(LabError, NotImplementedError):
    """A Generate / Edit / Compute strategy has no real implementation."""

    def __init__(self, strategy: str, operation: str):
        super().__init__(f"{strategy}.{operation} is not implemented")
        self.strategy = strategy
        self.operation = operation
