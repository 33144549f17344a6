"""Benchmark-run exceptions: empty reductions, missing data, algorithm faults."""

from pathlib import Path
from typing import Optional

from .base import ClusterBenchError


class BenchmarkError(ClusterBenchError):
    """Base class for errors raised while running experiments."""

    pass


class EmptyReductionError(BenchmarkError):
    """Raised when averaging an empty sequence of results."""

    def __init__(self, what: str = "results"):
        super().__init__(f"Cannot average an empty sequence of {what}", details={"what": what})
        self.what = what


class MissingDataError(BenchmarkError):
    """Raised when parsed data for a repository is absent or empty."""

    def __init__(self, reason: str, location: Optional[Path] = None):
        details = {"reason": reason}
        if location is not None:
            details["location"] = str(location)
        super().__init__(f"Missing benchmark data: {reason}", details=details)
        self.reason = reason
        self.location = location


class AlgorithmFailure(BenchmarkError):
    """Raised by pluggable algorithms (or their adapters) when a run cannot complete.

    The harness never wraps or retries these; they reach the caller as raised.
    """

    def __init__(self, algorithm: str, reason: str):
        super().__init__(
            f"Algorithm {algorithm} failed",
            details={"algorithm": algorithm, "reason": reason},
        )
        self.algorithm = algorithm
        self.reason = reason
