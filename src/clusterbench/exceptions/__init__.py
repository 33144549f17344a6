"""Exception hierarchy for clusterbench."""

from .base import ClusterBenchError
from .benchmark import (
    AlgorithmFailure,
    BenchmarkError,
    EmptyReductionError,
    MissingDataError,
)
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)
from .model import InvalidGraphError, InvalidVariantError, ModelError

__all__ = [
    "ClusterBenchError",
    "ModelError",
    "InvalidVariantError",
    "InvalidGraphError",
    "BenchmarkError",
    "EmptyReductionError",
    "MissingDataError",
    "AlgorithmFailure",
    "ConfigurationError",
    "InvalidConfigError",
    "InvalidPathError",
]
