"""Benchmark configurations, experiment harness and result aggregation."""

from .backend import BenchmarkBackend, DefaultBackend, SolutionStore
from .config import BenchmarkConfig, ClusteringAlgorithm, CuttingAlgorithm, SimilarityMetric
from .harness import SolutionBenchmark
from .results import (
    BenchMarkResult,
    BenchMarkResultsEntry,
    PerSolutionResultsContainer,
    ResultsBuilder,
    average,
    average_entries,
)

__all__ = [
    "BenchmarkBackend",
    "BenchmarkConfig",
    "BenchMarkResult",
    "BenchMarkResultsEntry",
    "ClusteringAlgorithm",
    "CuttingAlgorithm",
    "DefaultBackend",
    "PerSolutionResultsContainer",
    "ResultsBuilder",
    "SimilarityMetric",
    "SolutionBenchmark",
    "SolutionStore",
    "average",
    "average_entries",
]
