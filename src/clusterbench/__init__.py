"""
clusterbench - benchmarking harness for software modularisation by clustering

Flattens a solution's declared structure (projects, namespaces, classes) into
a dependency graph, runs pluggable clustering pipelines on it repeatedly, and
scores how well they recover the structure that was flattened away.
"""

__version__ = "0.1.0"

from .benchmarking import (
    BenchmarkConfig,
    BenchMarkResult,
    PerSolutionResultsContainer,
    SolutionBenchmark,
)
from .graph import NonNestedClusterGraph, ablate_edges
from .solution import Node, NodeKind, ProjectDescriptor, Repository

__all__ = [
    "SolutionBenchmark",  # Main entry point
    "BenchmarkConfig",
    "BenchMarkResult",
    "PerSolutionResultsContainer",
    "NonNestedClusterGraph",
    "ablate_edges",
    "Node",
    "NodeKind",
    "ProjectDescriptor",
    "Repository",
]
