"""Benchmark configurations: one clustering pipeline under a display name.

A configuration bundles three pluggable strategies. Concrete strategies live
outside this package; they only need to satisfy the protocols below.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..graph.models import NonNestedClusterGraph
    from ..solution.nodes import Node


@runtime_checkable
class SimilarityMetric(Protocol):
    """Scores how close two groups of clusters are."""

    def similarity(
        self, a: frozenset[Node], b: frozenset[Node], graph: NonNestedClusterGraph
    ) -> float: ...


@runtime_checkable
class ClusteringAlgorithm(Protocol):
    """Builds a hierarchy of CLUSTER nodes over the graph's clusters."""

    def cluster(self, graph: NonNestedClusterGraph, similarity: SimilarityMetric) -> Node: ...


@runtime_checkable
class CuttingAlgorithm(Protocol):
    """Cuts a cluster hierarchy into disjoint groups of graph clusters."""

    def cut(self, tree: Node) -> list[frozenset[Node]]: ...


class BenchmarkConfig:
    """A named (clustering, cutting, similarity) triple.

    ``name`` only labels result rows and is free to change. Equality and
    hashing use the algorithmic triple alone, so renaming a configuration
    never moves it to a different result key.
    """

    def __init__(
        self,
        name: str,
        clustering_algorithm: ClusteringAlgorithm,
        cutting_algorithm: CuttingAlgorithm,
        similarity_metric: SimilarityMetric,
    ):
        self.name = name
        self.clustering_algorithm = clustering_algorithm
        self.cutting_algorithm = cutting_algorithm
        self.similarity_metric = similarity_metric

    def clone(self) -> BenchmarkConfig:
        """Deep copy, safe to hand to a concurrent run."""
        return BenchmarkConfig(
            self.name,
            copy.deepcopy(self.clustering_algorithm),
            copy.deepcopy(self.cutting_algorithm),
            copy.deepcopy(self.similarity_metric),
        )

    def renamed(self, name: str) -> BenchmarkConfig:
        """Clone under a different display name; the receiver is not modified."""
        clone = self.clone()
        clone.name = name
        return clone

    def _identity(self) -> tuple[Any, Any, Any]:
        return (self.clustering_algorithm, self.cutting_algorithm, self.similarity_metric)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BenchmarkConfig):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        # Strategies may define __eq__ without __hash__; their types are always hashable
        return hash(tuple(type(part) for part in self._identity()))

    def __repr__(self) -> str:
        return (
            f"BenchmarkConfig(name={self.name!r}, "
            f"clustering={type(self.clustering_algorithm).__name__}, "
            f"cutting={type(self.cutting_algorithm).__name__}, "
            f"similarity={type(self.similarity_metric).__name__})"
        )
