"""Collaborator contract between the experiment harness and the outside world.

The harness never touches files or algorithms directly. Everything it needs
comes through a ``BenchmarkBackend``. ``DefaultBackend`` covers the graph and
scoring operations with this package's own implementations and delegates
on-disk work to a ``SolutionStore``, which is supplied by whoever owns the
parsed-data format.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable

from ..graph.builder import ClusterLevel, DependencyTree, root_namespaces
from ..graph.models import NonNestedClusterGraph
from . import pipeline
from .config import BenchmarkConfig, ClusteringAlgorithm, CuttingAlgorithm, SimilarityMetric
from .results import BenchMarkResult


@runtime_checkable
class SolutionStore(Protocol):
    """Reads and materialises parsed solution data."""

    def load_project_graphs_in_folder(self, folder: Path) -> Sequence[DependencyTree]: ...

    def complete_tree_with_dependencies(self, folder: Path) -> DependencyTree: ...

    def prepare_repository(self, source: Path, destination: Path) -> None: ...


@runtime_checkable
class BenchmarkBackend(Protocol):
    """Everything the harness consumes."""

    def load_project_graphs_in_folder(self, folder: Path) -> Sequence[DependencyTree]: ...

    def root_namespaces(self, tree: DependencyTree, level: ClusterLevel) -> NonNestedClusterGraph: ...

    def complete_tree_with_dependencies(self, folder: Path) -> DependencyTree: ...

    def run_configuration(
        self, config: BenchmarkConfig, graph: NonNestedClusterGraph
    ) -> BenchMarkResult: ...

    def compare_two_algorithms(
        self,
        clustering_a: ClusteringAlgorithm,
        clustering_b: ClusteringAlgorithm,
        cutting: CuttingAlgorithm,
        similarity: SimilarityMetric,
        graph: NonNestedClusterGraph,
    ) -> BenchMarkResult: ...

    def prepare_repository(self, source: Path, destination: Path) -> None: ...


class DefaultBackend:
    """Backend built from a SolutionStore and the reference pipelines."""

    def __init__(self, store: SolutionStore):
        self.store = store

    def load_project_graphs_in_folder(self, folder: Path) -> Sequence[DependencyTree]:
        return self.store.load_project_graphs_in_folder(folder)

    def complete_tree_with_dependencies(self, folder: Path) -> DependencyTree:
        return self.store.complete_tree_with_dependencies(folder)

    def prepare_repository(self, source: Path, destination: Path) -> None:
        self.store.prepare_repository(source, destination)

    def root_namespaces(self, tree: DependencyTree, level: ClusterLevel) -> NonNestedClusterGraph:
        return root_namespaces(tree, level)

    def run_configuration(
        self, config: BenchmarkConfig, graph: NonNestedClusterGraph
    ) -> BenchMarkResult:
        return pipeline.run_configuration(config, graph)

    def compare_two_algorithms(
        self,
        clustering_a: ClusteringAlgorithm,
        clustering_b: ClusteringAlgorithm,
        cutting: CuttingAlgorithm,
        similarity: SimilarityMetric,
        graph: NonNestedClusterGraph,
    ) -> BenchMarkResult:
        return pipeline.compare_two_algorithms(
            clustering_a, clustering_b, cutting, similarity, graph
        )
