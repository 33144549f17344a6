"""Experiment harness: repeated, comparable runs of clustering configurations.

Every experiment walks the same per-repository loop: load parsed data,
flatten it into a cluster graph, run each configuration ``reruns_per_config``
times, average, and store one result per (repository, configuration).

Namespace recovery reruns sequentially. The project-recovery experiments fan
reruns out to a thread pool and join on all of them before averaging; each
rerun receives its own clone of the configuration while the graph, which is
never modified, is shared.

Nothing here catches algorithm errors. A failing run aborts the experiment,
since an average over the runs that happened to succeed would not be
comparable with the others. Repositories finished before the failure remain
available through ``partial_results()``.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path
from typing import Callable, Optional, Sequence

from ..config import BenchmarkSettings
from ..exceptions import MissingDataError
from ..graph.ablation import ablate_edges, ablation_label
from ..graph.builder import ClusterLevel, DependencyTree
from ..graph.models import NonNestedClusterGraph
from ..logging_config import get_logger
from ..solution.repository import Repository
from .backend import BenchmarkBackend
from .config import BenchmarkConfig
from .results import (
    BenchMarkResult,
    BenchMarkResultsEntry,
    PerSolutionResultsContainer,
    ResultsBuilder,
    average,
    average_entries,
)

logger = get_logger(__name__)


class SolutionBenchmark:
    """Runs benchmark experiments over a list of repositories.

    Args:
        backend: Data loading, flattening and per-run operations
        settings: Data locations, default rerun count and pool size
    """

    def __init__(self, backend: BenchmarkBackend, settings: Optional[BenchmarkSettings] = None):
        self.backend = backend
        self.settings = settings or BenchmarkSettings()
        self._builder: Optional[ResultsBuilder] = None

    # ── Locations ──────────────────────────────────────────────────

    def parsed_location(self, repository: Repository) -> Path:
        return repository.parsed_location(self.settings.parsed_data_path)

    def repository_location(self, repository: Repository) -> Path:
        return repository.source_location(self.settings.repo_path)

    def prepare(self, repository: Repository) -> None:
        """Materialise a checked-out repository into the parsed-data layout."""
        source = self.repository_location(repository)
        destination = self.parsed_location(repository)
        logger.info(f"[{repository}] preparing {source} -> {destination}")
        self.backend.prepare_repository(source, destination)

    # ── Experiments ────────────────────────────────────────────────

    def bench_namespace_recovery(
        self,
        configs: Sequence[BenchmarkConfig],
        repositories: Sequence[Repository],
        reruns_per_config: Optional[int] = None,
    ) -> PerSolutionResultsContainer:
        """Recover namespaces from class-level graphs, one project at a time.

        Each configuration runs ``reruns_per_config`` times per project. The
        per-project averages are averaged again into one score per repository.
        """
        reruns = self._reruns(reruns_per_config)
        configs = self._distinct(configs)
        builder = self._start(reruns)

        for repository in list(repositories):
            folder = self._data_folder(repository)
            projects = list(self.backend.load_project_graphs_in_folder(folder))
            if not projects:
                raise MissingDataError("no parsed projects found", location=folder)
            logger.info(
                f"[{repository}] namespace recovery: {len(projects)} projects, "
                f"{len(configs)} configs x {reruns} runs"
            )

            per_project: dict[BenchmarkConfig, list[BenchMarkResultsEntry]] = {}
            for project in projects:
                graph = self.backend.root_namespaces(project, ClusterLevel.CLASS)
                if not graph.clusters:
                    raise MissingDataError(
                        f"project {project.name} declares no classes", location=folder
                    )
                for config in configs:
                    runs = [
                        self.backend.run_configuration(config, graph) for _ in range(reruns)
                    ]
                    entry = BenchMarkResultsEntry(project.name, average(runs))
                    per_project.setdefault(config, []).append(entry)
                    logger.debug(f"[{repository}] {project.name} / {config.name}: {entry.result.score:.4f}")

            builder.add(
                repository,
                {config: average_entries(entries) for config, entries in per_project.items()},
            )

        return builder.build()

    def bench_project_recovery(
        self,
        configs: Sequence[BenchmarkConfig],
        repositories: Sequence[Repository],
        reruns_per_config: Optional[int] = None,
    ) -> PerSolutionResultsContainer:
        """Recover projects from the solution-wide namespace graph."""
        reruns = self._reruns(reruns_per_config)
        configs = self._distinct(configs)
        builder = self._start(reruns)

        for repository in list(repositories):
            graph = NonNestedClusterGraph.from_graph(self._solution_graph(repository))
            logger.info(
                f"[{repository}] project recovery: {len(graph)} clusters, "
                f"{graph.edge_count} edges, {len(configs)} configs x {reruns} runs"
            )

            per_config: dict[BenchmarkConfig, BenchMarkResult] = {}
            for config in configs:
                calls = [
                    partial(self.backend.run_configuration, config.clone(), graph)
                    for _ in range(reruns)
                ]
                per_config[config] = self._join(calls)
            builder.add(repository, per_config)

        return builder.build()

    def bench_project_recovery_with_removed_data(
        self,
        config: BenchmarkConfig,
        repositories: Sequence[Repository],
        reruns_per_config: Optional[int] = None,
        dependency_multiplier: float = 1.0,
    ) -> PerSolutionResultsContainer:
        """Project recovery after keeping only a fraction of each cluster's edges.

        Results are stored under a renamed clone of ``config`` whose name
        carries the kept percentage, e.g. ``MyConfig-50%``. ``config`` itself
        is left untouched.
        """
        if not 0.0 <= dependency_multiplier <= 1.0:
            raise ValueError(
                f"dependency_multiplier must be between 0.0 and 1.0, got {dependency_multiplier}"
            )
        reruns = self._reruns(reruns_per_config)
        builder = self._start(reruns)
        labelled = config.renamed(config.name + ablation_label(dependency_multiplier))

        for repository in list(repositories):
            full = self._solution_graph(repository)
            graph = ablate_edges(full, dependency_multiplier)
            logger.info(
                f"[{repository}] {labelled.name}: kept {graph.edge_count}/{full.edge_count} edges, "
                f"{reruns} runs"
            )

            calls = [
                partial(self.backend.run_configuration, labelled.clone(), graph)
                for _ in range(reruns)
            ]
            builder.add(repository, {labelled: self._join(calls)})

        return builder.build()

    def compare_project_recovery(
        self,
        config_a: BenchmarkConfig,
        config_b: BenchmarkConfig,
        repositories: Sequence[Repository],
        reruns_per_config: Optional[int] = None,
        label: Optional[str] = None,
    ) -> PerSolutionResultsContainer:
        """Measure agreement between two clustering algorithms.

        Both algorithms share ``config_a``'s cutting algorithm and similarity
        metric. The averaged agreement is stored under a synthetic
        configuration named ``label`` (default ``"<a>-vs-<b> equality"``).
        """
        reruns = self._reruns(reruns_per_config)
        builder = self._start(reruns)
        comparison = config_a.renamed(label or f"{config_a.name}-vs-{config_b.name} equality")

        for repository in list(repositories):
            graph = NonNestedClusterGraph.from_graph(self._solution_graph(repository))
            logger.info(f"[{repository}] {comparison.name}: {reruns} paired runs")

            calls = []
            for _ in range(reruns):
                first, second = config_a.clone(), config_b.clone()
                calls.append(
                    partial(
                        self.backend.compare_two_algorithms,
                        first.clustering_algorithm,
                        second.clustering_algorithm,
                        first.cutting_algorithm,
                        first.similarity_metric,
                        graph,
                    )
                )
            builder.add(repository, {comparison: self._join(calls)})

        return builder.build()

    def partial_results(self) -> Optional[PerSolutionResultsContainer]:
        """Results of the repositories completed by the latest experiment."""
        if self._builder is None:
            return None
        return self._builder.build()

    # ── Internals ──────────────────────────────────────────────────

    def _reruns(self, reruns_per_config: Optional[int]) -> int:
        reruns = self.settings.reruns_per_config if reruns_per_config is None else reruns_per_config
        if reruns < 1:
            raise ValueError("reruns_per_config must be at least 1")
        return reruns

    def _start(self, reruns: int) -> ResultsBuilder:
        self._builder = ResultsBuilder(reruns)
        return self._builder

    def _distinct(self, configs: Sequence[BenchmarkConfig]) -> list[BenchmarkConfig]:
        # Equal configs would share one result key under different names
        configs = list(configs)
        if len(set(configs)) != len(configs):
            raise ValueError("duplicate benchmark configurations")
        return configs

    def _data_folder(self, repository: Repository) -> Path:
        folder = self.parsed_location(repository)
        if not folder.is_dir():
            raise MissingDataError("parsed-data folder does not exist", location=folder)
        return folder

    def _solution_graph(self, repository: Repository) -> NonNestedClusterGraph:
        folder = self._data_folder(repository)
        tree: DependencyTree = self.backend.complete_tree_with_dependencies(folder)
        graph = self.backend.root_namespaces(tree, ClusterLevel.NAMESPACE)
        if not graph.clusters:
            raise MissingDataError("no clusters in parsed data", location=folder)
        return graph

    def _join(self, calls: list[Callable[[], BenchMarkResult]]) -> BenchMarkResult:
        """Run ``calls`` concurrently, wait for all of them, then average."""
        with ThreadPoolExecutor(max_workers=self.settings.max_workers) as executor:
            futures = [executor.submit(call) for call in calls]
            results = [future.result() for future in futures]
        return average(results)
