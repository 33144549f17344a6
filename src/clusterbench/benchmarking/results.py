"""Benchmark scores and their aggregation.

A run produces one ``BenchMarkResult``. Repeated runs of a configuration are
averaged into one result; per-project averages are averaged again into one
result per repository. ``PerSolutionResultsContainer`` is what an experiment
hands back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Iterator, Mapping, Optional, Sequence

import numpy as np

from ..exceptions import EmptyReductionError

if TYPE_CHECKING:
    from ..solution.repository import Repository
    from .config import BenchmarkConfig


@dataclass(frozen=True)
class BenchMarkResult:
    """Score of one run (or the average of several).

    ``score`` is the headline number used to rank configurations; ``metrics``
    holds any additional named measurements of the same run.
    """

    score: float
    metrics: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "score", float(self.score))
        object.__setattr__(
            self, "metrics", MappingProxyType({k: float(v) for k, v in self.metrics.items()})
        )

    def __hash__(self) -> int:
        return hash((self.score, tuple(sorted(self.metrics.items()))))


def _bounded_mean(values: Sequence[float]) -> float:
    """Mean of ``values``, clamped so rounding never leaves [min, max]."""
    array = np.asarray(values, dtype=float)
    return float(np.clip(array.mean(), array.min(), array.max()))


def average(results: Iterable[BenchMarkResult]) -> BenchMarkResult:
    """Average a non-empty sequence of results.

    Metrics are averaged by name; a metric missing from any result is left
    out of the average.

    Raises:
        EmptyReductionError: If ``results`` is empty
    """
    results = list(results)
    if not results:
        raise EmptyReductionError("results")

    shared = set(results[0].metrics)
    for result in results[1:]:
        shared &= set(result.metrics)

    return BenchMarkResult(
        score=_bounded_mean([r.score for r in results]),
        metrics={name: _bounded_mean([r.metrics[name] for r in results]) for name in sorted(shared)},
    )


@dataclass(frozen=True)
class BenchMarkResultsEntry:
    """A result attached to the project it was measured on."""

    project_name: str
    result: BenchMarkResult


def average_entries(entries: Iterable[BenchMarkResultsEntry]) -> BenchMarkResult:
    """Average per-project entries into a single result."""
    entries = list(entries)
    if not entries:
        raise EmptyReductionError("project entries")
    return average(entry.result for entry in entries)


class PerSolutionResultsContainer:
    """Averaged results per repository and configuration. Read-only."""

    def __init__(
        self,
        results: Mapping[Repository, Mapping[BenchmarkConfig, BenchMarkResult]],
        reruns_per_config: int,
    ):
        self._results = MappingProxyType(
            {repo: MappingProxyType(dict(per_config)) for repo, per_config in results.items()}
        )
        self._reruns_per_config = reruns_per_config

    @property
    def reruns_per_config(self) -> int:
        return self._reruns_per_config

    @property
    def results(self) -> Mapping[Repository, Mapping[BenchmarkConfig, BenchMarkResult]]:
        return self._results

    @property
    def repositories(self) -> list[Repository]:
        return list(self._results)

    @property
    def configs(self) -> list[BenchmarkConfig]:
        """Distinct configurations across all repositories, in first-seen order."""
        seen: dict[BenchmarkConfig, None] = {}
        for per_config in self._results.values():
            for config in per_config:
                seen.setdefault(config, None)
        return list(seen)

    def get(self, repository: Repository, config: BenchmarkConfig) -> Optional[BenchMarkResult]:
        return self._results.get(repository, {}).get(config)

    def rows(self) -> Iterator[tuple[Repository, BenchmarkConfig, BenchMarkResult]]:
        for repository, per_config in self._results.items():
            for config, result in per_config.items():
                yield repository, config, result

    def __getitem__(self, repository: Repository) -> Mapping[BenchmarkConfig, BenchMarkResult]:
        return self._results[repository]

    def __contains__(self, repository: object) -> bool:
        return repository in self._results

    def __iter__(self) -> Iterator[Repository]:
        return iter(self._results)

    def __len__(self) -> int:
        return len(self._results)


class ResultsBuilder:
    """Collects per-repository results while an experiment runs."""

    def __init__(self, reruns_per_config: int):
        self.reruns_per_config = reruns_per_config
        self._results: dict[Repository, dict[BenchmarkConfig, BenchMarkResult]] = {}

    def add(self, repository: Repository, per_config: Mapping[BenchmarkConfig, BenchMarkResult]) -> None:
        self._results[repository] = dict(per_config)

    def build(self) -> PerSolutionResultsContainer:
        return PerSolutionResultsContainer(self._results, self.reruns_per_config)
