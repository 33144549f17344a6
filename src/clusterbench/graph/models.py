"""Flattened, single-level cluster graph consumed by clustering algorithms.

Edges are directed: ``edges[A]`` containing B means A depends on / uses B.
Targets per source keep the order in which they were first seen, which is
what makes edge ablation reproducible.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from ..exceptions import InvalidGraphError
from ..solution.nodes import Node


def _ordered_multimap(pairs: Iterable[tuple[Node, Node]]) -> dict[Node, tuple[Node, ...]]:
    """Group (source, target) pairs by source, dropping repeated targets."""
    grouped: dict[Node, dict[Node, None]] = {}
    for source, target in pairs:
        grouped.setdefault(source, {})[target] = None
    return {source: tuple(targets) for source, targets in grouped.items()}


@dataclass(frozen=True)
class NonNestedClusterGraph:
    """Clusters plus a dependency multimap between them.

    ``ground_truth`` maps a cluster to the label of the declared group it
    belongs to (its namespace or project). It is what recovered groupings
    are scored against and may be empty when a graph is only compared with
    another recovered grouping.
    """

    clusters: frozenset[Node]
    edges: Mapping[Node, tuple[Node, ...]] = field(default_factory=dict)
    ground_truth: Mapping[Node, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        clusters = frozenset(self.clusters)
        edges = {source: tuple(dict.fromkeys(targets)) for source, targets in self.edges.items()}
        object.__setattr__(self, "clusters", clusters)
        object.__setattr__(self, "edges", MappingProxyType(edges))
        object.__setattr__(self, "ground_truth", MappingProxyType(dict(self.ground_truth)))

        dangling = {
            node
            for source, targets in edges.items()
            for node in (source, *targets)
            if node not in clusters
        }
        if dangling:
            raise InvalidGraphError("edge endpoints missing from clusters", dangling=len(dangling))
        unknown = [node for node in self.ground_truth if node not in clusters]
        if unknown:
            raise InvalidGraphError("labelled nodes missing from clusters", dangling=len(unknown))

    @classmethod
    def from_pairs(
        cls,
        clusters: Iterable[Node],
        pairs: Iterable[tuple[Node, Node]],
        ground_truth: Mapping[Node, str] | None = None,
    ) -> NonNestedClusterGraph:
        """Build a graph from (source, target) pairs; sources may repeat."""
        return cls(frozenset(clusters), _ordered_multimap(pairs), ground_truth or {})

    @classmethod
    def from_graph(cls, graph: NonNestedClusterGraph) -> NonNestedClusterGraph:
        """Re-wrap ``graph`` as a plain NonNestedClusterGraph.

        Subclasses produced by flattening collaborators are normalised away so
        that every algorithm sees the same concrete type.
        """
        return cls(graph.clusters, dict(graph.edges), dict(graph.ground_truth))

    def targets(self, source: Node) -> tuple[Node, ...]:
        return self.edges.get(source, ())

    def pairs(self) -> Iterator[tuple[Node, Node]]:
        for source, targets in self.edges.items():
            for target in targets:
                yield source, target

    @property
    def edge_count(self) -> int:
        return sum(len(targets) for targets in self.edges.values())

    def __len__(self) -> int:
        return len(self.clusters)
