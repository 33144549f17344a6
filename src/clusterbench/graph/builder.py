"""Flatten annotated node trees into non-nested cluster graphs.

Two granularities are supported:

- CLASS: every class is a cluster and its ground truth is the qualified name
  of the namespace declaring it. Used to benchmark namespace recovery.
- NAMESPACE: every namespace that directly declares classes is a cluster and
  its ground truth is the owning project. Class-level edges are lifted onto
  the namespaces, and edges inside one namespace disappear. Used to benchmark
  project recovery.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Mapping

from ..solution.nodes import Node, NodeKind
from .models import NonNestedClusterGraph


class ClusterLevel(Enum):
    """Granularity of the clusters produced by flattening."""

    CLASS = "class"
    NAMESPACE = "namespace"


@dataclass(frozen=True, eq=False)
class DependencyTree:
    """Project nodes of a solution (or of one project) with class dependencies.

    ``edges`` maps a class to the classes it depends on. The analysis that
    discovers these edges lives outside this package.
    """

    name: str
    projects: tuple[Node, ...]
    edges: Mapping[Node, tuple[Node, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "projects", tuple(self.projects))
        for project in self.projects:
            if project.kind is not NodeKind.PROJECT:
                raise ValueError(f"DependencyTree roots must be projects, got {project!r}")

    def classes(self) -> Iterator[Node]:
        for project in self.projects:
            yield from project.classes()


def _declaring_namespaces(tree: DependencyTree) -> Iterator[tuple[Node, Node, str]]:
    """Yield (project, namespace, qualified_name) for namespaces that declare classes."""

    def walk(project: Node, node: Node, prefix: str) -> Iterator[tuple[Node, Node, str]]:
        for child in node.children:
            if child.kind is not NodeKind.NAMESPACE:
                continue
            qualified = f"{prefix}.{child.name}" if prefix else child.name
            if any(grandchild.kind is NodeKind.CLASS for grandchild in child.children):
                yield project, child, qualified
            yield from walk(project, child, qualified)

    for project in tree.projects:
        yield from walk(project, project, "")


def _class_graph(tree: DependencyTree) -> NonNestedClusterGraph:
    labels: dict[Node, str] = {}
    for project, namespace, qualified in _declaring_namespaces(tree):
        for child in namespace.children:
            if child.kind is NodeKind.CLASS:
                labels[child] = f"{project.name}:{qualified}"

    pairs = (
        (source, target)
        for source, targets in tree.edges.items()
        for target in targets
        if source in labels and target in labels and source is not target
    )
    return NonNestedClusterGraph.from_pairs(labels.keys(), pairs, labels)


def _namespace_graph(tree: DependencyTree) -> NonNestedClusterGraph:
    labels: dict[Node, str] = {}
    owner: dict[Node, Node] = {}
    for project, namespace, _ in _declaring_namespaces(tree):
        labels[namespace] = project.name
        for child in namespace.children:
            if child.kind is NodeKind.CLASS:
                owner[child] = namespace

    pairs = []
    for source, targets in tree.edges.items():
        if source not in owner:
            continue
        for target in targets:
            if target in owner and owner[source] is not owner[target]:
                pairs.append((owner[source], owner[target]))

    return NonNestedClusterGraph.from_pairs(labels.keys(), pairs, labels)


def root_namespaces(
    tree: DependencyTree, level: ClusterLevel = ClusterLevel.NAMESPACE
) -> NonNestedClusterGraph:
    """Flatten ``tree`` into a graph whose clusters sit at ``level``.

    Edges whose endpoints are not declared in the tree (external types) are
    ignored.
    """
    if level is ClusterLevel.CLASS:
        return _class_graph(tree)
    return _namespace_graph(tree)
