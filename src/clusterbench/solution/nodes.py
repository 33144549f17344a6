"""Structural node tree: project -> namespace -> class.

A solution's declared modular structure is a tree of immutable ``Node``
values. Every node carries a ``kind`` tag instead of being a subclass, and the
tag decides which kinds may appear among its children:

    PROJECT   -> NAMESPACE*
    NAMESPACE -> NAMESPACE* | CLASS*
    CLASS     -> (leaf)
    CLUSTER   -> CLUSTER* | NAMESPACE* | CLASS*

CLUSTER nodes never come from parsed data; clustering algorithms return them
to describe the groups they recovered over a graph's clusters.

Nodes compare by identity. Two classes called ``Foo`` in different namespaces
are different units, and a graph must be able to hold both.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

from ..exceptions import InvalidVariantError


class NodeKind(Enum):
    """Variant tag of a structural node."""

    PROJECT = "project"
    NAMESPACE = "namespace"
    CLASS = "class"
    CLUSTER = "cluster"


ALLOWED_CHILDREN: dict[NodeKind, frozenset[NodeKind]] = {
    NodeKind.PROJECT: frozenset({NodeKind.NAMESPACE}),
    NodeKind.NAMESPACE: frozenset({NodeKind.NAMESPACE, NodeKind.CLASS}),
    NodeKind.CLASS: frozenset(),
    NodeKind.CLUSTER: frozenset({NodeKind.CLUSTER, NodeKind.NAMESPACE, NodeKind.CLASS}),
}


@dataclass(frozen=True)
class ProjectDescriptor:
    """Declared properties of a project, as reported by the solution parser."""

    name: str
    path: Optional[Path] = None
    properties: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    def __hash__(self) -> int:
        return hash((self.name, self.path))


def validate_children(kind: NodeKind, children: Iterable["Node"]) -> None:
    """Raise InvalidVariantError if any child kind is illegal under ``kind``."""
    allowed = ALLOWED_CHILDREN[kind]
    illegal = [child.kind.value for child in children if child.kind not in allowed]
    if illegal:
        raise InvalidVariantError(kind.value, illegal)


@dataclass(frozen=True, eq=False)
class Node:
    """Immutable element of the structural tree."""

    kind: NodeKind
    name: str
    children: tuple[Node, ...] = ()
    descriptor: Optional[ProjectDescriptor] = None

    def __post_init__(self) -> None:
        children = tuple(self.children)
        object.__setattr__(self, "children", children)

        if self.kind is NodeKind.PROJECT and self.descriptor is None:
            raise InvalidVariantError(
                self.kind.value, [], reason="project nodes require a descriptor"
            )
        if self.kind is not NodeKind.PROJECT and self.descriptor is not None:
            raise InvalidVariantError(
                self.kind.value, [], reason="only project nodes carry a descriptor"
            )
        validate_children(self.kind, children)

    # ── Factories ──────────────────────────────────────────────────

    @classmethod
    def project(cls, descriptor: ProjectDescriptor, children: Iterable[Node] = ()) -> Node:
        return cls(NodeKind.PROJECT, descriptor.name, tuple(children), descriptor)

    @classmethod
    def from_descriptor(cls, descriptor: ProjectDescriptor) -> Node:
        """Wrap a parsed project descriptor in an empty project node."""
        return cls.project(descriptor)

    @classmethod
    def namespace(cls, name: str, children: Iterable[Node] = ()) -> Node:
        return cls(NodeKind.NAMESPACE, name, tuple(children))

    @classmethod
    def class_(cls, name: str) -> Node:
        return cls(NodeKind.CLASS, name)

    @classmethod
    def cluster(cls, children: Iterable[Node], name: str = "") -> Node:
        return cls(NodeKind.CLUSTER, name, tuple(children))

    # ── Structure ──────────────────────────────────────────────────

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def with_children(self, children: Iterable[Node]) -> Node:
        """Return a copy of this node with ``children`` replaced.

        The receiver is left untouched. Raises InvalidVariantError when a
        child kind is not allowed under this node's kind.
        """
        return replace(self, children=tuple(children))

    def classes(self) -> Iterator[Node]:
        """Yield every class reachable through this node's namespace subtree.

        Only defined for project and namespace nodes; other kinds raise
        InvalidVariantError at the call. The traversal is depth-first in
        child order and is recomputed on every call.
        """
        if self.kind not in (NodeKind.PROJECT, NodeKind.NAMESPACE):
            raise InvalidVariantError(
                self.kind.value, [], reason="classes() needs a project or namespace node"
            )
        return self._walk_classes()

    def _walk_classes(self) -> Iterator[Node]:
        for child in self.children:
            if child.kind is NodeKind.CLASS:
                yield child
            else:
                yield from child._walk_classes()

    def namespaces(self) -> Iterator[Node]:
        """Yield every namespace below this node, parents before their children."""
        for child in self.children:
            if child.kind is NodeKind.NAMESPACE:
                yield child
                yield from child.namespaces()

    def members(self) -> Iterator[Node]:
        """Yield the units grouped under a cluster hierarchy.

        Descends through CLUSTER nodes only, so a namespace grouped by a
        clustering algorithm is yielded as one unit, not as its classes. A
        non-cluster node is its own single member.
        """
        if self.kind is not NodeKind.CLUSTER:
            yield self
            return
        for child in self.children:
            yield from child.members()

    def __repr__(self) -> str:
        return f"Node({self.kind.value}:{self.name!r}, children={len(self.children)})"
