"""Structural model exceptions: illegal nesting and inconsistent graphs."""

from typing import Iterable

from .base import ClusterBenchError


class ModelError(ClusterBenchError):
    """Base class for node tree and graph errors."""

    pass


class InvalidVariantError(ModelError):
    """Raised when a node receives a child (or descriptor) its kind does not allow."""

    def __init__(self, parent_kind: str, child_kinds: Iterable[str], reason: str = ""):
        kinds = sorted(set(child_kinds))
        details = {"parent": parent_kind, "children": ", ".join(kinds)}
        if reason:
            details["reason"] = reason
        super().__init__(f"Illegal children for {parent_kind} node", details=details)
        self.parent_kind = parent_kind
        self.child_kinds = kinds
        self.reason = reason


class InvalidGraphError(ModelError):
    """Raised when a graph references nodes that are not among its clusters."""

    def __init__(self, reason: str, dangling: int = 0):
        details = {"reason": reason}
        if dangling:
            details["dangling"] = str(dangling)
        super().__init__(f"Inconsistent cluster graph: {reason}", details=details)
        self.reason = reason
        self.dangling = dangling
