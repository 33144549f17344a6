"""Declared solution structure: repositories and their node trees."""

from .nodes import ALLOWED_CHILDREN, Node, NodeKind, ProjectDescriptor, validate_children
from .repository import Repository

__all__ = [
    "ALLOWED_CHILDREN",
    "Node",
    "NodeKind",
    "ProjectDescriptor",
    "Repository",
    "validate_children",
]
