"""Flattened dependency graphs and the transforms applied to them."""

from .ablation import ablate_edges, ablation_label
from .builder import ClusterLevel, DependencyTree, root_namespaces
from .models import NonNestedClusterGraph

__all__ = [
    "ClusterLevel",
    "DependencyTree",
    "NonNestedClusterGraph",
    "ablate_edges",
    "ablation_label",
    "root_namespaces",
]
