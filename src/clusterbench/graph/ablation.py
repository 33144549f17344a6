"""Edge ablation: drop a fraction of dependency information from a graph.

Ablation truncates each source's target list instead of sampling it, so a
lower fraction always keeps a prefix of what a higher fraction keeps. This
makes recovery quality a monotone function of the available dependencies.
"""

from ..logging_config import get_logger
from .models import NonNestedClusterGraph

logger = get_logger(__name__)


def ablate_edges(graph: NonNestedClusterGraph, fraction: float) -> NonNestedClusterGraph:
    """Keep the first ``floor(len(targets) * fraction)`` targets of every source.

    Clusters and ground truth are carried over unchanged, including clusters
    that end up with no outgoing edges. Sources whose target list becomes
    empty are dropped from the edge map.

    Args:
        graph: Graph to ablate (not modified)
        fraction: Share of each source's edges to keep, in [0, 1]

    Returns:
        A new graph over the same clusters

    Raises:
        ValueError: If fraction is outside [0, 1]
    """
    if not 0.0 <= fraction <= 1.0:
        raise ValueError(f"fraction must be between 0.0 and 1.0, got {fraction}")

    kept = {}
    for source, targets in graph.edges.items():
        keep = int(len(targets) * fraction)
        if keep:
            kept[source] = targets[:keep]

    ablated = NonNestedClusterGraph(graph.clusters, kept, graph.ground_truth)
    logger.debug(
        f"Ablated edges to {fraction:.0%}: {graph.edge_count} -> {ablated.edge_count}"
    )
    return ablated


def ablation_label(fraction: float) -> str:
    """Display suffix for a configuration run on ablated data, e.g. ``-50%``."""
    return f"-{fraction * 100:g}%"
