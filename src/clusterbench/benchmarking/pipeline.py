"""Single-run pipelines: cluster, cut, score.

These are the reference implementations of the per-run operations a backend
exposes to the harness. Every exception raised by a strategy propagates
unchanged.
"""

from ..exceptions import AlgorithmFailure, MissingDataError
from ..graph.models import NonNestedClusterGraph
from ..logging_config import get_logger
from .config import BenchmarkConfig, ClusteringAlgorithm, CuttingAlgorithm, SimilarityMetric
from .results import BenchMarkResult
from .scoring import compare_partitions, partition_labels

logger = get_logger(__name__)


def _require_clusters(graph: NonNestedClusterGraph) -> None:
    # Partitions of nothing agree perfectly; an empty graph has no score
    if not graph.clusters:
        raise MissingDataError("graph has no clusters")


def recover_partition(
    clustering: ClusteringAlgorithm,
    cutting: CuttingAlgorithm,
    similarity: SimilarityMetric,
    graph: NonNestedClusterGraph,
) -> dict:
    """Cluster ``graph`` and cut the hierarchy into a cluster -> group labelling.

    Raises:
        AlgorithmFailure: If the cut does not partition the graph's clusters
    """
    tree = clustering.cluster(graph, similarity)
    groups = cutting.cut(tree)
    try:
        labels = partition_labels(groups)
    except ValueError as e:
        raise AlgorithmFailure(type(cutting).__name__, str(e))

    missing = graph.clusters.difference(labels)
    if missing:
        raise AlgorithmFailure(
            type(cutting).__name__, f"{len(missing)} clusters not assigned to any group"
        )
    return labels


def run_configuration(config: BenchmarkConfig, graph: NonNestedClusterGraph) -> BenchMarkResult:
    """Run ``config`` once on ``graph`` and score it against the ground truth.

    Raises:
        MissingDataError: If the graph is empty or some cluster has no
            ground-truth label
        AlgorithmFailure: If the recovered grouping is not a partition
    """
    _require_clusters(graph)
    unlabelled = graph.clusters.difference(graph.ground_truth)
    if unlabelled:
        raise MissingDataError(f"{len(unlabelled)} clusters have no ground-truth label")

    recovered = recover_partition(
        config.clustering_algorithm, config.cutting_algorithm, config.similarity_metric, graph
    )
    result = compare_partitions(graph.ground_truth, recovered, list(graph.clusters))
    logger.debug(f"{config.name}: score={result.score:.4f} over {len(graph)} clusters")
    return result


def compare_two_algorithms(
    clustering_a: ClusteringAlgorithm,
    clustering_b: ClusteringAlgorithm,
    cutting: CuttingAlgorithm,
    similarity: SimilarityMetric,
    graph: NonNestedClusterGraph,
) -> BenchMarkResult:
    """Score how closely two clustering algorithms agree on the same graph.

    Raises:
        MissingDataError: If the graph has no clusters
    """
    _require_clusters(graph)
    first = recover_partition(clustering_a, cutting, similarity, graph)
    second = recover_partition(clustering_b, cutting, similarity, graph)
    return compare_partitions(first, second, list(graph.clusters))
