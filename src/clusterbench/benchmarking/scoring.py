"""Partition agreement scores.

Both the ground-truth comparison and the two-algorithm comparison reduce to
the same question: how well do two labellings of the same units agree? The
answer is computed with scikit-learn's clustering metrics. The adjusted Rand
index is the headline score; the information-theoretic measures are kept as
named metrics.
"""

from typing import Hashable, Iterable, Mapping, Sequence

from sklearn.metrics import (
    adjusted_mutual_info_score,
    adjusted_rand_score,
    completeness_score,
    homogeneity_score,
    normalized_mutual_info_score,
)

from .results import BenchMarkResult


def partition_labels(groups: Iterable[Iterable[Hashable]]) -> dict[Hashable, int]:
    """Map each member of a partition to the index of its group.

    Raises:
        ValueError: If a member appears in more than one group
    """
    labels: dict[Hashable, int] = {}
    for index, group in enumerate(groups):
        for member in group:
            if member in labels:
                raise ValueError(f"{member!r} appears in more than one group")
            labels[member] = index
    return labels


def compare_partitions(
    reference: Mapping[Hashable, Hashable],
    candidate: Mapping[Hashable, Hashable],
    units: Sequence[Hashable],
) -> BenchMarkResult:
    """Score how well ``candidate`` reproduces ``reference`` over ``units``.

    Args:
        reference: Unit -> label of the expected grouping
        candidate: Unit -> label of the recovered grouping
        units: Units to compare; every unit must be labelled in both mappings

    Raises:
        KeyError: If a unit is missing from either labelling
    """
    labels_true = [reference[unit] for unit in units]
    labels_pred = [candidate[unit] for unit in units]

    return BenchMarkResult(
        score=adjusted_rand_score(labels_true, labels_pred),
        metrics={
            "nmi": normalized_mutual_info_score(labels_true, labels_pred),
            "ami": adjusted_mutual_info_score(labels_true, labels_pred),
            "homogeneity": homogeneity_score(labels_true, labels_pred),
            "completeness": completeness_score(labels_true, labels_pred),
        },
    )
