"""Evaluation metrics for graph clusterings.

Compares clusterings pairwise: two nodes "agree" when both the
prediction and the ground truth put them in the same group.  Precision,
recall, and F1 are computed over co-clustered node pairs.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Hashable, Iterable
from dataclasses import dataclass
from itertools import combinations


@dataclass
class MetricsResult:
    """Container for pairwise clustering metrics."""

    precision: float
    recall: float
    f1: float
    true_positives: int
    false_positives: int
    false_negatives: int
    true_negatives: int
    total_ground_truth_same: int
    total_ground_truth_different: int
    total_predicted_same: int


def _canonicalize(a: Hashable, b: Hashable) -> tuple[Hashable, Hashable]:
    """Order a node pair deterministically (by ``str`` for mixed types)."""
    if str(a) > str(b):
        return (b, a)
    return (a, b)


def co_clustered_pairs(clusters: Iterable[Iterable[Hashable]]) -> set[tuple[Hashable, Hashable]]:
    """Return every canonically ordered node pair sharing a cluster."""
    pairs: set[tuple[Hashable, Hashable]] = set()
    for cluster in clusters:
        for a, b in combinations(list(cluster), 2):
            pairs.add(_canonicalize(a, b))
    return pairs


def compute_metrics(
    predicted_clusters: Iterable[Iterable[Hashable]],
    communities: Iterable[Iterable[Hashable]],
) -> MetricsResult:
    """Compute pairwise precision, recall, and F1 for a clustering.

    Only nodes that appear in ``communities`` are judged; pairs
    involving unlabelled nodes are ignored.

    Args:
        predicted_clusters: Clusters returned by a clusterer.
        communities: Ground truth communities.

    Returns:
        MetricsResult with precision, recall, F1, and confusion matrix counts.
    """
    communities = [list(c) for c in communities]
    labelled = [v for c in communities for v in c]
    labelled_set = set(labelled)

    gt_same = co_clustered_pairs(communities)
    all_pairs = {_canonicalize(a, b) for a, b in combinations(labelled, 2)}
    gt_diff = all_pairs - gt_same

    pred = {
        p
        for p in co_clustered_pairs(predicted_clusters)
        if p[0] in labelled_set and p[1] in labelled_set
    }

    tp = len(pred & gt_same)
    fp = len(pred & gt_diff)
    fn = len(gt_same - pred)
    tn = len(gt_diff - pred)

    precision = tp / (tp + fp) if (tp + fp) > 0 else 0.0
    recall = tp / (tp + fn) if (tp + fn) > 0 else 0.0
    f1 = 2 * precision * recall / (precision + recall) if (precision + recall) > 0 else 0.0

    return MetricsResult(
        precision=precision,
        recall=recall,
        f1=f1,
        true_positives=tp,
        false_positives=fp,
        false_negatives=fn,
        true_negatives=tn,
        total_ground_truth_same=len(gt_same),
        total_ground_truth_different=len(gt_diff),
        total_predicted_same=len(pred),
    )


def co_clustering_frequency(
    runs: Iterable[Iterable[Iterable[Hashable]]],
) -> dict[tuple[Hashable, Hashable], float]:
    """Fraction of clustering runs in which each node pair shares a cluster.

    Pairs never co-clustered are absent from the result.
    """
    counter: Counter[tuple[Hashable, Hashable]] = Counter()
    total = 0
    for clusters in runs:
        total += 1
        counter.update(co_clustered_pairs(clusters))
    if total == 0:
        return {}
    return {pair: count / total for pair, count in counter.items()}


def format_metrics(result: MetricsResult) -> str:
    """Format metrics for terminal display."""
    lines = [
        "",
        "=" * 50,
        "  Pairwise Clustering Metrics",
        "=" * 50,
        "",
        f"  Precision:  {result.precision:.4f}",
        f"  Recall:     {result.recall:.4f}",
        f"  F1 Score:   {result.f1:.4f}",
        "",
        "  Confusion Matrix:",
        f"    True Positives:   {result.true_positives}",
        f"    False Positives:  {result.false_positives}",
        f"    False Negatives:  {result.false_negatives}",
        f"    True Negatives:   {result.true_negatives}",
        "",
        f"  Ground Truth: {result.total_ground_truth_same} same, "
        f"{result.total_ground_truth_different} different",
        f"  Predicted Same: {result.total_predicted_same}",
        "=" * 50,
        "",
    ]
    return "\n".join(lines)
