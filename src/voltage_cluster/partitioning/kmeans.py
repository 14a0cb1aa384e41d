"""K-means partitioning of keyed feature vectors.

Splits a mapping of ``key -> feature vector`` into exactly ``k``
non-empty, disjoint groups with scikit-learn's ``KMeans``.  Inputs with
fewer than ``k`` distinct vectors cannot be split and raise
``NotEnoughClustersError``; callers treat that as "not enough signal"
rather than as a bug.
"""

from __future__ import annotations

import random
from collections.abc import Hashable, Mapping, Sequence
from typing import Protocol

import numpy as np
from sklearn.cluster import KMeans

from voltage_cluster.config.clustering import PartitionerConfig


class NotEnoughClustersError(Exception):
    """Raised when the input has fewer distinct values than requested groups."""

    def __init__(self, requested: int, distinct: int) -> None:
        super().__init__(
            f"cannot form {requested} clusters from {distinct} distinct values"
        )
        self.requested = requested
        self.distinct = distinct


class Partitioner(Protocol):
    """Anything that can split keyed feature vectors into ``k`` groups."""

    def partition(
        self, locations: Mapping[Hashable, Sequence[float]], k: int
    ) -> list[dict[Hashable, tuple[float, ...]]]: ...


class KMeansPartitioner:
    """k-means over keyed vectors, seeded from distinct input values.

    Initial centroids are ``k`` distinct input vectors drawn from ``rng``
    and handed to ``KMeans`` as an explicit ``init`` array, so a seeded
    ``rng`` fully determines the result.

    Args:
        config: Iteration limit and convergence tolerance.
        rng: Random source for choosing initial centroids.  Share the
            caller's seeded ``random.Random`` for reproducible output.
    """

    def __init__(
        self,
        config: PartitionerConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or PartitionerConfig()
        self.rng = rng or random.Random()

    def partition(
        self, locations: Mapping[Hashable, Sequence[float]], k: int
    ) -> list[dict[Hashable, tuple[float, ...]]]:
        """Split ``locations`` into ``k`` groups.

        Groups come back in centroid-initialisation order; each group is
        a dict preserving the input key order.

        Raises:
            ValueError: If ``locations`` is empty or ``k < 2``.
            NotEnoughClustersError: If there are fewer than ``k``
                distinct vectors.
        """
        if not locations:
            raise ValueError("locations must not be empty")
        if k < 2:
            raise ValueError(f"k must be >= 2, got {k}")

        keys = list(locations)
        vectors = [tuple(float(x) for x in locations[key]) for key in keys]

        distinct = list(dict.fromkeys(vectors))
        if len(distinct) < k:
            raise NotEnoughClustersError(k, len(distinct))

        points = np.asarray(vectors, dtype=float)
        init = np.asarray(self.rng.sample(distinct, k), dtype=float)

        model = KMeans(
            n_clusters=k,
            init=init,
            n_init=1,
            max_iter=self.config.max_iterations,
            tol=self.config.convergence_threshold,
        )
        labels = model.fit_predict(points)
        labels = _fill_empty_groups(labels, model.transform(points), k)

        groups: list[dict[Hashable, tuple[float, ...]]] = [{} for _ in range(k)]
        for key, vector, label in zip(keys, vectors, labels):
            groups[int(label)][key] = vector
        return groups


def _fill_empty_groups(labels: np.ndarray, distances: np.ndarray, k: int) -> np.ndarray:
    """Move the worst-fitting point of a multi-member group into each empty group."""
    labels = labels.copy()
    for i in range(k):
        if np.any(labels == i):
            continue
        counts = np.bincount(labels, minlength=k)
        own = distances[np.arange(len(labels)), labels]
        movable = counts[labels] > 1
        labels[int(np.argmax(np.where(movable, own, -1.0)))] = i
    return labels
