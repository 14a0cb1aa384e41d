"""Voltage-based community detection.

Clusters the nodes of a graph from the potentials computed by a
voltage scorer.  Based on, but not identical with, Wu and Huberman's
"Finding communities in linear time: a physics approach": they assume
clusters of roughly equal size, while this implementation uses k-means
on co-occurrence counts to decide cluster membership.

The algorithm:

1. Generate candidate clusters: pick a node pair, score all nodes,
   split the scores into bands, keep the extreme bands.
2. Rank nodes by how often they appear in candidates; these are the
   cluster seeds.
3. ``num_clusters - 1`` times: take the next unassigned seed, count
   each node's co-occurrence with it across candidates, split the
   counts into high and low, and emit the high group as a cluster
   (removing its members from every candidate).
4. Put all unassigned nodes into a final "garbage" cluster.

Depending on how the co-occurrence data splits, fewer clusters than
requested may come back, never more.
"""

from __future__ import annotations

import random
from collections.abc import Hashable

import networkx as nx
import numpy as np
import structlog

from voltage_cluster.config.clustering import CandidateStrategy, ClusteringConfig
from voltage_cluster.partitioning import KMeansPartitioner, NotEnoughClustersError, Partitioner
from voltage_cluster.scoring import ScorerFactory, VoltageScorer

from .candidates import generate_candidates
from .seeds import object_counts, rank_seeds

logger = structlog.get_logger()


class SeedExhaustedError(RuntimeError):
    """Raised when the ranked seed list runs out before extraction ends."""


class VoltageClusterer:
    """Cluster graph nodes by voltage co-occurrence.

    Example:
        >>> clusterer = VoltageClusterer(graph, num_candidates=10)
        >>> clusterer.set_random_seed(42)
        >>> clusters = clusterer.cluster(3)

    Args:
        graph: The graph whose nodes are clustered; read-only.
        num_candidates: Scoring rounds per clustering call.
        strategy: Candidate strategy, see ``CandidateStrategy``.
        scorer_factory: Builds a scorer for ``(graph, source, sink)``.
            Defaults to ``VoltageScorer`` with ``config.scorer``.
        partitioner: Splits keyed feature vectors into groups.  Defaults
            to ``KMeansPartitioner`` sharing this clusterer's random source.
        rng: Random source; defaults to one seeded from
            ``config.random_seed``.
        config: Defaults for everything not passed explicitly.
    """

    def __init__(
        self,
        graph: nx.Graph,
        num_candidates: int | None = None,
        strategy: CandidateStrategy | str | None = None,
        scorer_factory: ScorerFactory | None = None,
        partitioner: Partitioner | None = None,
        rng: random.Random | None = None,
        config: ClusteringConfig | None = None,
    ) -> None:
        config = config or ClusteringConfig()
        if num_candidates is None:
            num_candidates = config.num_candidates
        if num_candidates < 1:
            raise ValueError("must generate >= 1 candidates")

        self.graph = graph
        self.num_candidates = num_candidates
        self.strategy = CandidateStrategy(strategy or config.candidate_strategy)
        self.rng = rng or random.Random(config.random_seed)

        if scorer_factory is None:
            scorer_config = config.scorer

            def scorer_factory(g, source, sink):
                return VoltageScorer(g, source, sink, scorer_config)

        self.scorer_factory = scorer_factory
        self.partitioner = partitioner or KMeansPartitioner(config.partitioner, rng=self.rng)

    def set_random_seed(self, seed: int) -> None:
        """Reseed the random source shared with the default partitioner."""
        self.rng.seed(seed)

    def get_community(self, node: Hashable) -> list[set]:
        """Find the community around ``node``.

        Returns at most two clusters: the community (which normally
        contains ``node``) and the garbage cluster of everything else.
        """
        if node not in self.graph:
            raise ValueError(f"node {node!r} is not in the graph")
        return self.cluster_internal(node, 2)

    def cluster(self, num_clusters: int) -> list[set]:
        """Partition the graph into at most ``num_clusters`` clusters."""
        return self.cluster_internal(None, num_clusters)

    def cluster_internal(self, origin: Hashable | None, num_clusters: int) -> list[set]:
        """Shared implementation of ``cluster`` and ``get_community``."""
        if num_clusters < 1:
            raise ValueError(f"num_clusters must be >= 1, got {num_clusters}")
        if self.graph.number_of_nodes() == 0:
            raise ValueError("cannot cluster an empty graph")

        # one requested cluster never reaches the extraction loop
        if num_clusters > 1:
            candidates = generate_candidates(
                self.graph,
                origin,
                self.num_candidates,
                self.rng,
                self.scorer_factory,
                self.partitioner,
                self.strategy,
            )
        else:
            candidates = []

        ranked_seeds = rank_seeds(self.graph, candidates)
        remaining = set(self.graph.nodes())
        clusters = self.extract(candidates, ranked_seeds, remaining, origin, num_clusters)

        logger.info(
            "clustering_complete",
            origin=None if origin is None else str(origin),
            candidates=len(candidates),
            requested=num_clusters,
            produced=len(clusters),
        )
        return clusters

    def extract(
        self,
        candidates: list[set],
        ranked_seeds: list[Hashable],
        remaining: set,
        origin: Hashable | None,
        num_clusters: int,
    ) -> list[set]:
        """Pull up to ``num_clusters - 1`` clusters out of the candidates.

        ``candidates`` and ``remaining`` are consumed: extracted members
        are removed from both.  Whatever remains becomes the final
        garbage cluster.

        Raises:
            SeedExhaustedError: If no unassigned seed is left while
                ``remaining`` is still non-empty.
        """
        clusters: list[set] = []
        seed_index = 0

        for j in range(num_clusters - 1):
            if not remaining:
                break

            if j == 0 and origin is not None:
                seed = origin
            else:
                while True:
                    if seed_index >= len(ranked_seeds):
                        raise SeedExhaustedError(
                            f"ran out of seeds after {seed_index} candidates "
                            f"with {len(remaining)} nodes unassigned"
                        )
                    seed = ranked_seeds[seed_index]
                    seed_index += 1
                    if seed in remaining:
                        break

            occur_counts = object_counts(self.graph, candidates, seed)
            if len(occur_counts) < 2:
                logger.debug("extraction_stopped", reason="too_few_counts", iteration=j)
                break

            try:
                cluster1, cluster2 = self.partitioner.partition(occur_counts, 2)
            except NotEnoughClustersError:
                # every node co-occurs with the seed equally often
                logger.debug("extraction_stopped", reason="uniform_counts", iteration=j)
                break

            if _centroid(cluster1)[0] >= _centroid(cluster2)[0]:
                new_cluster = set(cluster1)
            else:
                new_cluster = set(cluster2)

            for candidate in candidates:
                candidate -= new_cluster
            clusters.append(new_cluster)
            remaining -= new_cluster

        if remaining:
            clusters.append(set(remaining))

        return clusters


def _centroid(group: dict[Hashable, tuple[float, ...]]) -> np.ndarray:
    return np.mean(np.asarray(list(group.values()), dtype=float), axis=0)
