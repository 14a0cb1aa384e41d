"""Candidate cluster generation from voltage scores.

Each round picks a (source, target) node pair, scores every node with
the scorer, and splits the scores with the partitioner.  The extreme
bands of the voltage gradient become candidate clusters; rounds whose
scores cannot be split contribute nothing.
"""

from __future__ import annotations

import random
from collections.abc import Hashable

import networkx as nx
import structlog

from voltage_cluster.config.clustering import CandidateStrategy
from voltage_cluster.partitioning import NotEnoughClustersError, Partitioner
from voltage_cluster.scoring import ScorerFactory

logger = structlog.get_logger()

ScoreMap = dict[Hashable, tuple[float, ...]]


def add_two_candidate_clusters(
    candidates: list[set], voltage_ranks: ScoreMap, partitioner: Partitioner
) -> None:
    """Split scores into three bands and keep the two smaller ones.

    The bands are compared by size only.  The branch order below is
    not symmetric in the three groups and must stay as written:

    - group 0 larger than both others: keep groups 1 and 2
    - group 0 not larger than group 1, group 1 larger than group 2:
      keep groups 0 and 2
    - neither group 0 nor group 1 larger than group 2: keep groups 0 and 1
    - the remaining case (keep nothing) cannot occur: it would need
      group 0 > group 1 > group 2 >= group 0
    """
    try:
        clusters = partitioner.partition(voltage_ranks, 3)
    except NotEnoughClustersError as e:
        logger.debug("candidate_round_skipped", requested=e.requested, distinct=e.distinct)
        return

    b01 = len(clusters[0]) > len(clusters[1])
    b02 = len(clusters[0]) > len(clusters[2])
    b12 = len(clusters[1]) > len(clusters[2])
    if b01 and b02:
        candidates.append(set(clusters[1]))
        candidates.append(set(clusters[2]))
    elif not b01 and b12:
        candidates.append(set(clusters[0]))
        candidates.append(set(clusters[2]))
    elif not b02 and not b12:
        # every size triple that misses the first two branches lands here
        candidates.append(set(clusters[0]))
        candidates.append(set(clusters[1]))


def add_one_candidate_cluster(
    candidates: list[set], voltage_ranks: ScoreMap, partitioner: Partitioner
) -> None:
    """Split scores into two bands and keep only the smaller one.

    The larger band is treated as noise.  On equal sizes the second
    band is kept.
    """
    try:
        clusters = partitioner.partition(voltage_ranks, 2)
    except NotEnoughClustersError as e:
        logger.debug("candidate_round_skipped", requested=e.requested, distinct=e.distinct)
        return

    if len(clusters[0]) < len(clusters[1]):
        candidates.append(set(clusters[0]))
    else:
        candidates.append(set(clusters[1]))


_STRATEGIES = {
    CandidateStrategy.ONE: add_one_candidate_cluster,
    CandidateStrategy.TWO: add_two_candidate_clusters,
}


def generate_candidates(
    graph: nx.Graph,
    origin: Hashable | None,
    count: int,
    rng: random.Random,
    scorer_factory: ScorerFactory,
    partitioner: Partitioner,
    strategy: CandidateStrategy = CandidateStrategy.TWO,
) -> list[set]:
    """Run ``count`` scoring rounds and collect candidate clusters.

    Args:
        graph: Graph whose nodes are clustered (never modified).
        origin: Fixed source node for every round, or ``None`` to draw
            a random source each round.
        count: Number of scoring rounds.
        rng: Random source for node picks.
        scorer_factory: Builds a scorer from ``(graph, source, sink)``.
        partitioner: Splits the per-node score map into bands.
        strategy: How each round's bands become candidates.

    Returns:
        Candidate clusters in generation order.

    Raises:
        ValueError: If ``count < 1``, the graph has fewer than two
            nodes, or ``origin`` is not a node of the graph.
    """
    if count < 1:
        raise ValueError("must generate >= 1 candidates")
    nodes = list(graph.nodes())
    if len(nodes) < 2:
        raise ValueError("candidate generation needs a graph with at least 2 nodes")
    if origin is not None and origin not in graph:
        raise ValueError(f"origin {origin!r} is not in the graph")

    add_candidates = _STRATEGIES[CandidateStrategy(strategy)]
    candidates: list[set] = []

    for _ in range(count):
        if origin is None:
            source = nodes[rng.randrange(len(nodes))]
        else:
            source = origin
        target = nodes[rng.randrange(len(nodes))]
        while target == source:
            target = nodes[rng.randrange(len(nodes))]

        scorer = scorer_factory(graph, source, target)
        scorer.evaluate()
        voltage_ranks: ScoreMap = {v: (scorer.score(v),) for v in nodes}

        add_candidates(candidates, voltage_ranks, partitioner)

    logger.debug("candidates_generated", rounds=count, candidates=len(candidates))
    return candidates
