"""Occurrence counting and seed ranking over candidate clusters."""

from __future__ import annotations

from collections.abc import Hashable, Iterable

import networkx as nx
import structlog

logger = structlog.get_logger()


def object_counts(
    graph: nx.Graph, candidates: Iterable[set], seed: Hashable | None = None
) -> dict[Hashable, tuple[float]]:
    """Count candidate memberships for every node of ``graph``.

    With ``seed=None`` each node's count is the number of candidates
    containing it.  Otherwise only candidates that contain ``seed`` are
    counted, giving each node's co-occurrence with the seed.  Nodes in
    no counted candidate keep a count of zero.
    """
    counts = {v: 0 for v in graph.nodes()}
    for candidate in candidates:
        if seed is None or seed in candidate:
            for element in candidate:
                counts[element] += 1
    return {v: (float(c),) for v, c in counts.items()}


def rank_seeds(graph: nx.Graph, candidates: list[set]) -> list[Hashable]:
    """Order all nodes by descending number of candidate appearances.

    Ties keep graph node order.
    """
    counts = object_counts(graph, candidates)
    ranked = sorted(counts, key=lambda v: counts[v][0], reverse=True)

    logger.debug(
        "seed_ranking",
        candidates=len(candidates),
        candidate_sizes=[len(c) for c in candidates],
        top_counts=[counts[v][0] for v in ranked[:10]],
    )
    return ranked
