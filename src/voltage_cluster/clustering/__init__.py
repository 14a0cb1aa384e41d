"""Voltage-based community detection.

Turns repeated voltage scoring of random node pairs into candidate
clusters, then extracts final clusters from candidate co-occurrence.
"""

from .candidates import add_one_candidate_cluster, add_two_candidate_clusters, generate_candidates
from .seeds import object_counts, rank_seeds
from .voltage_clusterer import SeedExhaustedError, VoltageClusterer

__all__ = [
    "SeedExhaustedError",
    "VoltageClusterer",
    "add_one_candidate_cluster",
    "add_two_candidate_clusters",
    "generate_candidates",
    "object_counts",
    "rank_seeds",
]
