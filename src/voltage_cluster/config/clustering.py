"""Clustering configuration with sensible defaults.

All parameters can be overridden via ``config/clustering.yaml``.
If the file does not exist, defaults are used.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, field_validator


class CandidateStrategy(str, Enum):
    """How each scoring round is turned into candidate clusters.

    ``TWO`` splits the potentials into three bands and keeps the two
    smaller bands.  ``ONE`` splits them into two bands and keeps only
    the smaller one.
    """

    ONE = "one"
    TWO = "two"


class ScorerConfig(BaseModel):
    """Parameters for iterative potential propagation."""

    max_iterations: int = 100
    tolerance: float = 0.001
    weight_attribute: str = "weight"


class PartitionerConfig(BaseModel):
    """Parameters for k-means partitioning of feature vectors."""

    max_iterations: int = 100
    convergence_threshold: float = 0.001


class ClusteringConfig(BaseModel):
    """Top-level clustering configuration combining all sub-configs."""

    num_candidates: int = 10
    candidate_strategy: CandidateStrategy = CandidateStrategy.TWO
    random_seed: int | None = None
    scorer: ScorerConfig = ScorerConfig()
    partitioner: PartitionerConfig = PartitionerConfig()

    @field_validator("num_candidates")
    @classmethod
    def check_num_candidates(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must generate >= 1 candidates")
        return value


def load_clustering_config(path: Path) -> ClusteringConfig:
    """Load clustering configuration from a YAML file.

    If the file does not exist, returns a ``ClusteringConfig`` with all
    default values.  Partial overrides are supported -- only the keys
    present in the YAML file will override defaults.
    """
    if not path.exists():
        return ClusteringConfig()

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return ClusteringConfig(**data)
