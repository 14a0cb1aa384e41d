"""Node scorers used to seed candidate clusters."""

from .voltage import Scorer, ScorerFactory, VoltageScorer

__all__ = ["Scorer", "ScorerFactory", "VoltageScorer"]
