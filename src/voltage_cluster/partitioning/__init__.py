"""Partitioning of keyed feature vectors into a fixed number of groups."""

from .kmeans import KMeansPartitioner, NotEnoughClustersError, Partitioner

__all__ = ["KMeansPartitioner", "NotEnoughClustersError", "Partitioner"]
