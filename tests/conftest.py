"""Shared test fixtures."""

import random

import networkx as nx
import pytest


@pytest.fixture
def two_triangles() -> nx.Graph:
    """Two triangles joined by a single bridge edge a3-b1."""
    graph = nx.Graph()
    graph.add_edges_from([("a1", "a2"), ("a2", "a3"), ("a1", "a3")])
    graph.add_edges_from([("b1", "b2"), ("b2", "b3"), ("b1", "b3")])
    graph.add_edge("a3", "b1")
    return graph


@pytest.fixture
def karate() -> nx.Graph:
    return nx.karate_club_graph()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
