"""Tests for the voltage scorer."""

import networkx as nx
import pytest

from voltage_cluster.config.clustering import ScorerConfig
from voltage_cluster.scoring import VoltageScorer

# tight tolerance so scores sit close to the harmonic solution
PRECISE = ScorerConfig(tolerance=1e-9, max_iterations=10_000)


def _evaluated(graph: nx.Graph, source, sink, config: ScorerConfig = PRECISE) -> VoltageScorer:
    scorer = VoltageScorer(graph, source, sink, config)
    scorer.evaluate()
    return scorer


class TestTerminals:
    def test_source_and_sink_fixed(self) -> None:
        scorer = _evaluated(nx.path_graph(4), 0, 3)
        assert scorer.score(0) == 1.0
        assert scorer.score(3) == 0.0

    def test_isolated_node_scores_zero(self) -> None:
        graph = nx.path_graph(3)
        graph.add_node("lonely")
        scorer = _evaluated(graph, 0, 2)
        assert scorer.score("lonely") == 0.0


class TestUndirected:
    def test_path_potentials_interpolate(self) -> None:
        scorer = _evaluated(nx.path_graph(5), 0, 4)
        assert scorer.score(1) == pytest.approx(0.75, abs=1e-3)
        assert scorer.score(2) == pytest.approx(0.50, abs=1e-3)
        assert scorer.score(3) == pytest.approx(0.25, abs=1e-3)

    def test_default_tolerance_keeps_ordering(self) -> None:
        scorer = _evaluated(nx.path_graph(5), 0, 4, ScorerConfig())
        scores = [scorer.score(v) for v in range(5)]
        assert scores == sorted(scores, reverse=True)
        assert all(0.0 < s < 1.0 for s in scores[1:4])

    def test_edge_weights(self) -> None:
        graph = nx.Graph()
        graph.add_edge(0, 1, weight=3.0)
        graph.add_edge(1, 2, weight=1.0)
        scorer = _evaluated(graph, 0, 2)
        assert scorer.score(1) == pytest.approx(0.75, abs=1e-3)

    def test_custom_weight_attribute(self) -> None:
        graph = nx.Graph()
        graph.add_edge(0, 1, strength=1.0, weight=100.0)
        graph.add_edge(1, 2, strength=3.0, weight=1.0)
        config = ScorerConfig(tolerance=1e-9, max_iterations=10_000, weight_attribute="strength")
        scorer = _evaluated(graph, 0, 2, config)
        assert scorer.score(1) == pytest.approx(0.25, abs=1e-3)

    def test_multigraph_parallel_edges_count(self) -> None:
        graph = nx.MultiGraph()
        graph.add_edge(0, 1)
        graph.add_edge(0, 1)
        graph.add_edge(1, 2)
        scorer = _evaluated(graph, 0, 2)
        assert scorer.score(1) == pytest.approx(2 / 3, abs=1e-3)

    def test_triangles_split_by_bridge(self, two_triangles: nx.Graph) -> None:
        scorer = _evaluated(two_triangles, "a1", "b3")
        near_source = min(scorer.score(v) for v in ("a1", "a2", "a3"))
        near_sink = max(scorer.score(v) for v in ("b1", "b2", "b3"))
        assert near_source > 0.5 > near_sink


class TestDirected:
    def test_only_incoming_edges_count(self) -> None:
        """Node 1 only hears from the source."""
        scorer = _evaluated(nx.DiGraph([(0, 1), (1, 2)]), 0, 2)
        assert scorer.score(1) == pytest.approx(1.0, abs=1e-3)

    def test_edges_from_sink_only(self) -> None:
        """Node 1 only hears from the sink, so it stays at zero."""
        scorer = _evaluated(nx.DiGraph([(1, 0), (2, 1)]), 0, 2)
        assert scorer.score(1) == 0.0


class TestLifecycle:
    def test_score_before_evaluate(self) -> None:
        scorer = VoltageScorer(nx.path_graph(3), 0, 2)
        with pytest.raises(RuntimeError):
            scorer.score(1)

    def test_unknown_node(self) -> None:
        scorer = _evaluated(nx.path_graph(3), 0, 2)
        with pytest.raises(KeyError):
            scorer.score(99)

    def test_source_equals_sink(self) -> None:
        with pytest.raises(ValueError):
            VoltageScorer(nx.path_graph(3), 1, 1)

    @pytest.mark.parametrize("source, sink", [(99, 0), (0, 99)])
    def test_terminal_not_in_graph(self, source, sink) -> None:
        with pytest.raises(ValueError):
            VoltageScorer(nx.path_graph(3), source, sink)

    def test_iteration_limit(self) -> None:
        scorer = _evaluated(nx.path_graph(10), 0, 9, ScorerConfig(max_iterations=3))
        assert scorer.iterations == 3

    def test_deterministic(self, karate: nx.Graph) -> None:
        first = _evaluated(karate, 0, 33, ScorerConfig())
        second = _evaluated(karate, 0, 33, ScorerConfig())
        assert [first.score(v) for v in karate] == [second.score(v) for v in karate]
