"""Electrical-potential node scoring.

Treats the graph as a resistor network with the source held at
potential 1 and the sink at potential 0.  Every other node repeatedly
takes the weighted average of the potentials across its incoming edges
until the largest per-step change drops below the tolerance.  Nodes
well connected to the source end up near 1, nodes near the sink near 0.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable
from typing import Protocol

import networkx as nx

from voltage_cluster.config.clustering import ScorerConfig

SOURCE_VOLTAGE = 1.0
SINK_VOLTAGE = 0.0


class Scorer(Protocol):
    """Per-node scores for one (source, sink) pair."""

    def evaluate(self) -> None: ...

    def score(self, node: Hashable) -> float: ...


ScorerFactory = Callable[[nx.Graph, Hashable, Hashable], Scorer]


class VoltageScorer:
    """Iterative voltage propagation between a source and a sink.

    Updates are synchronous: every step reads the previous step's
    potentials.  Each incoming edge of weight ``w`` contributes both of
    its endpoints with weight ``w / 2``, so a node's new potential mixes
    its neighbours' potentials with its own.

    Example:
        >>> scorer = VoltageScorer(nx.path_graph(3), 0, 2)
        >>> scorer.evaluate()
        >>> round(scorer.score(1), 2)
        0.5
    """

    def __init__(
        self,
        graph: nx.Graph,
        source: Hashable,
        sink: Hashable,
        config: ScorerConfig | None = None,
    ) -> None:
        if source not in graph:
            raise ValueError(f"source {source!r} is not in the graph")
        if sink not in graph:
            raise ValueError(f"sink {sink!r} is not in the graph")
        if source == sink:
            raise ValueError("source and sink must be different nodes")

        self.graph = graph
        self.source = source
        self.sink = sink
        self.config = config or ScorerConfig()
        self.iterations = 0
        self._voltages: dict[Hashable, float] | None = None

    def evaluate(self) -> None:
        """Propagate potentials until convergence or the iteration limit."""
        incoming = self._incoming_edges()
        current = {v: 0.0 for v in self.graph.nodes()}
        current[self.source] = SOURCE_VOLTAGE
        current[self.sink] = SINK_VOLTAGE

        self.iterations = 0
        while self.iterations < self.config.max_iterations:
            self.iterations += 1
            updated: dict[Hashable, float] = {}
            max_delta = 0.0
            for v in current:
                if v == self.source or v == self.sink:
                    updated[v] = current[v]
                    continue
                voltage_sum = 0.0
                weight_sum = 0.0
                for w, weight in incoming[v]:
                    if w == v:
                        voltage_sum += current[v] * weight
                        weight_sum += weight
                    else:
                        voltage_sum += (current[w] + current[v]) * weight / 2
                        weight_sum += weight
                if voltage_sum == 0 or weight_sum == 0:
                    updated[v] = 0.0
                else:
                    updated[v] = voltage_sum / weight_sum
                max_delta = max(max_delta, abs(updated[v] - current[v]))
            current = updated
            if max_delta < self.config.tolerance:
                break

        self._voltages = current

    def score(self, node: Hashable) -> float:
        """Return the potential of ``node``; requires ``evaluate()`` first."""
        if self._voltages is None:
            raise RuntimeError("evaluate() must be called before score()")
        return self._voltages[node]

    def _incoming_edges(self) -> dict[Hashable, list[tuple[Hashable, float]]]:
        """Map each node to ``(neighbour, weight)`` pairs of its incoming edges."""
        attr = self.config.weight_attribute
        incoming: dict[Hashable, list[tuple[Hashable, float]]] = {
            v: [] for v in self.graph.nodes()
        }
        adjacency = self.graph.pred if self.graph.is_directed() else self.graph.adj
        for v, neighbours in adjacency.items():
            for w, data in neighbours.items():
                # multigraphs map each neighbour to {key: attrs}
                edges = data.values() if self.graph.is_multigraph() else [data]
                for attrs in edges:
                    incoming[v].append((w, float(attrs.get(attr, 1.0))))
        return incoming
