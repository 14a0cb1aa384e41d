"""Graph and ground truth file loaders.

Graphs are read either from node-link JSON or from whitespace edge
lists; ground truth communities from a JSON list of node id lists.
"""

import json
from pathlib import Path

import networkx as nx
from pydantic import BaseModel, ConfigDict, ValidationError

NodeId = int | str


class NodeData(BaseModel):
    id: NodeId
    # Allow extra node attributes (labels, positions, ...)
    model_config = ConfigDict(extra="allow")


class EdgeData(BaseModel):
    source: NodeId
    target: NodeId
    weight: float | None = None
    model_config = ConfigDict(extra="allow")


class GraphFileData(BaseModel):
    directed: bool = False
    nodes: list[NodeData] = []
    edges: list[EdgeData] = []


def _read_json(file_path: Path):
    try:
        with open(file_path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_path}: {e}") from e


def _build_graph(data: GraphFileData, directed: bool) -> nx.Graph:
    graph: nx.Graph = nx.DiGraph() if directed else nx.Graph()
    for node in data.nodes:
        graph.add_node(node.id, **(node.model_extra or {}))
    for edge in data.edges:
        attrs = dict(edge.model_extra or {})
        if edge.weight is not None:
            attrs["weight"] = edge.weight
        graph.add_edge(edge.source, edge.target, **attrs)
    return graph


def _parse_edge_list(file_path: Path) -> GraphFileData:
    edges: list[EdgeData] = []
    with open(file_path, encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.split("#", 1)[0].strip()
            if not line:
                continue
            fields = line.split()
            if len(fields) not in (2, 3):
                raise ValueError(
                    f"Expected 'source target [weight]' at {file_path}:{line_no}, got {line!r}"
                )
            try:
                weight = float(fields[2]) if len(fields) == 3 else None
            except ValueError as e:
                raise ValueError(f"Invalid weight at {file_path}:{line_no}: {e}") from e
            edges.append(EdgeData(source=fields[0], target=fields[1], weight=weight))
    return GraphFileData(edges=edges)


def load_graph(file_path: Path, directed: bool | None = None) -> nx.Graph:
    """Read a graph from node-link JSON or a whitespace edge list.

    Args:
        file_path: ``.json`` node-link file or edge list file.
        directed: Force a directed/undirected graph.  ``None`` uses the
            JSON ``directed`` flag (undirected for edge lists).

    Returns:
        A ``networkx`` graph; edge weights land in the ``weight`` attribute.

    Raises:
        ValueError: If the file is malformed.
    """
    if file_path.suffix.lower() == ".json":
        raw_data = _read_json(file_path)
        try:
            data = GraphFileData.model_validate(raw_data)
        except ValidationError as e:
            raise ValueError(f"Validation error for {file_path}: {e}") from e
    else:
        data = _parse_edge_list(file_path)

    if directed is None:
        directed = data.directed
    return _build_graph(data, directed)


def load_communities(file_path: Path) -> list[list[NodeId]]:
    """Read ground truth communities: a JSON list of node id lists."""
    raw_data = _read_json(file_path)
    if not isinstance(raw_data, list) or not all(isinstance(c, list) for c in raw_data):
        raise ValueError(f"Expected a list of node id lists in {file_path}")
    return raw_data


def resolve_node_id(graph: nx.Graph, raw: NodeId) -> NodeId:
    """Match ``raw`` against the graph's ids, trying its ``str`` and ``int`` forms.

    Edge lists always yield ``str`` ids while JSON files may use ints,
    so ``1`` and ``"1"`` are treated as the same node.  Ids matching
    neither form come back unchanged.
    """
    if raw in graph:
        return raw
    as_str = str(raw)
    if as_str in graph:
        return as_str
    try:
        as_int = int(as_str)
    except ValueError:
        return raw
    return as_int if as_int in graph else raw


def align_communities(
    graph: nx.Graph, communities: list[list[NodeId]]
) -> list[list[NodeId]]:
    """Rewrite ground truth ids to the graph's own ids.

    Raises:
        ValueError: If no ground truth id names a node of the graph.
    """
    aligned = [[resolve_node_id(graph, v) for v in community] for community in communities]
    if not any(v in graph for community in aligned for v in community):
        raise ValueError("No ground truth node id matches a node of the graph")
    return aligned
