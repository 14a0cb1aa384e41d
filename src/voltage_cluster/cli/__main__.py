"""CLI entry point: python -m voltage_cluster.cli cluster|community"""

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

import structlog

from voltage_cluster.clustering import VoltageClusterer
from voltage_cluster.config.clustering import CandidateStrategy, load_clustering_config
from voltage_cluster.config.settings import get_settings
from voltage_cluster.evaluation.metrics import compute_metrics, format_metrics
from voltage_cluster.ingestion.graph_loader import (
    align_communities,
    load_communities,
    load_graph,
    resolve_node_id,
)
from voltage_cluster.logging_config import configure_logging


def run(args: argparse.Namespace) -> dict:
    """Load the graph, cluster it, and build the JSON-ready result."""
    log = structlog.get_logger()
    settings = get_settings()

    config_path = Path(args.config) if args.config else settings.clustering_config_path
    config = load_clustering_config(config_path)
    if args.candidates is not None:
        config.num_candidates = args.candidates
    if args.seed is not None:
        config.random_seed = args.seed
    if args.strategy is not None:
        config.candidate_strategy = CandidateStrategy(args.strategy)

    graph = load_graph(Path(args.graph), directed=True if args.directed else None)
    log.info(
        "graph_loaded",
        path=args.graph,
        nodes=graph.number_of_nodes(),
        edges=graph.number_of_edges(),
        directed=graph.is_directed(),
    )

    clusterer = VoltageClusterer(graph, config=config)
    if args.command == "community":
        clusters = clusterer.get_community(resolve_node_id(graph, args.node))
    else:
        clusters = clusterer.cluster(args.clusters)

    result: dict = {"clusters": [sorted(c, key=str) for c in clusters]}

    if args.ground_truth:
        communities = align_communities(graph, load_communities(Path(args.ground_truth)))
        metrics = compute_metrics(clusters, communities)
        result["metrics"] = asdict(metrics)
        print(format_metrics(metrics), file=sys.stderr)
        log.info("evaluation_complete", f1=round(metrics.f1, 4))

    return result


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("graph", type=str, help="Graph file (.json node-link or edge list)")
    parser.add_argument(
        "--candidates",
        type=int,
        default=None,
        help="Number of candidate scoring rounds (default: from config)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in CandidateStrategy],
        default=None,
        help="Candidate strategy (default: from config)",
    )
    parser.add_argument("--config", type=str, default=None, help="Clustering YAML config")
    parser.add_argument(
        "--ground-truth",
        type=str,
        default=None,
        help="JSON list of ground truth communities to evaluate against",
    )
    parser.add_argument(
        "--directed", action="store_true", help="Treat the graph as directed"
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="voltage_cluster.cli",
        description="Voltage-based community detection",
    )
    subparsers = parser.add_subparsers(dest="command")

    cluster_parser = subparsers.add_parser("cluster", help="Partition the graph into clusters")
    _add_common_arguments(cluster_parser)
    cluster_parser.add_argument(
        "--clusters", type=int, required=True, help="Maximum number of clusters"
    )

    community_parser = subparsers.add_parser(
        "community", help="Find the community around one node"
    )
    _add_common_arguments(community_parser)
    community_parser.add_argument("--node", type=str, required=True, help="Node id")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    settings = get_settings()
    configure_logging(json_output=settings.log_json, log_level=settings.log_level)

    result = run(args)
    print(json.dumps(result, indent=2, default=str))


if __name__ == "__main__":
    main()
