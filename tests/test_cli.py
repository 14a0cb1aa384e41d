"""Tests for the command-line entry point."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from structlog.testing import capture_logs

from voltage_cluster.cli.__main__ import main

TRIANGLES_EDGES = "a1 a2\na2 a3\na1 a3\nb1 b2\nb2 b3\nb1 b3\na3 b1\n"


@pytest.fixture
def edge_file(tmp_path: Path) -> Path:
    path = tmp_path / "triangles.edges"
    path.write_text(TRIANGLES_EDGES, encoding="utf-8")
    return path


@pytest.fixture
def missing_config(tmp_path: Path) -> str:
    return str(tmp_path / "no-such-config.yaml")


def _run(argv: list[str], capsys) -> dict:
    """Run the CLI with log events captured, returning the parsed stdout."""
    with patch("voltage_cluster.cli.__main__.configure_logging"), capture_logs():
        main(argv)
    return json.loads(capsys.readouterr().out)


class TestClusterCommand:
    def test_outputs_partition(self, edge_file, missing_config, capsys) -> None:
        result = _run(
            ["cluster", str(edge_file), "--clusters", "2", "--seed", "3",
             "--candidates", "5", "--config", missing_config],
            capsys,
        )
        clusters = result["clusters"]
        assert 1 <= len(clusters) <= 2
        members = [v for cluster in clusters for v in cluster]
        assert sorted(members) == ["a1", "a2", "a3", "b1", "b2", "b3"]
        assert "metrics" not in result

    def test_seeded_runs_are_identical(self, edge_file, missing_config, capsys) -> None:
        argv = ["cluster", str(edge_file), "--clusters", "3", "--seed", "11",
                "--config", missing_config]
        assert _run(argv, capsys) == _run(argv, capsys)

    def test_single_cluster(self, edge_file, missing_config, capsys) -> None:
        result = _run(
            ["cluster", str(edge_file), "--clusters", "1", "--config", missing_config], capsys
        )
        assert result["clusters"] == [["a1", "a2", "a3", "b1", "b2", "b3"]]

    def test_ground_truth_metrics(self, edge_file, missing_config, tmp_path, capsys) -> None:
        truth = tmp_path / "truth.json"
        truth.write_text(json.dumps([["a1", "a2", "a3"], ["b1", "b2", "b3"]]), encoding="utf-8")
        result = _run(
            ["cluster", str(edge_file), "--clusters", "2", "--seed", "1",
             "--config", missing_config, "--ground-truth", str(truth)],
            capsys,
        )
        metrics = result["metrics"]
        assert metrics["total_ground_truth_same"] == 6
        assert 0.0 <= metrics["f1"] <= 1.0

    def test_metrics_report_goes_to_stderr(
        self, edge_file, missing_config, tmp_path, capsys
    ) -> None:
        truth = tmp_path / "truth.json"
        truth.write_text(json.dumps([["a1", "a2", "a3"], ["b1", "b2", "b3"]]), encoding="utf-8")
        argv = ["cluster", str(edge_file), "--clusters", "2", "--seed", "1",
                "--config", missing_config, "--ground-truth", str(truth)]

        with patch("voltage_cluster.cli.__main__.configure_logging"), capture_logs() as logs:
            main(argv)
        captured = capsys.readouterr()

        assert "Pairwise Clustering Metrics" in captured.err
        assert "Pairwise Clustering Metrics" not in captured.out
        json.loads(captured.out)
        events = [e["event"] for e in logs]
        assert "graph_loaded" in events
        assert "evaluation_complete" in events

    def test_integer_ground_truth_matches_edge_list_ids(
        self, tmp_path, missing_config, capsys
    ) -> None:
        graph = tmp_path / "graph.edges"
        graph.write_text("1 2\n2 3\n", encoding="utf-8")
        truth = tmp_path / "truth.json"
        truth.write_text(json.dumps([[1, 2, 3]]), encoding="utf-8")

        result = _run(
            ["cluster", str(graph), "--clusters", "1", "--config", missing_config,
             "--ground-truth", str(truth)],
            capsys,
        )

        metrics = result["metrics"]
        assert metrics["true_positives"] == 3
        assert metrics["f1"] == 1.0

    def test_ground_truth_sharing_no_ids_rejected(
        self, edge_file, missing_config, tmp_path
    ) -> None:
        truth = tmp_path / "truth.json"
        truth.write_text(json.dumps([["x", "y"]]), encoding="utf-8")
        with patch("voltage_cluster.cli.__main__.configure_logging"), capture_logs():
            with pytest.raises(ValueError, match="No ground truth node id"):
                main(["cluster", str(edge_file), "--clusters", "2",
                      "--config", missing_config, "--ground-truth", str(truth)])

    def test_config_file_and_strategy(self, edge_file, tmp_path, capsys) -> None:
        config = tmp_path / "clustering.yaml"
        config.write_text("num_candidates: 3\nrandom_seed: 5\n", encoding="utf-8")
        result = _run(
            ["cluster", str(edge_file), "--clusters", "2", "--strategy", "one",
             "--config", str(config)],
            capsys,
        )
        assert sum(len(c) for c in result["clusters"]) == 6


class TestCommunityCommand:
    def test_community_contains_node(self, edge_file, missing_config, capsys) -> None:
        result = _run(
            ["community", str(edge_file), "--node", "a1", "--seed", "2",
             "--config", missing_config],
            capsys,
        )
        clusters = result["clusters"]
        assert 1 <= len(clusters) <= 2
        assert any("a1" in cluster for cluster in clusters)

    def test_integer_node_ids(self, tmp_path, missing_config, capsys) -> None:
        path = tmp_path / "graph.json"
        path.write_text(
            json.dumps({"edges": [{"source": 1, "target": 2}, {"source": 2, "target": 3}]}),
            encoding="utf-8",
        )
        result = _run(
            ["community", str(path), "--node", "2", "--seed", "4", "--config", missing_config],
            capsys,
        )
        assert sorted(v for c in result["clusters"] for v in c) == [1, 2, 3]


def test_no_command_prints_help_and_exits(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 1
    assert "usage" in capsys.readouterr().out
