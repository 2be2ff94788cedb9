"""Tests for TUI utility functions (non-interactive parts)."""

from __future__ import annotations

from nudeps.core.assets import parse_assets
from nudeps.core.graph import build_graph
from nudeps.tui.app import (
    MAX_REFERENCE_PATHS,
    _format_node,
    _node_label,
    _node_stats,
)


def _many_paths_data(width: int) -> dict:
    """Project -> L0..Ln, each Li -> Shared."""
    libs = {f"L{i}/1.0": {"dependencies": {"Shared": "1.0"}} for i in range(width)}
    libs["Shared/1.0"] = {"compile": {"lib/shared.dll": {}}}
    return {
        "targets": {"net8.0": libs},
        "projectFileDependencyGroups": {"net8.0": [f"L{i}" for i in range(width)]},
        "project": {"restore": {"projectName": "P"}},
    }


class TestNodeStats:
    """Tests for _node_stats helper."""

    def test_root(self, assets_data: dict) -> None:
        root = build_graph(parse_assets(assets_data), "net8.0")
        assert _node_stats(root) == (3, 0, 5)

    def test_shared_leaf(self, assets_data: dict) -> None:
        root = build_graph(parse_assets(assets_data), "net8.0")
        c = root.dependencies[0].dependencies[0]
        assert _node_stats(c) == (0, 2, 0)


class TestNodeLabel:
    """Tests for _node_label helper."""

    def test_package(self, assets_data: dict) -> None:
        root = build_graph(parse_assets(assets_data), "net8.0")
        label = _node_label(root.dependencies[0])
        assert "A" in label
        assert "v1.0.0" in label
        assert "meta" not in label

    def test_meta_package(self, assets_data: dict) -> None:
        root = build_graph(parse_assets(assets_data), "net8.0")
        assert "meta" in _node_label(root.dependencies[2])


class TestFormatNode:
    """Tests for _format_node helper."""

    def test_lists_reference_paths(self, assets_data: dict) -> None:
        root = build_graph(parse_assets(assets_data), "net8.0")
        text = _format_node(root.dependencies[0].dependencies[0])
        assert "App > A > C" in text
        assert "App > B > C" in text
        assert "more than" not in text

    def test_caps_reference_paths(self) -> None:
        root = build_graph(parse_assets(_many_paths_data(MAX_REFERENCE_PATHS + 5)), "net8.0")
        shared = root.dependencies[0].dependencies[0]
        text = _format_node(shared)
        assert text.count("P > L") == MAX_REFERENCE_PATHS
        assert f"more than {MAX_REFERENCE_PATHS} paths" in text
