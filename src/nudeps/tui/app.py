"""Textual TUI for browsing a project's resolved NuGet dependency graph."""

from __future__ import annotations

import sys
from itertools import islice
from pathlib import Path
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Footer, Header, Input, Static, Tree
from textual.widgets.tree import TreeNode
from textual.worker import Worker, WorkerState

from nudeps.api import build_graph_for, iter_unique_nodes
from nudeps.core.graph import LibraryNode

# Limits to keep diamond-heavy graphs from exploding the widget
MAX_TREE_DEPTH = 8
MAX_TREE_NODES = 2000
MAX_REFERENCE_PATHS = 10
EXPAND_DEPTH_DEFAULT = 1

COLOR_HEADER = "bold magenta"
COLOR_PKG = "white"
COLOR_META = "bold yellow"
COLOR_STATS = "cyan"


def _node_label(node: LibraryNode) -> str:
    color = COLOR_META if node.is_meta_package else COLOR_PKG
    meta = " [dim]\\[meta][/]" if node.is_meta_package else ""
    return f"[{color}]{node.id}[/] [dim]v{node.version or '?'}[/]{meta}"


def _node_stats(node: LibraryNode) -> tuple[int, int, int]:
    """Return (direct_dependencies, dependers, unique_descendants) for a node."""
    descendants = sum(1 for _ in iter_unique_nodes(node)) - 1
    return len(node.dependencies), len(node.dependers), descendants


def _populate_textual_tree(
    tree_root: TreeNode,
    root: LibraryNode,
    *,
    max_depth: int = MAX_TREE_DEPTH,
    max_nodes: int = MAX_TREE_NODES,
) -> int:
    """Mirror every occurrence below root into tree_root; cap depth and total nodes."""
    parents: list[TreeNode] = [tree_root]
    count = 0
    truncated = False

    def visit(path: tuple[LibraryNode, ...], node: LibraryNode) -> bool:
        nonlocal count, truncated
        depth = len(path) - 1
        if depth == 0:
            tree_root.data = node
            return True
        del parents[depth:]
        parent = parents[-1]
        if count >= max_nodes:
            truncated = True
            return False
        count += 1
        if node in path[:-1]:
            parent.add_leaf(f"{_node_label(node)} [red](cycle)[/]", data=node)
            return False
        if depth >= max_depth and node.dependencies:
            parent.add_leaf(f"{_node_label(node)} [dim]…[/]", data=node)
            return False
        if not node.dependencies:
            parent.add_leaf(_node_label(node), data=node)
            return False
        parents.append(parent.add(_node_label(node), data=node, expand=False))
        return True

    root.traverse(visit)
    if truncated:
        tree_root.add_leaf(f"[dim]… truncated ({max_nodes} nodes max)[/]")
    return count


def _expand_to_depth(tn: TreeNode, depth: int, current: int = 0) -> None:
    """Expand tree nodes up to given depth (0 = root only)."""
    if current > depth:
        return
    tn.expand()
    for child in tn.children:
        _expand_to_depth(child, depth, current + 1)


def _format_node(node: LibraryNode) -> str:
    direct, dependers, descendants = _node_stats(node)
    paths = list(islice(node.get_reference_paths(), MAX_REFERENCE_PATHS + 1))
    more = len(paths) > MAX_REFERENCE_PATHS
    lines = [
        f"[{COLOR_HEADER}]Package[/]",
        f"  {_node_label(node)}  [dim]({node.type})[/]",
        "",
        f"[{COLOR_HEADER}]Stats[/]",
        f"  Direct dependencies:  [{COLOR_STATS}]{direct}[/]",
        f"  Dependers:            [{COLOR_STATS}]{dependers}[/]",
        f"  Unique descendants:   [{COLOR_STATS}]{descendants}[/]",
        "",
        f"[{COLOR_HEADER}]Referenced through[/]",
    ]
    lines.extend(f"  {p}" for p in paths[:MAX_REFERENCE_PATHS])
    if more:
        lines.append(f"  [dim]… more than {MAX_REFERENCE_PATHS} paths[/]")
    return "\n".join(lines)


class SearchScreen(ModalScreen[str | None]):
    """Modal asking for a package id to find in the tree."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=True),
    ]

    DEFAULT_CSS = """
    SearchScreen {
        align: center middle;
        padding: 2 4;
    }
    SearchScreen #search_input {
        width: 60;
        margin: 1 0;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("[bold cyan]Find package[/]  (partial, case-insensitive)", markup=True)
            yield Input(placeholder="package id...", id="search_input")
            yield Static(
                "[dim]Enter[/] = Search  ·  [dim]Escape[/] = Cancel  ·  "
                "then [bold]n[/]/[bold]N[/] = next/previous",
                markup=True,
            )

    def on_mount(self) -> None:
        self.query_one("#search_input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        value = event.value.strip()
        self.dismiss(value or None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class DepGraphApp(App[None]):
    """Terminal UI to explore the dependency graph of one restored project target."""

    TITLE = "nudeps"
    BINDINGS = [
        Binding("/", "search", "Search"),
        Binding("n", "next_match", "Next match", show=False),
        Binding("N", "prev_match", "Prev match", show=False),
        Binding("d", "toggle_details", "Details"),
        Binding("r", "refresh", "Rebuild"),
        Binding("e", "expand_all", "Expand all"),
        Binding("c", "collapse_all", "Collapse"),
        Binding("q", "quit", "Quit"),
    ]

    DEFAULT_CSS = """
    #details {
        padding: 1 2;
        border: solid $primary;
        height: auto;
        min-height: 8;
    }
    """

    def __init__(
        self,
        assets_path: Path | None = None,
        framework: str | None = None,
        runtime_identifier: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._assets_path = assets_path
        self._framework = framework
        self._runtime_identifier = runtime_identifier
        self._root_node: LibraryNode | None = None
        self._search_matches: list[TreeNode] = []
        self._search_index = 0
        self._details_visible = True

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        yield Tree("[dim]Loading…[/]", id="dep_tree")
        yield Static("[dim]Reading assets file…[/]", id="details", markup=True)
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = "Dependency Graph Explorer"
        self._start_build()

    def _start_build(self) -> None:
        self.run_worker(self._build_worker, thread=True, exclusive=True)

    def _build_worker(self) -> LibraryNode:
        return build_graph_for(
            self._assets_path,
            framework=self._framework,
            runtime_identifier=self._runtime_identifier,
        )

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if event.state == WorkerState.SUCCESS:
            self._root_node = event.worker.result
            self._show_graph()
        elif event.state == WorkerState.ERROR:
            self._set_details(f"[red]Error: {event.worker.error!s}[/]")

    def _show_graph(self) -> None:
        root = self._root_node
        if root is None:
            return
        tree = self.query_one("#dep_tree", Tree)
        tree.clear()
        tree.root.set_label(f"[{COLOR_HEADER}]{root.id}[/] [dim]v{root.version}[/]")
        count = _populate_textual_tree(tree.root, root)
        _expand_to_depth(tree.root, EXPAND_DEPTH_DEFAULT)
        self._set_details(_format_node(root) + f"\n\n[dim]{count} occurrences shown[/]")
        tree.focus()

    def _set_details(self, text: str) -> None:
        self.query_one("#details", Static).update(text)

    def on_tree_node_highlighted(self, event: Tree.NodeHighlighted) -> None:
        node = event.node.data
        if isinstance(node, LibraryNode):
            self._set_details(_format_node(node))

    def action_refresh(self) -> None:
        self._search_matches = []
        self._set_details("[dim]Rebuilding…[/]")
        self._start_build()

    def action_expand_all(self) -> None:
        self.query_one("#dep_tree", Tree).root.expand_all()

    def action_collapse_all(self) -> None:
        root = self.query_one("#dep_tree", Tree).root
        root.collapse_all()
        root.expand()

    def action_toggle_details(self) -> None:
        self._details_visible = not self._details_visible
        details = self.query_one("#details", Static)
        details.styles.display = "block" if self._details_visible else "none"

    def action_search(self) -> None:
        if self._root_node is None:
            return
        self.push_screen(SearchScreen(), self._on_search_done)

    def _on_search_done(self, query: str | None) -> None:
        if not query:
            return
        tree = self.query_one("#dep_tree", Tree)
        self._search_matches = _collect_matches(tree.root, query.lower())
        if not self._search_matches:
            self.notify(f"No matches for '{query}'", severity="warning", timeout=2)
            return
        self._goto_match(0)

    def _goto_match(self, index: int) -> None:
        self._search_index = index % len(self._search_matches)
        match_node = self._search_matches[self._search_index]
        parent = match_node.parent
        while parent is not None:
            parent.expand()
            parent = parent.parent
        tree = self.query_one("#dep_tree", Tree)
        tree.select_node(match_node)
        tree.scroll_to_node(match_node)
        self.notify(
            f"Match {self._search_index + 1}/{len(self._search_matches)}",
            severity="information",
            timeout=2,
        )

    def action_next_match(self) -> None:
        if not self._search_matches:
            self.notify("No active search. Press / to search.", severity="information", timeout=2)
            return
        self._goto_match(self._search_index + 1)

    def action_prev_match(self) -> None:
        if not self._search_matches:
            self.notify("No active search. Press / to search.", severity="information", timeout=2)
            return
        self._goto_match(self._search_index - 1)


def _collect_matches(tn: TreeNode, query: str) -> list[TreeNode]:
    """Tree nodes (pre-order) whose package id contains query."""
    matches = []
    node = tn.data
    if isinstance(node, LibraryNode) and query in node.id.lower():
        matches.append(tn)
    for child in tn.children:
        matches.extend(_collect_matches(child, query))
    return matches


def main() -> None:
    """Entry point for the nudeps TUI."""
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    DepGraphApp(assets_path=path).run()


if __name__ == "__main__":
    main()
