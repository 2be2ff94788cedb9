"""Command-line interface for nudeps: list targets, show trees, explain why a package is referenced."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from itertools import islice
from pathlib import Path

from nudeps.api import find_node, iter_unique_nodes, load_assets, resolve_target
from nudeps.core.finder import default_log_level
from nudeps.core.graph import LibraryNode, build_graph
from nudeps.errors import NudepsError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s  %(name)-24s  %(levelname)-7s  %(message)s"


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _node_label(node: LibraryNode) -> str:
    version = f" ({node.version})" if node.version else ""
    meta = " [meta]" if node.is_meta_package else ""
    return f"{node.id}{version}{meta}"


def _is_last_child(parent: LibraryNode, node: LibraryNode) -> bool:
    deps = parent.dependencies
    return bool(deps) and deps[-1] is node


def _tree_prefix(path: tuple[LibraryNode, ...]) -> str:
    """Box-drawing prefix for the last node of path."""
    if len(path) < 2:
        return ""
    parts = []
    # continuation bars for ancestors below the root
    for i in range(1, len(path) - 1):
        parts.append("    " if _is_last_child(path[i - 1], path[i]) else "│   ")
    parts.append("└── " if _is_last_child(path[-2], path[-1]) else "├── ")
    return "".join(parts)


def _print_tree_text(
    root: LibraryNode,
    *,
    max_depth: int | None = None,
    dedupe: bool = False,
) -> None:
    """Print the dependency tree below root as indented text."""
    printed: set[LibraryNode] = set()

    def visit(path: tuple[LibraryNode, ...], node: LibraryNode) -> bool:
        line = f"{_tree_prefix(path)}{_node_label(node)}"
        if node in path[:-1]:
            print(f"{line} (cycle)")
            return False
        if dedupe and node in printed and node.dependencies:
            print(f"{line} (*)")
            return False
        print(line)
        printed.add(node)
        return max_depth is None or len(path) - 1 < max_depth

    root.traverse(visit)


def _positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _load_graph(args: argparse.Namespace) -> LibraryNode:
    lock_file = load_assets(Path(args.path) if args.path else None)
    framework, rid = resolve_target(lock_file, args.framework, args.runtime)
    return build_graph(lock_file, framework, rid)


def cmd_targets(args: argparse.Namespace) -> int:
    """List target sections of the assets file."""
    lock_file = load_assets(Path(args.path) if args.path else None)
    rows = [
        {
            "target": t.name,
            "framework": t.framework,
            "runtime": t.runtime_identifier,
            "libraries": len(t.libraries),
            "has_dependency_group": lock_file.get_dependency_group(t.framework) is not None,
        }
        for t in lock_file.targets
    ]
    if args.json:
        print(json.dumps(rows, indent=2))
        return 0
    if not rows:
        print("No targets found. Has the project been restored?")
        return 1
    print(f"{lock_file.project_name} {lock_file.project_version}: {len(rows)} target(s)\n")
    for row in rows:
        missing = "" if row["has_dependency_group"] else "  [no dependency group]"
        print(f"  {row['target']}  ({row['libraries']} libraries){missing}")
    return 0


def cmd_tree(args: argparse.Namespace) -> int:
    """Show the dependency tree of the project."""
    root = _load_graph(args)
    if args.json:
        print(json.dumps([n.to_dict() for n in iter_unique_nodes(root)], indent=2))
    else:
        _print_tree_text(root, max_depth=args.depth, dedupe=args.dedupe)
    return 0


def cmd_why(args: argparse.Namespace) -> int:
    """Show the reference paths through which the project reaches a package."""
    root = _load_graph(args)
    node = find_node(root, args.package)
    if node is None:
        print(f"Package not found in graph: {args.package}", file=sys.stderr)
        return 1
    paths = list(islice(node.get_reference_paths(), args.limit))
    if args.json:
        print(json.dumps({"package": node.id, "version": node.version, "paths": paths}, indent=2))
        return 0
    print(f"{_node_label(node)} is referenced by {len(node.dependers)} package(s):\n")
    for path in paths:
        print(f"  {path}")
    if args.limit is not None and len(paths) == args.limit:
        print(f"\n  (stopped after {args.limit} path(s))")
    return 0


def _collect_edges(root: LibraryNode) -> set[tuple[str, str]]:
    """All (depender, dependency) id pairs reachable from root."""
    return {(node.id, dep.id) for node in iter_unique_nodes(root) for dep in node.dependencies}


def _generate_dot(root: LibraryNode, title: str | None = None) -> str:
    """Generate DOT (Graphviz) format from a dependency graph."""
    lines = [
        "digraph dependencies {",
        "    rankdir=LR;",
        '    node [shape=box, style=rounded, fontname="sans-serif"];',
    ]
    if title:
        lines.insert(1, f'    label="{title}";')
        lines.insert(2, "    labelloc=t;")

    lines.append(f'    "{root.id}" [style="rounded,filled", fillcolor=lightblue];')
    for node in iter_unique_nodes(root):
        if node.is_meta_package:
            lines.append(f'    "{node.id}" [style="rounded,dashed"];')

    for parent, child in sorted(_collect_edges(root)):
        lines.append(f'    "{parent}" -> "{child}";')

    lines.append("}")
    return "\n".join(lines)


def _mermaid_id(name: str) -> str:
    """Convert a package id to a valid Mermaid node ID; distinct ids never collide."""
    # "_" only appears as the delimiter of an escaped code point
    return "".join(c if c.isascii() and c.isalnum() else f"_{ord(c):x}_" for c in name)


def _generate_mermaid(root: LibraryNode, title: str | None = None) -> str:
    """Generate Mermaid format from a dependency graph."""
    lines = ["graph LR"]
    if title:
        lines[0] = f"---\ntitle: {title}\n---\ngraph LR"

    lines.append(f"    {_mermaid_id(root.id)}[{root.id}]")
    lines.append(f"    style {_mermaid_id(root.id)} fill:#lightblue")

    for parent, child in sorted(_collect_edges(root)):
        lines.append(f"    {_mermaid_id(parent)}[{parent}] --> {_mermaid_id(child)}[{child}]")

    return "\n".join(lines)


def cmd_graph(args: argparse.Namespace) -> int:
    """Generate a dependency graph in DOT or Mermaid format."""
    root = _load_graph(args)
    title = None if args.no_title else f"{root.id} dependencies"
    if args.format == "mermaid":
        output = _generate_mermaid(root, title=title)
    else:
        output = _generate_dot(root, title=title)

    if args.output:
        Path(args.output).write_text(output + "\n")
        print(f"Graph written to: {args.output}", file=sys.stderr)
    else:
        print(output)
    return 0


def cmd_tui(args: argparse.Namespace) -> int:
    """Launch the interactive TUI."""
    from nudeps.tui.app import DepGraphApp

    app = DepGraphApp(
        assets_path=Path(args.path) if args.path else None,
        framework=args.framework,
        runtime_identifier=args.runtime,
    )
    app.run()
    return 0


def _add_target_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        help="Project directory or project.assets.json (default: $NUDEPS_ASSETS_FILE or .)",
    )
    parser.add_argument(
        "-f",
        "--framework",
        default=None,
        help="Target framework, e.g. net8.0 (default: $NUDEPS_FRAMEWORK or the only one)",
    )
    parser.add_argument(
        "-r",
        "--runtime",
        default=None,
        metavar="RID",
        help="Runtime identifier, e.g. linux-x64 (default: $NUDEPS_RUNTIME or none)",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the nudeps CLI."""
    from nudeps import __version__

    parser = argparse.ArgumentParser(
        prog="nudeps",
        description="Explore the resolved NuGet dependency graph of a .NET project.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default=default_log_level(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level for diagnostics on stderr (default: $NUDEPS_LOG_LEVEL or WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # nudeps targets
    targets_parser = subparsers.add_parser(
        "targets",
        help="List target sections in the assets file",
        description="List the framework/runtime targets restored for the project.",
    )
    targets_parser.add_argument(
        "path",
        nargs="?",
        help="Project directory or project.assets.json",
    )
    targets_parser.add_argument("--json", action="store_true", help="Output as JSON")
    targets_parser.set_defaults(func=cmd_targets)

    # nudeps tree
    tree_parser = subparsers.add_parser(
        "tree",
        help="Show the dependency tree of the project",
        description="Print every path through the resolved dependency graph as a tree.",
    )
    _add_target_arguments(tree_parser)
    tree_parser.add_argument(
        "-d",
        "--depth",
        type=int,
        default=None,
        help="Maximum tree depth (default: unlimited)",
    )
    tree_parser.add_argument(
        "--dedupe",
        action="store_true",
        help="Print each package's dependencies only once; repeats are marked (*)",
    )
    tree_parser.add_argument(
        "--json",
        action="store_true",
        help="Output the unique packages as JSON",
    )
    tree_parser.set_defaults(func=cmd_tree)

    # nudeps why
    why_parser = subparsers.add_parser(
        "why",
        help="Show why a package is part of the graph",
        description="List the chains of references from the project to a package.",
    )
    why_parser.add_argument("package", help="Package id (case-insensitive)")
    _add_target_arguments(why_parser)
    why_parser.add_argument(
        "-n",
        "--limit",
        type=_positive_int,
        default=None,
        help="Stop after this many paths (default: all)",
    )
    why_parser.add_argument("--json", action="store_true", help="Output as JSON")
    why_parser.set_defaults(func=cmd_why)

    # nudeps graph
    graph_parser = subparsers.add_parser(
        "graph",
        help="Generate a dependency graph (DOT/Mermaid format)",
        description="Generate a visual dependency graph of the project.",
    )
    _add_target_arguments(graph_parser)
    graph_parser.add_argument(
        "--format",
        choices=["dot", "mermaid"],
        default="dot",
        help="Output format: dot (Graphviz) or mermaid (default: dot)",
    )
    graph_parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="Output file (default: stdout)",
    )
    graph_parser.add_argument(
        "--no-title",
        action="store_true",
        help="Don't include a title in the graph",
    )
    graph_parser.set_defaults(func=cmd_graph)

    # nudeps tui (default if no command)
    tui_parser = subparsers.add_parser(
        "tui",
        help="Launch the interactive terminal UI",
        description="Start the interactive TUI for browsing the dependency graph.",
    )
    _add_target_arguments(tui_parser)
    tui_parser.set_defaults(func=cmd_tui)

    args = parser.parse_args(argv)
    _setup_logging(args.log_level)

    # Default to TUI if no command specified
    if args.command is None:
        args = argparse.Namespace(path=None, framework=None, runtime=None, func=cmd_tui)

    try:
        return args.func(args)
    except NudepsError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
