"""Public API: use nudeps from Python or from other tools."""

from __future__ import annotations

from itertools import islice
from pathlib import Path
from typing import Iterator

from nudeps.core.assets import LockFile, read_assets_file
from nudeps.core.finder import default_framework, default_runtime_identifier, find_assets_file
from nudeps.core.graph import LibraryNode, build_graph
from nudeps.errors import AssetsFileError, NudepsError


def load_assets(path: Path | None = None) -> LockFile:
    """
    Find and read the assets file for a project.

    path may be the assets file, a project directory, or None for
    NUDEPS_ASSETS_FILE / the current directory. Raises AssetsFileError if
    nothing is found or the file cannot be parsed.
    """
    assets_path = find_assets_file(path)
    if assets_path is None:
        where = path if path is not None else Path.cwd()
        raise AssetsFileError("No project.assets.json found; run a restore first", where)
    return read_assets_file(assets_path)


def resolve_target(
    lock_file: LockFile,
    framework: str | None = None,
    runtime_identifier: str | None = None,
) -> tuple[str, str | None]:
    """Fill in framework and runtime identifier from the environment and lock_file."""
    if framework is None:
        framework = default_framework(lock_file)
    if framework is None:
        choices = ", ".join(lock_file.frameworks) or "none"
        raise NudepsError(f"Choose a target framework (available: {choices})")
    if runtime_identifier is None:
        runtime_identifier = default_runtime_identifier()
    return framework, runtime_identifier


def build_graph_for(
    path: Path | None = None,
    *,
    framework: str | None = None,
    runtime_identifier: str | None = None,
) -> LibraryNode:
    """
    Load a project's assets file and build its dependency graph.

    Args:
        path: Assets file or project directory (None = environment / cwd).
        framework: Target framework, e.g. "net8.0". Defaults to NUDEPS_FRAMEWORK
            or the only framework in the file.
        runtime_identifier: Optional runtime identifier, e.g. "linux-x64".

    Returns:
        The project root node.
    """
    lock_file = load_assets(path)
    framework, runtime_identifier = resolve_target(lock_file, framework, runtime_identifier)
    return build_graph(lock_file, framework, runtime_identifier)


def iter_unique_nodes(root: LibraryNode) -> Iterator[LibraryNode]:
    """Yield every node reachable from root once, in first-visit pre-order."""
    seen: set[LibraryNode] = set()
    found: list[LibraryNode] = []

    def visit(path, node: LibraryNode) -> bool:
        if node in seen:
            return False
        seen.add(node)
        found.append(node)
        return True

    root.traverse(visit)
    return iter(found)


def find_node(root: LibraryNode, package_id: str) -> LibraryNode | None:
    """Look up a node by id (case-insensitive), or None."""
    wanted = package_id.lower()
    for node in iter_unique_nodes(root):
        if node.id.lower() == wanted:
            return node
    return None


def reference_paths(
    root: LibraryNode,
    package_id: str,
    *,
    limit: int | None = None,
) -> list[str] | None:
    """
    List the paths through which root reaches package_id.

    Stops after limit paths when given. Returns None if the package is not
    in the graph.
    """
    if limit is not None and limit < 0:
        raise NudepsError(f"limit must not be negative, got {limit}")
    node = find_node(root, package_id)
    if node is None:
        return None
    return list(islice(node.get_reference_paths(), limit))
