"""nudeps: explore the resolved NuGet dependency graph of a .NET project (library, CLI, TUI)."""

from importlib.metadata import version, PackageNotFoundError

from nudeps.api import (
    build_graph_for,
    find_node,
    iter_unique_nodes,
    load_assets,
    reference_paths,
)
from nudeps.core.graph import LibraryNode, build_graph
from nudeps.errors import NudepsError

__all__ = [
    "build_graph",
    "build_graph_for",
    "find_node",
    "iter_unique_nodes",
    "load_assets",
    "reference_paths",
    "LibraryNode",
    "NudepsError",
    "__version__",
]

try:
    __version__ = version("nudeps")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed as package
