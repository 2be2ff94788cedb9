"""Core library: assets file reading, discovery, dependency graph building."""

from nudeps.core.assets import (
    LockFile,
    LockFileTarget,
    ProjectDependencyGroup,
    TargetLibrary,
    parse_assets,
    read_assets_file,
)
from nudeps.core.finder import default_framework, find_assets_file
from nudeps.core.graph import LibraryNode, build_graph

__all__ = [
    "LockFile",
    "LockFileTarget",
    "ProjectDependencyGroup",
    "TargetLibrary",
    "parse_assets",
    "read_assets_file",
    "default_framework",
    "find_assets_file",
    "LibraryNode",
    "build_graph",
]
