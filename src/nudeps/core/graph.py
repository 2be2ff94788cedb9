"""Build and walk the resolved package dependency graph of a project."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, Sequence

from nudeps.core.assets import LockFile, TargetLibrary, target_name
from nudeps.errors import (
    DanglingDependencyError,
    DuplicateLibraryError,
    ProjectDependencyGroupMissingError,
    TargetNotFoundError,
)

logger = logging.getLogger(__name__)

PATH_SEPARATOR = " > "
PROJECT_TYPE = "project"

# visit(path, node) -> descend into node's dependencies?
Visitor = Callable[[Sequence["LibraryNode"], "LibraryNode"], bool]


@dataclass(eq=False, frozen=True)
class LibraryNode:
    """
    One resolved library in the graph, or the synthetic project root.

    Nodes compare and hash by identity: a graph holds exactly one node per
    (case-insensitive) id, so shared dependencies are the same object.
    Fields cannot be reassigned; edges are only added while the graph is built.
    """

    id: str
    version: str
    type: str
    library: TargetLibrary | None = field(default=None, repr=False)
    _dependencies: list[LibraryNode] = field(default_factory=list, init=False, repr=False)
    _dependers: list[LibraryNode] = field(default_factory=list, init=False, repr=False)

    @property
    def is_meta_package(self) -> bool:
        """True for a package with no compile assets, runtime assets or runtime targets."""
        lib = self.library
        return (
            lib is not None
            and not lib.has_compile_time_assemblies
            and not lib.has_runtime_assemblies
            and not lib.has_runtime_targets
        )

    @property
    def dependencies(self) -> tuple[LibraryNode, ...]:
        return tuple(self._dependencies)

    @property
    def dependers(self) -> tuple[LibraryNode, ...]:
        return tuple(self._dependers)

    def __str__(self) -> str:
        return self.id

    def to_dict(self) -> dict:
        """Serialize node to a JSON-friendly dict; edges are given as ids."""
        return {
            "id": self.id,
            "version": self.version,
            "type": self.type,
            "is_meta_package": self.is_meta_package,
            "dependencies": [d.id for d in self._dependencies],
            "dependers": [d.id for d in self._dependers],
        }

    def traverse(self, visit: Visitor) -> None:
        """
        Walk the graph below this node in pre-order, depth first.

        ``visit(path, node)`` is called once per occurrence of a node: a
        package reachable through two parents is visited twice, each time
        with its own path. ``path`` is a tuple of nodes from this node down
        to ``node`` inclusive. A falsy return skips ``node``'s dependencies.

        No visited set is kept, so a cyclic graph never finishes; prune in
        ``visit`` if the input is not trusted.
        """
        path: list[LibraryNode] = [self]
        if not visit(tuple(path), self):
            return
        # one dependency cursor per node on the path
        frames: list[Iterator[LibraryNode]] = [iter(self._dependencies)]

        while frames:
            child = next(frames[-1], None)
            if child is None:
                frames.pop()
                path.pop()
                continue
            path.append(child)
            if visit(tuple(path), child):
                frames.append(iter(child._dependencies))
            else:
                path.pop()

    def traverse_recursive(
        self, visit: Visitor, path: list[LibraryNode] | None = None
    ) -> None:
        """
        Recursive form of :meth:`traverse`, visiting in the same order.

        Recursion depth equals path depth, so very deep chains can raise
        RecursionError where :meth:`traverse` would not.
        """
        if path is None:
            path = []
        path.append(self)
        try:
            if visit(tuple(path), self):
                for dependency in self._dependencies:
                    dependency.traverse_recursive(visit, path)
        finally:
            path.pop()

    def get_reference_paths(self) -> Iterator[str]:
        """
        Yield every path from a root down to this node, e.g. ``"App > A > C"``.

        Walks breadth first up the ``dependers`` edges; a path is complete
        when it reaches a node nobody depends on. Paths are produced lazily.
        """
        pending: deque[tuple[str, LibraryNode]] = deque([(self.id, self)])
        while pending:
            path, node = pending.popleft()
            if not node._dependers:
                yield path
                continue
            for depender in node._dependers:
                pending.append((f"{depender.id}{PATH_SEPARATOR}{path}", depender))

    def _add_dependencies(
        self,
        libraries: dict[str, LibraryNode],
        dependency_ids: Iterable[str],
        target: str,
    ) -> None:
        for dependency_id in dependency_ids:
            node = libraries.get(dependency_id.lower())
            if node is None:
                raise DanglingDependencyError(dependency_id, self.id, target)
            self._dependencies.append(node)
            node._dependers.append(self)


def package_name_from_dependency(dependency: str) -> str:
    """Strip a version constraint: ``"Foo >= 1.0.0"`` -> ``"Foo"``."""
    return dependency.strip().split(" ", 1)[0]


def build_graph(
    lock_file: LockFile,
    target_framework: str,
    runtime_identifier: str | None = None,
) -> LibraryNode:
    """
    Build the dependency graph of the project in lock_file for one target.

    Returns the synthetic project root; every library of the target section
    is reachable from it. Raises a GraphBuildError subclass if the target or
    the project's dependency group is missing, a library id is repeated, or
    a declared dependency has no library. Nothing is returned on failure.
    """
    target_key = target_name(target_framework, runtime_identifier)
    target = lock_file.get_target(target_framework, runtime_identifier)
    if target is None:
        raise TargetNotFoundError(target_key)

    libraries: dict[str, LibraryNode] = {}
    for library in target.libraries:
        key = library.name.lower()
        if key in libraries:
            raise DuplicateLibraryError(library.name, target_key)
        libraries[key] = LibraryNode(
            id=library.name, version=library.version, type=library.type, library=library
        )

    for node in libraries.values():
        node._add_dependencies(libraries, node.library.dependencies, target_key)

    group = lock_file.get_dependency_group(target_framework)
    if group is None:
        raise ProjectDependencyGroupMissingError(target_framework)

    root = LibraryNode(
        id=lock_file.project_name, version=lock_file.project_version, type=PROJECT_TYPE
    )
    root._add_dependencies(
        libraries,
        (package_name_from_dependency(d) for d in group.dependencies),
        target_key,
    )
    logger.debug(
        "Built graph for %s (%s): %d libraries, %d direct dependencies",
        root.id,
        target_key,
        len(libraries),
        len(root._dependencies),
    )
    return root
