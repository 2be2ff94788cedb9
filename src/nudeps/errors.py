"""
Exception hierarchy for nudeps.

Everything raised on purpose inherits from NudepsError so the CLI and TUI
can report failures uniformly.
"""

from __future__ import annotations


class NudepsError(Exception):
    """Base exception for all nudeps errors."""


class AssetsFileError(NudepsError):
    """The assets file is missing, unreadable or malformed."""

    def __init__(self, message: str, path: object = None) -> None:
        self.path = path
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message)


class GraphBuildError(NudepsError):
    """Construction of a dependency graph failed; no graph was produced."""

    def __init__(self, message: str, target: str) -> None:
        self.target = target
        super().__init__(message)


class TargetNotFoundError(GraphBuildError):
    """No target section matches the requested framework/runtime."""

    def __init__(self, target: str) -> None:
        super().__init__(
            f"Missing target section {target} from assets file. "
            "Ensure you have restored this project previously.",
            target,
        )


class ProjectDependencyGroupMissingError(GraphBuildError):
    """No project dependency group matches the requested framework."""

    def __init__(self, framework: str) -> None:
        super().__init__(
            f"Missing projectFileDependencyGroups section for {framework} from assets file. "
            "Ensure you have restored this project previously.",
            framework,
        )


class DanglingDependencyError(GraphBuildError):
    """A declared dependency id has no library record in the target."""

    def __init__(self, dependency: str, depender: str, target: str) -> None:
        self.dependency = dependency
        self.depender = depender
        super().__init__(
            f"Invalid assets file. Could not locate dependency {dependency} of {depender}.",
            target,
        )


class DuplicateLibraryError(GraphBuildError):
    """Two library records in one target share the same id."""

    def __init__(self, library_id: str, target: str) -> None:
        self.library_id = library_id
        super().__init__(
            f"Invalid assets file. Library {library_id} appears more than once in {target}.",
            target,
        )
