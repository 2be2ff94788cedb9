"""Read NuGet project.assets.json into resolved library records."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from nudeps.errors import AssetsFileError

logger = logging.getLogger(__name__)

ASSETS_FILE_NAME = "project.assets.json"
DEFAULT_PROJECT_VERSION = "1.0.0"


@dataclass
class TargetLibrary:
    """One library as resolved for a specific target."""

    name: str
    version: str
    type: str
    dependencies: list[str] = field(default_factory=list)
    compile_time_assemblies: list[str] = field(default_factory=list)
    runtime_assemblies: list[str] = field(default_factory=list)
    runtime_targets: list[str] = field(default_factory=list)

    @property
    def has_compile_time_assemblies(self) -> bool:
        return bool(self.compile_time_assemblies)

    @property
    def has_runtime_assemblies(self) -> bool:
        return bool(self.runtime_assemblies)

    @property
    def has_runtime_targets(self) -> bool:
        return bool(self.runtime_targets)


@dataclass
class LockFileTarget:
    """A resolved section for one framework, optionally narrowed to a runtime."""

    name: str
    libraries: list[TargetLibrary] = field(default_factory=list)

    @property
    def framework(self) -> str:
        return self.name.split("/", 1)[0]

    @property
    def runtime_identifier(self) -> str | None:
        _, sep, rid = self.name.partition("/")
        return rid if sep else None


@dataclass
class ProjectDependencyGroup:
    """The project's own direct dependencies for one framework."""

    framework_name: str
    dependencies: list[str] = field(default_factory=list)


@dataclass
class LockFile:
    """Pre-parsed contents of a project.assets.json file."""

    project_name: str
    project_version: str = DEFAULT_PROJECT_VERSION
    version: int = 3
    targets: list[LockFileTarget] = field(default_factory=list)
    project_dependency_groups: list[ProjectDependencyGroup] = field(default_factory=list)
    path: Path | None = None

    @property
    def frameworks(self) -> list[str]:
        """Distinct target frameworks, in file order."""
        return list(dict.fromkeys(t.framework for t in self.targets))

    def get_target(
        self, framework: str, runtime_identifier: str | None = None
    ) -> LockFileTarget | None:
        """Return the target section matching framework (and runtime), or None."""
        wanted = target_name(framework, runtime_identifier).lower()
        for target in self.targets:
            if target.name.lower() == wanted:
                return target
        return None

    def get_dependency_group(self, framework: str) -> ProjectDependencyGroup | None:
        """Return the direct dependency group for framework, or None."""
        wanted = framework.lower()
        for group in self.project_dependency_groups:
            if group.framework_name.lower() == wanted:
                return group
        return None


def target_name(framework: str, runtime_identifier: str | None = None) -> str:
    """Key of a target section: ``framework`` or ``framework/rid``."""
    return f"{framework}/{runtime_identifier}" if runtime_identifier else framework


def _split_library_key(key: str) -> tuple[str, str]:
    name, _, version = key.partition("/")
    return name, version


def _asset_paths(entry: dict[str, Any], key: str) -> list[str]:
    value = entry.get(key) or {}
    if not isinstance(value, dict):
        raise AssetsFileError(f"Expected an object for '{key}'")
    return list(value)


def _parse_library(key: str, entry: Any) -> TargetLibrary:
    if not isinstance(entry, dict):
        raise AssetsFileError(f"Library entry {key} is not an object")
    name, version = _split_library_key(key)
    if not name:
        raise AssetsFileError(f"Library entry has no name: {key!r}")
    deps = entry.get("dependencies") or {}
    if not isinstance(deps, dict):
        raise AssetsFileError(f"Dependencies of {key} are not an object")
    return TargetLibrary(
        name=name,
        version=version,
        type=entry.get("type", "package"),
        dependencies=list(deps),
        compile_time_assemblies=_asset_paths(entry, "compile"),
        runtime_assemblies=_asset_paths(entry, "runtime"),
        runtime_targets=_asset_paths(entry, "runtimeTargets"),
    )


def _project_name(project: dict[str, Any], path: Path | None) -> str:
    restore = project.get("restore") or {}
    name = restore.get("projectName") or project.get("name")
    if name:
        return name
    if path is not None:
        # <project dir>/obj/project.assets.json
        return path.resolve().parent.parent.name
    return ""


def parse_assets(data: Any, path: Path | None = None) -> LockFile:
    """
    Build a LockFile from the decoded JSON of a project.assets.json.

    Only the parts needed for graph construction are read: the ``targets``
    sections, ``projectFileDependencyGroups`` and the project identity.
    Raises AssetsFileError if the structure is not what NuGet writes.
    """
    if not isinstance(data, dict):
        raise AssetsFileError("Assets file must contain a JSON object", path)

    targets_data = data.get("targets", {})
    groups_data = data.get("projectFileDependencyGroups", {})
    project = data.get("project", {})
    for key, value in (
        ("targets", targets_data),
        ("projectFileDependencyGroups", groups_data),
        ("project", project),
    ):
        if not isinstance(value, dict):
            raise AssetsFileError(f"Expected an object for '{key}'", path)

    targets: list[LockFileTarget] = []
    for name, libraries in targets_data.items():
        if not isinstance(libraries, dict):
            raise AssetsFileError(f"Target {name} is not an object", path)
        targets.append(
            LockFileTarget(
                name=name,
                libraries=[_parse_library(key, entry) for key, entry in libraries.items()],
            )
        )

    groups = [
        ProjectDependencyGroup(framework_name=fw, dependencies=list(deps or []))
        for fw, deps in groups_data.items()
    ]

    return LockFile(
        project_name=_project_name(project, path),
        project_version=project.get("version") or DEFAULT_PROJECT_VERSION,
        version=data.get("version", 3),
        targets=targets,
        project_dependency_groups=groups,
        path=path,
    )


def read_assets_file(path: Path) -> LockFile:
    """Read and parse a project.assets.json file."""
    path = Path(path)
    if not path.exists() or not path.is_file():
        raise AssetsFileError("Assets file not found", path)
    logger.debug("Reading assets file %s", path)
    try:
        with path.open(encoding="utf-8-sig") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise AssetsFileError(f"Invalid JSON at line {e.lineno}", path) from e
    except UnicodeDecodeError as e:
        raise AssetsFileError("Assets file is not valid UTF-8", path) from e
    except OSError as e:
        raise AssetsFileError(f"Cannot read assets file: {e.strerror}", path) from e
    lock_file = parse_assets(data, path=path.resolve())
    logger.debug(
        "Loaded %s: %d target(s), project %s %s",
        path,
        len(lock_file.targets),
        lock_file.project_name,
        lock_file.project_version,
    )
    return lock_file
