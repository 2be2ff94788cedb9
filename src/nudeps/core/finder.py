"""Locate a project's assets file and read target defaults from the environment."""

from __future__ import annotations

import os
from pathlib import Path

from nudeps.core.assets import ASSETS_FILE_NAME, LockFile

# Environment configuration
ENV_ASSETS_FILE = "NUDEPS_ASSETS_FILE"
ENV_FRAMEWORK = "NUDEPS_FRAMEWORK"
ENV_RUNTIME = "NUDEPS_RUNTIME"
ENV_LOG_LEVEL = "NUDEPS_LOG_LEVEL"
# MSBuild property that moves obj/ elsewhere; honoured when exported
ENV_PROJECT_EXTENSIONS_PATH = "MSBuildProjectExtensionsPath"

DEFAULT_INTERMEDIATE_DIR = "obj"


def _env(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    return value or None


def _intermediate_dir(project_dir: Path) -> Path:
    extensions = _env(ENV_PROJECT_EXTENSIONS_PATH)
    if extensions is None:
        return project_dir / DEFAULT_INTERMEDIATE_DIR
    p = Path(extensions).expanduser()
    return p if p.is_absolute() else project_dir / p


def find_assets_file(project_path: Path | None = None) -> Path | None:
    """
    Find project.assets.json for a project.

    project_path may be the assets file itself, a project directory, or
    None. With None, NUDEPS_ASSETS_FILE is used when set, else the current
    directory. A directory is searched for the file directly and then in
    its obj/ directory (or MSBuildProjectExtensionsPath).

    Returns None if no assets file is found.
    """
    if project_path is None:
        from_env = _env(ENV_ASSETS_FILE)
        if from_env is not None:
            p = Path(from_env).expanduser()
            return p.resolve() if p.is_file() else None
        project_path = Path.cwd()

    p = Path(project_path).expanduser()
    if p.is_file():
        return p.resolve()
    if not p.is_dir():
        return None

    for candidate in (p / ASSETS_FILE_NAME, _intermediate_dir(p) / ASSETS_FILE_NAME):
        if candidate.is_file():
            return candidate.resolve()
    return None


def default_framework(lock_file: LockFile) -> str | None:
    """NUDEPS_FRAMEWORK if set, else the only framework of lock_file, else None."""
    from_env = _env(ENV_FRAMEWORK)
    if from_env is not None:
        return from_env
    frameworks = lock_file.frameworks
    if len(frameworks) == 1:
        return frameworks[0]
    return None


def default_runtime_identifier() -> str | None:
    """Runtime identifier from NUDEPS_RUNTIME, or None for the portable target."""
    return _env(ENV_RUNTIME)


def default_log_level() -> str:
    return _env(ENV_LOG_LEVEL) or "WARNING"
