"""Shared fixtures: a small restored project with a diamond and a meta package."""

from __future__ import annotations

import json
from pathlib import Path

import pytest


def _lib(deps: dict[str, str] | None = None, assembly: str | None = None, **extra) -> dict:
    entry: dict = {"type": "package"}
    if deps:
        entry["dependencies"] = deps
    if assembly:
        entry["compile"] = {f"lib/net8.0/{assembly}": {}}
        entry["runtime"] = {f"lib/net8.0/{assembly}": {}}
    entry.update(extra)
    return entry


def make_assets_data() -> dict:
    """
    App (1.0.0) -> A, B, Meta
    A -> C, B -> C (diamond), Meta -> D, Meta has no assets.
    """
    portable = {
        "A/1.0.0": _lib({"C": "2.0.0"}, "A.dll"),
        "B/1.1.0": _lib({"C": "2.0.0"}, "B.dll"),
        "C/2.0.0": _lib(None, "C.dll"),
        "Meta/3.0.0": _lib({"D": "1.0.0"}),
        "D/1.0.0": _lib(None, "D.dll"),
    }
    linux = dict(portable)
    linux["C/2.0.0"] = _lib(
        None,
        None,
        runtimeTargets={"runtimes/linux-x64/native/libc.so": {"assetType": "native"}},
    )
    return {
        "version": 3,
        "targets": {
            "net8.0": portable,
            "net8.0/linux-x64": linux,
            "net6.0": {"D/1.0.0": _lib(None, "D.dll")},
        },
        "projectFileDependencyGroups": {
            "net8.0": ["A >= 1.0.0", "B >= 1.1.0", "Meta >= 3.0.0"],
        },
        "project": {
            "version": "1.0.0",
            "restore": {"projectName": "App"},
        },
    }


@pytest.fixture
def assets_data() -> dict:
    return make_assets_data()


@pytest.fixture
def project_dir(tmp_path: Path, assets_data: dict) -> Path:
    """A project directory with obj/project.assets.json."""
    obj = tmp_path / "App" / "obj"
    obj.mkdir(parents=True)
    (obj / "project.assets.json").write_text(json.dumps(assets_data), encoding="utf-8")
    return tmp_path / "App"


@pytest.fixture
def assets_file(project_dir: Path) -> Path:
    return project_dir / "obj" / "project.assets.json"
