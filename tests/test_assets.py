"""Tests for nudeps.core.assets module."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from nudeps.core.assets import (
    LockFile,
    LockFileTarget,
    ProjectDependencyGroup,
    parse_assets,
    read_assets_file,
    target_name,
)
from nudeps.errors import AssetsFileError, NudepsError


class TestParseAssets:
    """Tests for parse_assets."""

    def test_project_identity(self, assets_data: dict) -> None:
        lock_file = parse_assets(assets_data)
        assert lock_file.project_name == "App"
        assert lock_file.project_version == "1.0.0"
        assert lock_file.version == 3

    def test_targets_in_file_order(self, assets_data: dict) -> None:
        lock_file = parse_assets(assets_data)
        assert [t.name for t in lock_file.targets] == ["net8.0", "net8.0/linux-x64", "net6.0"]

    def test_library_fields(self, assets_data: dict) -> None:
        target = parse_assets(assets_data).get_target("net8.0")
        a = target.libraries[0]
        assert a.name == "A"
        assert a.version == "1.0.0"
        assert a.type == "package"
        assert a.dependencies == ["C"]
        assert a.has_compile_time_assemblies
        assert a.has_runtime_assemblies
        assert not a.has_runtime_targets

    def test_library_without_assets(self, assets_data: dict) -> None:
        target = parse_assets(assets_data).get_target("net8.0")
        meta = next(lib for lib in target.libraries if lib.name == "Meta")
        assert meta.compile_time_assemblies == []
        assert meta.runtime_assemblies == []
        assert meta.runtime_targets == []

    def test_dependency_order_preserved(self) -> None:
        data = {
            "targets": {
                "net8.0": {
                    "X/1.0.0": {"type": "package", "dependencies": {"Z": "1.0", "A": "1.0", "M": "1.0"}}
                }
            },
            "project": {"restore": {"projectName": "Proj"}},
        }
        lib = parse_assets(data).targets[0].libraries[0]
        assert lib.dependencies == ["Z", "A", "M"]

    def test_project_reference_type(self) -> None:
        data = {
            "targets": {"net8.0": {"Lib/1.0.0": {"type": "project", "framework": ".NETCoreApp,Version=v8.0"}}},
            "project": {"restore": {"projectName": "Proj"}},
        }
        assert parse_assets(data).targets[0].libraries[0].type == "project"

    def test_dependency_groups(self, assets_data: dict) -> None:
        lock_file = parse_assets(assets_data)
        group = lock_file.get_dependency_group("net8.0")
        assert group is not None
        assert group.dependencies == ["A >= 1.0.0", "B >= 1.1.0", "Meta >= 3.0.0"]

    def test_default_project_version(self) -> None:
        lock_file = parse_assets({"project": {"restore": {"projectName": "Proj"}}})
        assert lock_file.project_version == "1.0.0"

    def test_project_name_fallback_to_name(self) -> None:
        lock_file = parse_assets({"project": {"name": "Named"}})
        assert lock_file.project_name == "Named"

    def test_project_name_fallback_to_directory(self, tmp_path: Path) -> None:
        path = tmp_path / "MyProj" / "obj" / "project.assets.json"
        lock_file = parse_assets({}, path=path)
        assert lock_file.project_name == "MyProj"

    def test_empty_document(self) -> None:
        lock_file = parse_assets({})
        assert lock_file.targets == []
        assert lock_file.project_dependency_groups == []

    @pytest.mark.parametrize(
        "data",
        [
            [],
            "text",
            {"targets": []},
            {"targets": {"net8.0": []}},
            {"targets": {"net8.0": {"A/1.0": "x"}}},
            {"targets": {"net8.0": {"A/1.0": {"dependencies": ["B"]}}}},
            {"targets": {"net8.0": {"A/1.0": {"compile": ["a.dll"]}}}},
            {"projectFileDependencyGroups": ["A"]},
        ],
    )
    def test_malformed(self, data) -> None:
        with pytest.raises(AssetsFileError):
            parse_assets(data)


class TestLockFile:
    """Tests for LockFile lookups."""

    def _lock_file(self) -> LockFile:
        return LockFile(
            project_name="P",
            targets=[
                LockFileTarget(name="net8.0"),
                LockFileTarget(name="net8.0/win-x64"),
                LockFileTarget(name="netstandard2.0"),
            ],
            project_dependency_groups=[ProjectDependencyGroup("net8.0", [])],
        )

    def test_get_target(self) -> None:
        assert self._lock_file().get_target("net8.0").name == "net8.0"

    def test_get_target_with_runtime(self) -> None:
        assert self._lock_file().get_target("net8.0", "win-x64").name == "net8.0/win-x64"

    def test_get_target_case_insensitive(self) -> None:
        assert self._lock_file().get_target("NET8.0", "WIN-X64").name == "net8.0/win-x64"

    def test_get_target_missing(self) -> None:
        lock_file = self._lock_file()
        assert lock_file.get_target("net6.0") is None
        assert lock_file.get_target("net8.0", "osx-arm64") is None

    def test_get_dependency_group(self) -> None:
        lock_file = self._lock_file()
        assert lock_file.get_dependency_group("Net8.0") is not None
        assert lock_file.get_dependency_group("netstandard2.0") is None

    def test_frameworks(self) -> None:
        assert self._lock_file().frameworks == ["net8.0", "netstandard2.0"]

    def test_target_parts(self) -> None:
        target = LockFileTarget(name="net8.0/linux-x64")
        assert target.framework == "net8.0"
        assert target.runtime_identifier == "linux-x64"
        assert LockFileTarget(name="net8.0").runtime_identifier is None

    def test_target_name(self) -> None:
        assert target_name("net8.0") == "net8.0"
        assert target_name("net8.0", None) == "net8.0"
        assert target_name("net8.0", "win-x64") == "net8.0/win-x64"


class TestReadAssetsFile:
    """Tests for read_assets_file."""

    def test_reads_file(self, assets_file: Path) -> None:
        lock_file = read_assets_file(assets_file)
        assert lock_file.project_name == "App"
        assert lock_file.path == assets_file.resolve()
        assert len(lock_file.targets) == 3

    def test_utf8_bom(self, tmp_path: Path, assets_data: dict) -> None:
        path = tmp_path / "project.assets.json"
        path.write_bytes(b"\xef\xbb\xbf" + json.dumps(assets_data).encode("utf-8"))
        assert read_assets_file(path).project_name == "App"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(AssetsFileError) as exc:
            read_assets_file(tmp_path / "nope.json")
        assert exc.value.path == tmp_path / "nope.json"

    def test_directory_is_not_a_file(self, tmp_path: Path) -> None:
        with pytest.raises(AssetsFileError):
            read_assets_file(tmp_path)

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "project.assets.json"
        path.write_text("{ not json")
        with pytest.raises(AssetsFileError) as exc:
            read_assets_file(path)
        assert "Invalid JSON" in str(exc.value)

    def test_invalid_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "project.assets.json"
        path.write_bytes(b'{"targets": {"\xff": {}}}')
        with pytest.raises(AssetsFileError) as exc:
            read_assets_file(path)
        assert "not valid UTF-8" in str(exc.value)
        assert isinstance(exc.value.__cause__, UnicodeDecodeError)

    def test_error_is_nudeps_error(self, tmp_path: Path) -> None:
        with pytest.raises(NudepsError):
            read_assets_file(tmp_path / "missing.json")
