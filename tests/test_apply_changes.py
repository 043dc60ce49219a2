"""Tests for the write-back utility."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from projectson.apply_changes import apply_modifications, parse_modifications, resolve_target
from projectson.errors import ModificationError


def payload(*items: dict) -> str:
    return json.dumps({"modified_files": list(items)})


def apply(root: Path, *items: dict):
    return apply_modifications(root, parse_modifications(payload(*items)))


class TestParse:
    @pytest.mark.parametrize("text", ["", "   ", "{not json", '{"modified_files": [{"content": "x"}]}'])
    def test_malformed(self, text: str) -> None:
        with pytest.raises(ModificationError):
            parse_modifications(text)

    def test_empty_list(self) -> None:
        assert parse_modifications('{"modified_files": []}').modified_files == []


class TestResolveTarget:
    def test_strips_root_basename(self, tmp_path: Path) -> None:
        root = tmp_path / "proj"
        assert resolve_target(root, "proj/src/a.go") == root / "src" / "a.go"

    def test_unprefixed_path_is_root_relative(self, tmp_path: Path, caplog) -> None:
        root = tmp_path / "proj"
        with caplog.at_level(logging.WARNING):
            assert resolve_target(root, "src/a.go") == root / "src" / "a.go"
        assert "does not start with" in caplog.text

    @pytest.mark.parametrize("path", ["proj/../evil.go", "/etc/passwd", "proj/a/../../x"])
    def test_escaping_paths_rejected(self, tmp_path: Path, path: str) -> None:
        with pytest.raises(ValueError):
            resolve_target(tmp_path / "proj", path)


class TestApply:
    def test_update_creates_parents(self, project: Path) -> None:
        result = apply(project, {"path": "proj/new/dir/f.go", "content": "x", "action": "update"})
        assert result.ok and result.applied == 1
        assert (project / "new" / "dir" / "f.go").read_text(encoding="utf-8") == "x"

    def test_update_overwrites(self, project: Path) -> None:
        apply(project, {"path": "proj/src/main.go", "content": "new", "action": "UPDATE"})
        assert (project / "src" / "main.go").read_text(encoding="utf-8") == "new"

    def test_create_refuses_existing(self, project: Path) -> None:
        result = apply(project, {"path": "proj/src/main.go", "content": "x", "action": "create"})
        assert result.applied == 0
        assert "already exists" in result.errors[0]

    def test_delete_and_missing_delete(self, project: Path) -> None:
        result = apply(
            project,
            {"path": "proj/src/main.go", "action": "delete"},
            {"path": "proj/src/ghost.go", "action": "delete"},
        )
        assert result.applied == 2
        assert not (project / "src" / "main.go").exists()

    def test_one_failure_does_not_stop_others(self, project: Path) -> None:
        result = apply(
            project,
            {"path": "proj/a.go", "content": "a", "action": "rename"},
            {"path": "proj/b.go", "content": "b", "action": "create"},
        )
        assert result.applied == 1
        assert len(result.errors) == 1
        assert "Unknown action" in result.errors[0]
        assert (project / "b.go").exists()
        assert "1 error(s)" in result.summary()
