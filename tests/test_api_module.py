"""Tests for projectson.api — programmatic engine entrypoints."""

from __future__ import annotations

import json
from pathlib import Path

import jsonschema
import pytest

from projectson.api import (
    apply_modifications,
    collect_project,
    preview_content,
    preview_files,
    validate_instance,
)
from projectson.core.config import CollectorConfig
from projectson.errors import ConfigError
from projectson.model.entries import ContentExclusionRule


@pytest.fixture()
def config(project: Path, tmp_path: Path) -> CollectorConfig:
    return CollectorConfig(
        root=str(project),
        include=("src", "web/page.vue:content"),
        formats=("go", "vue"),
        output=str(tmp_path / "out" / "snapshot.json"),
        content_exclusions=(
            ContentExclusionRule("delimiters", "vue", "<style>", "</style>"),
        ),
    )


class TestPreview:
    def test_lists_entries(self, config: CollectorConfig) -> None:
        entries = preview_files(config)
        assert [e.display_path for e in entries] == [
            "proj/src/main.go",
            "proj/src/sub/a.go",
            "proj/src/util.go",
            "proj/web/page.vue",
        ]

    def test_invalid_config_raises(self, config: CollectorConfig) -> None:
        with pytest.raises(ConfigError):
            preview_files(config.with_overrides(formats=()))

    def test_preview_content_keeps_whitespace(self, config: CollectorConfig) -> None:
        original, stripped = preview_content(config, "web/page.vue")
        assert "<style>" in original
        assert stripped == "<template>A</template>\n\n"

    def test_preview_creates_no_output_directory(self, config: CollectorConfig) -> None:
        preview_files(config)
        preview_content(config, "web/page.vue")
        assert not Path(config.output).parent.exists()


class TestCollectProject:
    def test_creates_output_dir_and_writes(self, config: CollectorConfig) -> None:
        stats = collect_project(config)
        doc = json.loads(Path(config.output).read_text(encoding="utf-8"))
        assert stats.files_included == 4
        assert doc["project_files"][-1] == {"content": "<template>A</template>"}
        validate_instance(doc, "project_output.schema.json")

    def test_schema_rejects_foreign_keys(self) -> None:
        with pytest.raises(jsonschema.ValidationError):
            validate_instance({"project_files": [{"size": 1}]}, "project_output.schema.json")


class TestApplyModifications:
    def test_missing_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="does not exist"):
            apply_modifications(tmp_path / "nope", '{"modified_files": []}')

    def test_applies(self, project: Path) -> None:
        body = json.dumps(
            {"modified_files": [{"path": "proj/NOTES.md", "content": "hi", "action": "create"}]}
        )
        result = apply_modifications(project, body)
        assert result.ok
        assert (project / "NOTES.md").read_text(encoding="utf-8") == "hi"
