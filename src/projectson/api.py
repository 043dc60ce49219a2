"""
projectson.api
==============

Programmatic entrypoints for using the collector as a backend engine.

Goals:
  - No argparse / CLI dependencies
  - One immutable configuration value per call
  - Stable, JSON-friendly outputs that match the bundled schema

Non-goals:
  - Owning configuration persistence — callers load/save configs
  - Owning presentation — callers render progress and results

Usage::

    from projectson.api import collect_project, preview_files

    cfg = CollectorConfig(root="/abs/project", include=("src",), formats=("py",))
    entries = preview_files(cfg)
    stats = collect_project(cfg, progress=lambda cur, total: None)
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Optional

from projectson.apply_changes import ApplyResult, parse_modifications
from projectson.apply_changes import apply_modifications as _apply_modifications
from projectson.contracts.load import validate_instance as _validate_instance
from projectson.core.config import CollectorConfig, validate_config
from projectson.core.discover import file_format
from projectson.core.runner import FileCollector, ProgressCallback
from projectson.model.entries import FileEntry, RunStats


def _collector(config: CollectorConfig, *, read_only: bool = False) -> FileCollector:
    validate_config(config, create_output_dir=not read_only)
    return FileCollector(config)


# ── preview ─────────────────────────────────────────────────────────


def preview_files(config: CollectorConfig) -> list[FileEntry]:
    """List the files a run would collect, sorted by display path.

    Raises
    ------
    ConfigError
        If *config* is not runnable.
    ScanError
        If the root cannot be read.
    """
    return _collector(config, read_only=True).preview_files()


def preview_content(config: CollectorConfig, original_path: str) -> tuple[str, str]:
    """Return ``(original, stripped)`` text for one root-relative file.

    ``stripped`` has the content exclusions applied but keeps its whitespace,
    which makes it suitable for side-by-side display.
    """
    collector = _collector(config, read_only=True)
    original = collector.get_file_content(original_path)
    ext = file_format(Path(original_path).name)
    return original, collector.apply_content_exclusions(original, ext)


# ── run ─────────────────────────────────────────────────────────────


def collect_project(
    config: CollectorConfig,
    *,
    progress: Optional[ProgressCallback] = None,
    cancel: Optional[threading.Event] = None,
) -> RunStats:
    """Run the full pipeline and write ``config.output``."""
    return _collector(config).run(progress, cancel=cancel)


# ── write-back ──────────────────────────────────────────────────────


def apply_modifications(root: str | Path, payload: str) -> ApplyResult:
    """Parse a ``modified_files`` JSON payload and apply it under *root*."""
    root_p = Path(root).resolve()
    if not root_p.is_dir():
        raise FileNotFoundError(f"apply_modifications: root does not exist: {root_p}")
    return _apply_modifications(root_p, parse_modifications(payload))


def validate_instance(instance: Any, schema_name: str) -> None:
    """Validate *instance* against a bundled schema (raises on failure)."""
    _validate_instance(instance, schema_name)
