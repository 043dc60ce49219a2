"""Collector configuration — immutable value, YAML persistence, validation."""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from projectson.core.discover import normalize_formats
from projectson.errors import ConfigError
from projectson.model.entries import ContentExclusionRule

DEFAULT_CONFIG_FILE = "projectson_config.yaml"
DEFAULT_OUTPUT = "output.json"


@dataclass(frozen=True)
class CollectorConfig:
    """Immutable collector configuration.

    Edits produce a new value via :meth:`with_overrides`; a collector is built
    from exactly one configuration value.
    """

    root: str = ""
    include: tuple[str, ...] = ()
    formats: tuple[str, ...] = ()
    output: str = DEFAULT_OUTPUT
    exclude_patterns: tuple[str, ...] = ()
    content_exclusions: tuple[ContentExclusionRule, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "include", tuple(self.include))
        object.__setattr__(self, "formats", tuple(sorted(normalize_formats(self.formats))))
        object.__setattr__(self, "exclude_patterns", tuple(self.exclude_patterns))
        object.__setattr__(self, "content_exclusions", tuple(self.content_exclusions))

    @property
    def root_path(self) -> Path:
        """Absolute root; a relative ``root`` is taken from the working directory."""
        return Path(os.path.abspath(self.root)) if self.root else Path(self.root)

    @property
    def output_path(self) -> Path:
        return Path(self.output)

    def with_overrides(self, **changes: Any) -> "CollectorConfig":
        return dataclasses.replace(self, **changes)

    # ── serialisation ───────────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CollectorConfig":
        rules = []
        for raw in data.get("content_exclusions") or []:
            if not isinstance(raw, dict):
                raise ConfigError(f"content exclusion must be a mapping, got {raw!r}")
            rules.append(ContentExclusionRule.from_dict(raw))
        return cls(
            root=str(data.get("root") or ""),
            include=tuple(str(x) for x in data.get("include") or []),
            formats=tuple(str(x) for x in data.get("formats") or []),
            output=str(data.get("output") or DEFAULT_OUTPUT),
            exclude_patterns=tuple(str(x) for x in data.get("exclude_patterns") or []),
            content_exclusions=tuple(rules),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "root": self.root,
            "include": list(self.include),
            "formats": list(self.formats),
            "output": self.output,
        }
        if self.exclude_patterns:
            d["exclude_patterns"] = list(self.exclude_patterns)
        if self.content_exclusions:
            d["content_exclusions"] = [r.to_dict() for r in self.content_exclusions]
        return d


def default_config() -> CollectorConfig:
    return CollectorConfig()


def load_config(path: str | Path) -> CollectorConfig:
    """Load a YAML configuration file."""
    p = Path(path)
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"cannot read config file {p}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {p}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{p}: top-level YAML value must be a mapping")
    return CollectorConfig.from_dict(data)


def save_config(cfg: CollectorConfig, path: str | Path) -> None:
    """Write *cfg* as YAML, keeping the documented key order."""
    p = Path(path)
    text = yaml.safe_dump(cfg.to_dict(), sort_keys=False, allow_unicode=True)
    try:
        p.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot write config file {p}: {exc}") from exc


def validate_config(cfg: CollectorConfig, *, create_output_dir: bool = True) -> None:
    """Check that *cfg* can drive a run.

    With *create_output_dir* the output's parent directory is created when
    it is missing; read-only callers pass False.

    Raises
    ------
    ConfigError
        On the first problem found.
    """
    if not cfg.root:
        raise ConfigError("config error: 'root' directory not specified")
    if not cfg.root_path.exists():
        raise ConfigError(f"config error: 'root' directory does not exist: {cfg.root}")
    if not cfg.formats:
        raise ConfigError("config error: no file formats specified")
    if not cfg.output:
        raise ConfigError("config error: output path not specified")

    if not create_output_dir:
        return
    out_dir = cfg.output_path.parent
    if not out_dir.exists():
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigError(
                f"config error: could not create output directory: {out_dir}"
            ) from exc
