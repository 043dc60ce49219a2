"""Value objects produced by include parsing, discovery and a run."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from projectson.model import CollectionMode


@dataclass(frozen=True, slots=True)
class ScanDirective:
    """One parsed ``include`` entry."""

    path: str
    mode: CollectionMode = CollectionMode.BOTH
    flat_only: bool = False


@dataclass(frozen=True, slots=True)
class ContentExclusionRule:
    """A rule that strips text from matching files before collection.

    ``kind`` keeps the raw tag from configuration so that unknown kinds can
    be reported by the transformer instead of being rejected at load time.
    """

    kind: str
    file_pattern: str = "*"
    start: str = ""
    end: str = ""
    pattern: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ContentExclusionRule":
        return cls(
            kind=str(data.get("type", "") or "").strip().lower(),
            file_pattern=str(data.get("file_pattern", "") or "*"),
            start=str(data.get("start", "") or ""),
            end=str(data.get("end", "") or ""),
            pattern=str(data.get("pattern", "") or ""),
        )

    def to_dict(self) -> dict[str, str]:
        d = {"type": self.kind, "file_pattern": self.file_pattern}
        if self.start:
            d["start"] = self.start
        if self.end:
            d["end"] = self.end
        if self.pattern:
            d["pattern"] = self.pattern
        return d


@dataclass(frozen=True, slots=True)
class FileEntry:
    """A discovered file.  ``display_path`` is the dedup and sort key."""

    display_path: str
    original_path: str
    source_path: Path
    mode: CollectionMode
    size_bytes: int
    format: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.display_path,
            "original_path": self.original_path,
            "mode": self.mode.value,
            "size_bytes": self.size_bytes,
            "format": self.format,
        }


@dataclass(frozen=True, slots=True)
class RunStats:
    """Outcome of a successful collection run."""

    files_included: int
    output_bytes: int
    output_path: Path
    elapsed_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "files_included": self.files_included,
            "output_bytes": self.output_bytes,
            "output_path": self.output_path,
            "elapsed_seconds": self.elapsed_seconds,
        }
