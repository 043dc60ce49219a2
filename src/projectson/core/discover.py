"""File discovery — resolve include directives into sorted file entries."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Iterable, Sequence

from projectson.core.matcher import PathMatcher
from projectson.errors import ScanError
from projectson.model.entries import FileEntry, ScanDirective

_logger = logging.getLogger(__name__)


def file_format(name: str) -> str:
    """Lowercased extension of *name* without the dot (``""`` if none)."""
    _, dot, ext = name.rpartition(".")
    return ext.lower() if dot else ""


def normalize_formats(formats: Iterable[str]) -> frozenset[str]:
    """Lowercase, strip dots and drop blanks from a format allow-list."""
    return frozenset(
        f.strip().lstrip(".").lower() for f in formats if f and f.strip().lstrip(".")
    )


class _DirectiveScan:
    """Collects the entries contributed by a single directive."""

    def __init__(
        self,
        root: Path,
        directive: ScanDirective,
        formats: frozenset[str],
        matcher: PathMatcher,
    ) -> None:
        self.root = root
        self.root_base = root.name
        self.directive = directive
        self.formats = formats
        self.matcher = matcher
        self.entries: dict[str, FileEntry] = {}

    def wanted(self, path: Path) -> bool:
        return file_format(path.name) in self.formats and not self.matcher.is_excluded(path)

    def record(self, path: Path, size: int) -> None:
        rel = self.matcher.relative(path)
        entry = FileEntry(
            display_path=f"{self.root_base}/{rel}",
            original_path=rel,
            source_path=path,
            mode=self.directive.mode,
            size_bytes=size,
            format=file_format(path.name),
        )
        self.entries[entry.display_path] = entry

    def _consider(self, entry: os.DirEntry[str]) -> None:
        path = Path(entry.path)
        if not self.wanted(path):
            return
        try:
            size = entry.stat().st_size
        except OSError as exc:
            _logger.warning("Could not stat file %s: %s", path, exc)
            return
        self.record(path, size)

    def scan_flat(self, directory: Path) -> None:
        with os.scandir(directory) as it:
            children = sorted(it, key=lambda e: e.name)
        for child in children:
            if not child.is_dir():
                self._consider(child)

    def walk(self, directory: Path) -> None:
        # Excluded directories are pruned, never descended into.
        if self.matcher.is_excluded(directory):
            return
        with os.scandir(directory) as it:
            children = sorted(it, key=lambda e: e.name)
        for child in children:
            if child.is_dir(follow_symlinks=False):
                self.walk(Path(child.path))
            else:
                self._consider(child)


def discover_files(
    root: Path,
    directives: Sequence[ScanDirective],
    formats: Iterable[str],
    exclude_patterns: Iterable[str] = (),
    *,
    matcher: PathMatcher | None = None,
) -> list[FileEntry]:
    """Find every file selected by *directives* under *root*.

    Parameters
    ----------
    root:
        Project root; a relative root is made absolute first.  Display
        paths are prefixed with its name.
    directives:
        Parsed include entries.  When two directives find the same file the
        later one wins.
    formats:
        Extension allow-list (case-insensitive).  Empty means nothing matches.
    exclude_patterns:
        Raw glob / ``/regex/`` patterns; ignored when *matcher* is given.
    matcher:
        A prebuilt matcher whose compiled patterns are reused.

    Returns
    -------
    Entries sorted by ``display_path``.

    Raises
    ------
    ScanError
        If *root* itself cannot be listed.
    """
    root = Path(os.path.abspath(root))
    if matcher is None:
        matcher = PathMatcher(root, exclude_patterns)
    allowed = normalize_formats(formats)

    try:
        with os.scandir(root):
            pass
    except OSError as exc:
        raise ScanError(f"cannot read root directory {root}: {exc}") from exc

    found: dict[str, FileEntry] = {}
    for directive in directives:
        # Absolute includes are joined under the root, never replace it.
        target = Path(os.path.normpath(root / directive.path.lstrip("/")))
        if target != root and root not in target.parents:
            _logger.warning("Include path outside root, skipping: %s", directive.path)
            continue
        try:
            st = target.stat()
        except FileNotFoundError:
            _logger.warning("Include path not found: %s", target)
            continue
        except OSError as exc:
            _logger.warning("Could not stat include path %s: %s", target, exc)
            continue

        scan = _DirectiveScan(root, directive, allowed, matcher)
        try:
            if stat.S_ISDIR(st.st_mode):
                if directive.flat_only:
                    scan.scan_flat(target)
                else:
                    scan.walk(target)
            elif scan.wanted(target):
                scan.record(target, st.st_size)
        except OSError as exc:
            # Drop the whole directive rather than return part of it.
            _logger.warning("Skipping include %r: %s", directive.path, exc)
            continue
        found.update(scan.entries)

    _logger.debug("Discovered %d file(s) under %s", len(found), root)
    return sorted(found.values(), key=lambda e: e.display_path)
