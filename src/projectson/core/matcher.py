"""Path exclusion matching.

Two pattern flavours are supported:

* ``/regex/`` — a regular expression, searched in the base name, the
  root-relative path and the full path.
* anything else — a glob.  Always tried against the base name; tried against
  the root-relative path only when the glob itself contains a ``/``.

Globs follow shell semantics per path segment: ``*`` never crosses a
separator, so ``src/*.js`` matches ``src/app.js`` but not
``src/lib/app.js``.
"""

from __future__ import annotations

import logging
import os
import re
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable

_logger = logging.getLogger(__name__)


def is_regex_pattern(pattern: str) -> bool:
    """Return True for ``/.../`` delimited patterns."""
    return len(pattern) >= 2 and pattern.startswith("/") and pattern.endswith("/")


def glob_match(pattern: str, name: str) -> bool:
    """Match *name* against *pattern* segment by segment, case-sensitively."""
    pattern_parts = pattern.split("/")
    name_parts = name.split("/")
    if len(pattern_parts) != len(name_parts):
        return False
    return all(fnmatchcase(n, p) for p, n in zip(pattern_parts, name_parts))


class PathMatcher:
    """Decides whether a path under *root* is excluded.

    Regex patterns are compiled once per matcher; an invalid one is reported
    and ignored for the lifetime of the matcher.
    """

    def __init__(self, root: Path, patterns: Iterable[str] = ()) -> None:
        self.root = Path(os.path.abspath(root))
        self.patterns: tuple[str, ...] = tuple(
            p.replace(os.sep, "/") if os.sep != "/" else p
            for p in patterns
            if p
        )
        self._regexps: dict[str, re.Pattern[str]] = {}
        for pattern in self.patterns:
            if not is_regex_pattern(pattern):
                continue
            try:
                self._regexps[pattern] = re.compile(pattern[1:-1])
            except re.error as exc:
                _logger.warning("Invalid regex exclude pattern %r: %s", pattern, exc)

    def relative(self, path: Path) -> str:
        """Root-relative POSIX path, or the base name when outside *root*."""
        try:
            return Path(os.path.relpath(path, self.root)).as_posix()
        except ValueError:
            return path.name

    def is_excluded(self, path: Path) -> bool:
        base = path.name
        rel = self.relative(path)
        full = str(path)

        for pattern in self.patterns:
            if is_regex_pattern(pattern):
                regex = self._regexps.get(pattern)
                if regex is None:
                    continue
                if regex.search(base) or regex.search(rel) or regex.search(full):
                    return True
                continue

            if glob_match(pattern, base):
                return True
            if "/" in pattern and glob_match(pattern, rel):
                return True
        return False
