"""Include parsing — turn raw ``include`` strings into scan directives.

Accepted forms::

    src                 recursive, path + content
    src:path            recursive, path only
    docs/*              direct children only
    docs/*:content      direct children only, content only
"""

from __future__ import annotations

import logging
from typing import Iterable

from projectson.model import CollectionMode
from projectson.model.entries import ScanDirective

_logger = logging.getLogger(__name__)

_FLAT_SUFFIX = "/*"


def _strip_flat_suffix(path: str) -> tuple[str, bool]:
    if path.endswith(_FLAT_SUFFIX):
        return path[: -len(_FLAT_SUFFIX)], True
    return path, False


def parse_include(entries: Iterable[str]) -> list[ScanDirective]:
    """Parse *entries* in order; blank entries are skipped.

    Order is preserved because later directives take precedence when two of
    them discover the same file.
    """
    directives: list[ScanDirective] = []
    for raw in entries:
        entry = raw.strip()
        if not entry:
            continue

        path, flat_only = _strip_flat_suffix(entry)
        mode = CollectionMode.BOTH
        if ":" in path:
            path, _, token = path.partition(":")
            path = path.strip()
            token = token.strip().lower()
            if token in (CollectionMode.PATH.value, CollectionMode.CONTENT.value):
                mode = CollectionMode(token)
            elif token not in ("", CollectionMode.BOTH.value):
                _logger.warning(
                    "Unknown include mode %r in %r, collecting path and content",
                    token,
                    entry,
                )
        if not flat_only:
            path, flat_only = _strip_flat_suffix(path)

        directives.append(ScanDirective(path=path, mode=mode, flat_only=flat_only))
    return directives
