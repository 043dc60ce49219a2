"""Enums shared across the discovery and processing layers."""

from __future__ import annotations

from enum import Enum


class CollectionMode(str, Enum):
    """What a collected file contributes to the output document."""

    PATH = "path"
    CONTENT = "content"
    BOTH = "both"

    @property
    def wants_path(self) -> bool:
        return self in (CollectionMode.PATH, CollectionMode.BOTH)

    @property
    def wants_content(self) -> bool:
        return self in (CollectionMode.CONTENT, CollectionMode.BOTH)


class RuleKind(str, Enum):
    """Closed set of content-exclusion rule kinds."""

    DELIMITERS = "delimiters"
    REGEXP = "regexp"


class ModificationAction(str, Enum):
    """Write-back actions accepted in a ``modified_files`` payload."""

    UPDATE = "update"
    CREATE = "create"
    DELETE = "delete"
