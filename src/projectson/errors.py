"""Exception hierarchy for the collection engine.

Only *fatal* conditions are raised.  Per-file and per-rule problems are
logged and skipped by the engine itself.
"""

from __future__ import annotations


class ProjectsonError(Exception):
    """Base class for all projectson errors."""


class ConfigError(ProjectsonError):
    """Configuration could not be loaded, saved or validated."""


class ScanError(ProjectsonError):
    """Discovery could not start (root unreadable)."""


class OutputError(ProjectsonError):
    """The output document could not be serialized or written."""


class CollectionCancelled(ProjectsonError):
    """A run was cancelled before all files were processed."""


class ModificationError(ProjectsonError):
    """A write-back payload is malformed."""
