"""Content exclusions and whitespace normalization.

Rules run in declared order; each matching rule rewrites the output of the
previous one.  Whatever survives is collapsed to a single line.
"""

from __future__ import annotations

import logging
import re
from fnmatch import fnmatchcase
from typing import Iterable

from projectson.model import RuleKind
from projectson.model.entries import ContentExclusionRule

_logger = logging.getLogger(__name__)

ALL_FORMATS = "*"

_WHITESPACE_RE = re.compile(r"\s+")

# Leading inline flag group such as ``(?i)`` or ``(?ms)``.
_INLINE_FLAGS_RE = re.compile(r"^\(\?[aiLmsux]+\)")
_ANCHORS = ("\\A", "\\Z")


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run to one space and trim the ends."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def rule_applies(rule: ContentExclusionRule, file_ext: str) -> bool:
    """True when *rule* targets *file_ext* (bare ``vue`` or dotted ``.vue``)."""
    if rule.file_pattern == ALL_FORMATS:
        return True
    return fnmatchcase(file_ext, rule.file_pattern) or fnmatchcase(
        "." + file_ext, rule.file_pattern
    )


def _carries_own_flags(pattern: str) -> bool:
    return bool(_INLINE_FLAGS_RE.match(pattern)) or any(a in pattern for a in _ANCHORS)


def compile_rule(rule: ContentExclusionRule) -> re.Pattern[str] | None:
    """Compile *rule* to the regex whose matches get removed.

    Returns None (after logging) for unknown kinds, incomplete rules and
    invalid expressions.
    """
    try:
        kind = RuleKind(rule.kind)
    except ValueError:
        _logger.warning("Unknown content exclusion type %r, rule ignored", rule.kind)
        return None

    if kind is RuleKind.DELIMITERS:
        if not rule.start or not rule.end:
            _logger.debug("Delimiter rule for %r lacks start/end, ignored", rule.file_pattern)
            return None
        return re.compile(re.escape(rule.start) + ".*?" + re.escape(rule.end), re.DOTALL)

    if kind is RuleKind.REGEXP:
        if not rule.pattern:
            _logger.debug("Regexp rule for %r has no pattern, ignored", rule.file_pattern)
            return None
        flags = 0 if _carries_own_flags(rule.pattern) else re.DOTALL
        try:
            return re.compile(rule.pattern, flags)
        except re.error as exc:
            _logger.warning(
                "Invalid content exclusion regex %r: %s", rule.pattern, exc
            )
            return None

    raise AssertionError(f"unhandled rule kind: {kind}")


class ContentTransformer:
    """Applies a fixed rule set to file contents.

    Rules are compiled once at construction and reused for every file.
    """

    def __init__(self, rules: Iterable[ContentExclusionRule] = ()) -> None:
        self.rules: tuple[ContentExclusionRule, ...] = tuple(rules)
        self._compiled: list[tuple[ContentExclusionRule, re.Pattern[str]]] = []
        for rule in self.rules:
            regex = compile_rule(rule)
            if regex is not None:
                self._compiled.append((rule, regex))

    def apply(self, content: str, file_ext: str) -> str:
        """Strip every matching rule's spans from *content*, in rule order."""
        for rule, regex in self._compiled:
            if rule_applies(rule, file_ext):
                content = regex.sub("", content)
        return content

    def transform(self, content: str, file_ext: str) -> str:
        """Apply the rules, then collapse whitespace."""
        return collapse_whitespace(self.apply(content, file_ext))


def apply_content_exclusions(
    content: str,
    file_ext: str,
    rules: Iterable[ContentExclusionRule],
) -> str:
    """One-shot helper: build a transformer for *rules* and transform *content*."""
    return ContentTransformer(rules).transform(content, file_ext)
