"""Tests for content exclusions and whitespace normalization."""

from __future__ import annotations

import logging

import pytest

from projectson.core.transform import (
    ContentTransformer,
    apply_content_exclusions,
    collapse_whitespace,
    rule_applies,
)
from projectson.model.entries import ContentExclusionRule


def delim(start: str, end: str, file_pattern: str = "*") -> ContentExclusionRule:
    return ContentExclusionRule(kind="delimiters", file_pattern=file_pattern, start=start, end=end)


def regexp(pattern: str, file_pattern: str = "*") -> ContentExclusionRule:
    return ContentExclusionRule(kind="regexp", file_pattern=file_pattern, pattern=pattern)


class TestCollapseWhitespace:
    def test_collapses_runs_and_trims(self) -> None:
        assert collapse_whitespace("  a\n\n  b\t\tc \r\n") == "a b c"

    @pytest.mark.parametrize("text", ["", "  ", "x", " a  b\n", "a\tb\nc  d"])
    def test_idempotent(self, text: str) -> None:
        once = collapse_whitespace(text)
        assert collapse_whitespace(once) == once

    def test_applied_without_rules(self) -> None:
        assert ContentTransformer().transform("a\n  b\n", "go") == "a b"


class TestRuleApplies:
    def test_wildcard_matches_everything(self) -> None:
        assert rule_applies(delim("a", "b", "*"), "go")
        assert rule_applies(delim("a", "b", "*"), "")

    def test_bare_and_dotted_patterns(self) -> None:
        assert rule_applies(delim("a", "b", "vue"), "vue")
        assert rule_applies(delim("a", "b", "*.vue"), "vue")
        assert rule_applies(delim("a", "b", ".vue"), "vue")
        assert not rule_applies(delim("a", "b", "go"), "vue")


class TestDelimiters:
    def test_removes_span(self) -> None:
        got = apply_content_exclusions("A<style>B</style>C", "vue", [delim("<style>", "</style>")])
        assert got == "AC"

    def test_every_span_lazy_and_across_lines(self) -> None:
        text = "x<!--a\nb-->y<!--c-->z"
        assert apply_content_exclusions(text, "html", [delim("<!--", "-->")]) == "xyz"

    def test_case_sensitive(self) -> None:
        text = "A<STYLE>B</STYLE>C"
        assert apply_content_exclusions(text, "vue", [delim("<style>", "</style>")]) == text

    def test_delimiters_are_literal(self) -> None:
        text = "keep (.*) drop [.*] keep"
        got = apply_content_exclusions(text, "txt", [delim("[.", "*]")])
        assert got == "keep (.*) drop keep"

    def test_rule_for_other_format_skipped(self) -> None:
        text = "A<style>B</style>C"
        assert apply_content_exclusions(text, "go", [delim("<style>", "</style>", "vue")]) == text


class TestRegexp:
    def test_dot_matches_newline_by_default(self) -> None:
        text = "a /* one\n two */ b"
        assert apply_content_exclusions(text, "go", [regexp(r"/\*.*?\*/")]) == "a b"

    def test_own_flags_disable_default(self) -> None:
        text = "keep TODO this\nA\nB"
        rules = [regexp("(?i)todo"), regexp("(?i)A.B")]
        assert apply_content_exclusions(text, "go", rules) == "keep this A B"

    def test_invalid_regex_skipped_others_apply(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            got = apply_content_exclusions("abc", "go", [regexp("("), regexp("b")])
        assert got == "ac"
        assert "Invalid content exclusion regex" in caplog.text

    def test_anchor_disables_default(self) -> None:
        text = "x\na\nb"
        assert apply_content_exclusions(text, "go", [regexp(r"a.b\Z")]) == "x a b"
        assert apply_content_exclusions(text, "go", [regexp(r"a.b")]) == "x"


class TestRuleSet:
    def test_unknown_kind_ignored_with_warning(self, caplog) -> None:
        rule = ContentExclusionRule(kind="magic", pattern="a")
        with caplog.at_level(logging.WARNING):
            t = ContentTransformer([rule])
        assert "Unknown content exclusion type" in caplog.text
        assert t.transform("a  a", "go") == "a a"

    def test_rules_run_in_declared_order(self) -> None:
        text = "<a<b>>c"
        forward = [regexp("<b>"), delim("<a", ">")]
        backward = [delim("<a", ">"), regexp("<b>")]
        assert apply_content_exclusions(text, "x", forward) == "c"
        assert apply_content_exclusions(text, "x", backward) == ">c"

    def test_apply_keeps_whitespace(self) -> None:
        t = ContentTransformer([delim("<s>", "</s>")])
        assert t.apply("a\n<s>x</s>\n b", "html") == "a\n\n b"
