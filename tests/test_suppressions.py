"""
Tests for suppression comments.
"""

from spacelint.engine.suppressions import SuppressionParser, filter_suppressed_findings
from spacelint.engine.types import Finding


def _finding(rule, start_byte):
    return Finding(rule=rule, message="m", file="a.js", start_byte=start_byte, end_byte=start_byte,
                   severity="warn")


class TestSuppressionParser:

    def test_line_comment(self):
        parser = SuppressionParser("var a = {b};\nvar c = {d}; // spacelint: ignore[style.object_curly_spacing]\n")
        assert parser.line_suppressions == {2: {"style.object_curly_spacing"}}
        assert parser.is_suppressed("style.object_curly_spacing", 20)
        assert not parser.is_suppressed("style.object_curly_spacing", 3)
        assert not parser.is_suppressed("style.no_trailing_spaces", 20)

    def test_block_comment_with_glob_and_list(self):
        parser = SuppressionParser("x(); /* spacelint: ignore[style.*, other.rule] */")
        assert parser.is_suppressed("style.no_trailing_spaces", 0)
        assert parser.is_suppressed("other.rule", 2)

    def test_crlf_lines(self):
        parser = SuppressionParser("a;\r\nb; // spacelint: ignore[style.x]\r\nc;")
        assert parser.is_suppressed("style.x", 4)
        assert not parser.is_suppressed("style.x", 0)
        assert not parser.is_suppressed("style.x", len("a;\r\nb; // spacelint: ignore[style.x]\r\n"))


class TestFilterSuppressedFindings:

    def test_filters_only_matching_line(self):
        text = "var a = { b }; // spacelint: ignore[style.object_curly_spacing]\nvar c = { d };\n"
        findings = [
            _finding("style.object_curly_spacing", 8),
            _finding("style.object_curly_spacing", 73),
        ]
        assert filter_suppressed_findings(findings, text) == [findings[1]]

    def test_no_comments_returns_input(self):
        findings = [_finding("style.x", 0)]
        assert filter_suppressed_findings(findings, "var a;") is findings
