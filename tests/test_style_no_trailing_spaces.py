"""
Tests for style.no_trailing_spaces rule.
"""

import pytest

pytest.importorskip("tree_sitter_javascript")

from spacelint.engine.autofix import apply_edits, collect_edits
from spacelint.engine.javascript_adapter import JavaScriptAdapter
from spacelint.engine.types import Edit, RuleContext
from spacelint.rules.style_no_trailing_spaces import (
    MESSAGE, StyleNoTrailingSpacesRule, scan_trailing_whitespace,
)


class TestScanTrailingWhitespace:
    """The line scanner on its own."""

    def test_single_line_run(self):
        runs = list(scan_trailing_whitespace("var a = 5;      \n"))
        assert len(runs) == 1
        assert runs[0].line == 1
        assert runs[0].column == 11
        assert (runs[0].start_byte, runs[0].end_byte) == (10, 16)

    def test_last_line_without_terminator(self):
        runs = list(scan_trailing_whitespace("var a = 5; \n b = 3; "))
        assert [(r.line, r.column) for r in runs] == [(1, 11), (2, 8)]

    def test_empty_lines_have_no_run(self):
        assert list(scan_trailing_whitespace("\n\n\n")) == []

    def test_whitespace_only_line_is_whole_run(self):
        runs = list(scan_trailing_whitespace("     \n    var c = 1;"))
        assert [(r.line, r.column, r.start_byte, r.end_byte) for r in runs] == [(1, 1, 0, 5)]

    def test_skip_blank_lines(self):
        assert list(scan_trailing_whitespace("     \n    var c = 1;", skip_blank_lines=True)) == []
        assert list(scan_trailing_whitespace("\t\n\tvar c = 2;", skip_blank_lines=True)) == []

    def test_skip_blank_lines_still_reports_code_lines(self):
        runs = list(scan_trailing_whitespace("var a = 'bar';  \n \n\t", skip_blank_lines=True))
        assert [(r.line, r.column) for r in runs] == [(1, 15)]

    def test_crlf_and_cr_terminators(self):
        runs = list(scan_trailing_whitespace("a; \r\nb;\t\rc;"))
        assert [(r.line, r.column) for r in runs] == [(1, 3), (2, 3)]
        # byte offsets skip over the two-byte \r\n
        assert runs[1].start_byte == 7

    def test_multibyte_content_before_run(self):
        text = "var s = 'héllo';  \n"
        runs = list(scan_trailing_whitespace(text))
        assert runs[0].column == 17
        data = text.encode("utf-8")
        assert data[runs[0].start_byte:runs[0].end_byte] == b"  "

    def test_long_interior_and_trailing_runs(self):
        text = " " * 50000 + "x" + "\t" * 50000 + "\n"
        runs = list(scan_trailing_whitespace(text))
        assert [(r.line, r.column, r.start_byte, r.end_byte) for r in runs] == [(1, 50002, 50001, 100001)]

    def test_leading_indentation_is_not_trailing(self):
        assert list(scan_trailing_whitespace("if (a) {\n    b();\n}\n")) == []


class TestStyleNoTrailingSpacesRule:
    """Test cases for the trailing spaces rule."""

    def setup_method(self):
        """Set up test fixtures."""
        self.rule = StyleNoTrailingSpacesRule()
        self.adapter = JavaScriptAdapter()

    def _run_rule(self, code: str, config=None):
        """Helper to run the rule on code and return findings."""
        ctx = RuleContext(
            file_path="test.js",
            text=code,
            tree=None,
            adapter=self.adapter,
            config=config or {},
        )
        return list(self.rule.visit(ctx))

    def _fix(self, code: str, config=None) -> str:
        return apply_edits(code, collect_edits(self._run_rule(code, config)))

    def test_trailing_spaces_trigger(self):
        findings = self._run_rule("var a = 5;      \n")
        assert len(findings) == 1
        finding = findings[0]
        assert finding.rule == "style.no_trailing_spaces"
        assert finding.message == MESSAGE
        assert finding.meta == {"node_type": "program"}
        assert finding.autofix == [Edit(10, 16, "")]

    def test_fix_strips_run_and_keeps_terminator(self):
        assert self._fix("var a = 5;      \n") == "var a = 5;\n"
        assert self._fix("var a = 5;\t\n  b = 3;") == "var a = 5;\n  b = 3;"

    def test_two_lines(self):
        code = "var a = 5; \n b = 3; "
        findings = self._run_rule(code)
        assert [(f.line, f.column) for f in findings] == [(1, 11), (2, 8)]
        assert self._fix(code) == "var a = 5;\n b = 3;"

    def test_blank_lines_reported_by_default(self):
        findings = self._run_rule("     \n    var c = 1;")
        assert [(f.line, f.column) for f in findings] == [(1, 1)]
        assert self._fix("     \n    var c = 1;") == "\n    var c = 1;"
        assert self._fix("\t\n\tvar c = 2;") == "\n\tvar c = 2;"

    @pytest.mark.parametrize("code", [
        "var a = 5;",
        "var a = 5,\n    b = 3;",
        "     ",
        "\t",
        "     \n    var c = 1;",
        "\t\n\tvar c = 2;",
        "\n   var c = 3;",
        "\n\tvar c = 4;",
    ])
    def test_valid_with_skip_blank_lines(self, code):
        assert self._run_rule(code, {"skipBlankLines": True}) == []

    def test_skip_blank_lines_fix(self):
        code = "var a = 'bar';  \n \n\t"
        findings = self._run_rule(code, {"skipBlankLines": True})
        assert [(f.line, f.column) for f in findings] == [(1, 15)]
        assert self._fix(code, {"skipBlankLines": True}) == "var a = 'bar';\n \n\t"

    def test_fix_is_idempotent(self):
        code = "function f() {  \n\treturn 1;\t \n}   \n"
        fixed = self._fix(code)
        assert fixed == "function f() {\n\treturn 1;\n}\n"
        assert self._run_rule(fixed) == []

    def test_crlf_preserved_by_fix(self):
        assert self._fix("a = 1;   \r\nb = 2;\r\n") == "a = 1;\r\nb = 2;\r\n"

    def test_other_languages_ignored(self):
        class PythonLike:
            language_id = "python"

        ctx = RuleContext(file_path="x.py", text="x = 1   \n", tree=None, adapter=PythonLike())
        assert list(self.rule.visit(ctx)) == []
