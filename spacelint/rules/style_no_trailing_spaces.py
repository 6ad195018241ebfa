"""
Style Rule: No Trailing Spaces

Detects runs of spaces and tabs at the end of lines. With
``skipBlankLines`` enabled, lines made only of whitespace are left alone.
"""

from typing import Iterator, NamedTuple

from spacelint.engine.options import NoTrailingSpacesConfig
from spacelint.engine.reporter import Reporter
from spacelint.engine.source import split_lines
from spacelint.engine.types import Edit, Finding, Requires, RuleContext, RuleMeta

MESSAGE = "Trailing spaces not allowed."


class TrailingRun(NamedTuple):
    """A trailing whitespace run; line and column are 1-based."""
    line: int
    column: int
    start_byte: int
    end_byte: int


def scan_trailing_whitespace(text: str, skip_blank_lines: bool = False) -> Iterator[TrailingRun]:
    """Yield the trailing space/tab run of every line that has one."""
    for line in split_lines(text):
        stripped = line.text.rstrip(" \t")
        if len(stripped) == len(line.text):
            continue
        if skip_blank_lines and not stripped:
            continue

        start_byte = line.start_byte + len(stripped.encode('utf-8'))
        end_byte = line.start_byte + len(line.text.encode('utf-8'))
        yield TrailingRun(line.number, len(stripped) + 1, start_byte, end_byte)


class StyleNoTrailingSpacesRule:
    """Rule to detect trailing whitespace."""

    meta = RuleMeta(
        id="style.no_trailing_spaces",
        category="style",
        tier=0,
        priority="P3",
        autofix_safety="safe",
        description="Disallow trailing whitespace at the end of lines",
        langs=["javascript"],
    )

    requires = Requires(raw_text=True, syntax=False)

    config_model = NoTrailingSpacesConfig

    def visit(self, ctx: RuleContext) -> Iterator[Finding]:
        if ctx.language not in self.meta.langs:
            return

        config = NoTrailingSpacesConfig.model_validate(ctx.config or {})
        reporter = Reporter(self.meta.id, ctx, self.meta.default_severity)

        for run in scan_trailing_whitespace(ctx.text, config.skip_blank_lines):
            reporter.report(
                (run.line, run.column),
                MESSAGE,
                Edit(run.start_byte, run.end_byte, ""),
                span=(run.start_byte, run.end_byte),
                meta={"node_type": "program"},
            )

        yield from reporter.findings


rule = StyleNoTrailingSpacesRule()
RULES = [rule]
