"""
Diagnostic reporter used by rules to emit findings.

Each call to ``report`` appends exactly one Finding; callers report once
per real violation.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .types import Edit, Finding, RuleContext, Severity, Token

Location = Union[Token, Tuple[int, int], int]


class Reporter:
    """Collects findings for one rule over one file."""

    def __init__(self, rule_id: str, ctx: RuleContext, severity: Severity = "warn"):
        self.rule_id = rule_id
        self.ctx = ctx
        self.severity = severity
        self.findings: List[Finding] = []

    def report(self, location: Location, message: str,
               fix: Union[Edit, Sequence[Edit], None] = None,
               span: Optional[Tuple[int, int]] = None,
               meta: Optional[Dict[str, Any]] = None) -> None:
        """Append a finding.

        Args:
            location: A token (its start is used), a 1-based (line, column)
                pair, or a byte offset.
            message: Human-readable message.
            fix: Edit(s) that resolve the violation, if any.
            span: Byte range the finding covers; defaults to the token or
                an empty range at the location.
            meta: Extra data attached to the finding.
        """
        source = self.ctx.source_code
        if isinstance(location, Token):
            line, column = location.start_line, location.start_column
            default_span = (location.start_byte, location.end_byte)
        elif isinstance(location, tuple):
            line, column = location
            offset = source.offset(line, column)
            default_span = (offset, offset)
        else:
            line, column = source.position(location)
            default_span = (location, location)

        start_byte, end_byte = span or default_span

        if isinstance(fix, Edit):
            autofix = [fix]
        elif fix:
            autofix = list(fix)
        else:
            autofix = None

        self.findings.append(Finding(
            rule=self.rule_id,
            message=message,
            file=self.ctx.file_path,
            start_byte=start_byte,
            end_byte=end_byte,
            severity=self.severity,
            autofix=autofix,
            meta=meta,
            line=line,
            column=column,
        ))
