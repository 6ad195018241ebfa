"""
Suppression system for spacelint rules.

This module parses suppression comments in JavaScript source to
selectively disable rule findings on a line:

    var a = {b: 1}; // spacelint: ignore[style.object_curly_spacing]
    var c = 1;      /* spacelint: ignore[style.*] */
"""

import fnmatch
import re
from typing import Dict, List, Set

from .source import split_lines

IGNORE_PATTERN = re.compile(r'(?://|/\*)\s*spacelint:\s*ignore\s*\[\s*([^\]]+)\s*\]', re.IGNORECASE)


class SuppressionParser:
    """Parser for spacelint suppression comments."""

    def __init__(self, text: str):
        self.text = text
        self.lines = split_lines(text)
        self._line_starts = [line.start_byte for line in self.lines]
        self.line_suppressions: Dict[int, Set[str]] = {}  # line_number -> {rule_patterns}

        for line in self.lines:
            patterns = self._extract_suppression_patterns(line.text)
            if patterns:
                self.line_suppressions[line.number] = patterns

    def _extract_suppression_patterns(self, line: str) -> Set[str]:
        """Extract suppression patterns from a line."""
        patterns = set()
        for match in IGNORE_PATTERN.finditer(line):
            for pattern in match.group(1).split(','):
                pattern = pattern.strip()
                if pattern:
                    patterns.add(pattern)
        return patterns

    def _byte_to_line(self, byte_offset: int) -> int:
        """Convert byte offset to 1-based line number."""
        line_num = 1
        for index, start in enumerate(self._line_starts):
            if start > byte_offset:
                break
            line_num = index + 1
        return line_num

    def is_suppressed(self, rule_id: str, start_byte: int) -> bool:
        """Check if a rule finding starting at start_byte should be suppressed."""
        patterns = self.line_suppressions.get(self._byte_to_line(start_byte))
        if not patterns:
            return False
        return any(rule_id == pattern or fnmatch.fnmatch(rule_id, pattern) for pattern in patterns)


def filter_suppressed_findings(findings: List, text: str) -> List:
    """Filter out suppressed findings from a list."""
    if not findings:
        return findings

    parser = SuppressionParser(text)
    if not parser.line_suppressions:
        return findings

    return [
        finding for finding in findings
        if not parser.is_suppressed(finding.rule, finding.start_byte)
    ]
