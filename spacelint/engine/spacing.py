"""
Spacing policy evaluation for pairs of adjacent tokens.

A pair is "spaced" when the text between the two tokens holds a space or
a tab outside of block comments. The check is binary: one space and
several tabs count the same. Pairs that span a line break are never evaluated.
"""

import enum
import re
from typing import Optional

from .source import SourceCode
from .types import Token

_HORIZONTAL_SPACE = re.compile(r"[ \t]")
_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)


class SpacingViolation(enum.Enum):
    MISSING_SPACE = "missing"
    UNEXPECTED_SPACE = "unexpected"


def is_token_on_same_line(left: Token, right: Token) -> bool:
    """Whether ``left`` ends on the line where ``right`` starts."""
    return left.end_line == right.start_line


def is_spaced_pair(source: SourceCode, left: Token, right: Token) -> bool:
    """Whether a space or tab separates ``left`` and ``right``, ignoring comment bodies."""
    gap = _BLOCK_COMMENT.sub("", source.slice(left.end_byte, right.start_byte))
    return _HORIZONTAL_SPACE.search(gap) is not None


def evaluate(must_be_spaced: bool, is_spaced: bool) -> Optional[SpacingViolation]:
    if must_be_spaced and not is_spaced:
        return SpacingViolation.MISSING_SPACE
    if not must_be_spaced and is_spaced:
        return SpacingViolation.UNEXPECTED_SPACE
    return None


def check_pair(source: SourceCode, left: Token, right: Token,
               must_be_spaced: bool) -> Optional[SpacingViolation]:
    """Evaluate one side of a delimiter pair; pairs on different lines always pass."""
    if not is_token_on_same_line(left, right):
        return None
    return evaluate(must_be_spaced, is_spaced_pair(source, left, right))


def gap_is_whitespace(source: SourceCode, left: Token, right: Token) -> bool:
    """Whether the text between two tokens is whitespace only (no comments)."""
    return not source.slice(left.end_byte, right.start_byte).strip()
