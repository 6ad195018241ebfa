"""
Token and line access over a parsed source buffer.

``SourceCode`` flattens a Tree-sitter tree into the ordered token stream
that spacing rules navigate (first/last token of a node, token before/after
a token) and keeps a line table so byte offsets map to 1-based
line/column positions. Comments are not tokens.
"""

import re
from bisect import bisect_left, bisect_right
from typing import Any, List, NamedTuple, Optional, Tuple

from .types import Token

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_LINE_BREAK_BYTES = re.compile(rb"\r\n|\r|\n")

COMMENT_NODE_TYPES = frozenset({"comment", "html_comment"})

# Nodes whose children are not meaningful tokens on their own.
ATOMIC_NODE_TYPES = frozenset({"string", "regex", "jsx_text"})


class Line(NamedTuple):
    """A physical line without its terminator."""
    number: int
    text: str
    start_byte: int
    terminator: str


def split_lines(text: str) -> List[Line]:
    """Split text into physical lines on ``\\r\\n``, ``\\r`` and ``\\n``.

    The last line is always present, even when it is empty because the
    buffer ends with a line terminator.
    """
    lines = []
    pos = 0
    byte_pos = 0
    number = 1
    while True:
        match = _LINE_BREAK.search(text, pos)
        if match is None:
            lines.append(Line(number, text[pos:], byte_pos, ""))
            return lines
        content = text[pos:match.start()]
        terminator = match.group()
        lines.append(Line(number, content, byte_pos, terminator))
        byte_pos += len(content.encode("utf-8")) + len(terminator)
        pos = match.end()
        number += 1


def _is_atomic(node: Any) -> bool:
    if node.type in ATOMIC_NODE_TYPES:
        return True
    if node.type == "template_string":
        return not any(child.type == "template_substitution" for child in node.children)
    return False


class SourceCode:
    """Read-only view of one buffer: raw text, lines and tokens."""

    def __init__(self, text: str, tree: Any = None):
        if isinstance(text, bytes):
            text = text.decode("utf-8", errors="replace")
        self.text = text
        self.data = text.encode("utf-8")
        self.lines = [line.text for line in split_lines(text)]
        self._line_starts = [0] + [m.end() for m in _LINE_BREAK_BYTES.finditer(self.data)]
        self.tokens: List[Token] = self._collect_tokens(tree) if tree is not None else []
        self._starts = [token.start_byte for token in self.tokens]
        self._ends = [token.end_byte for token in self.tokens]

    # === Positions ===

    def position(self, byte_offset: int) -> Tuple[int, int]:
        """Convert a byte offset to a 1-based (line, column) pair."""
        byte_offset = max(0, min(byte_offset, len(self.data)))
        index = bisect_right(self._line_starts, byte_offset) - 1
        line_start = self._line_starts[index]
        column = len(self.data[line_start:byte_offset].decode("utf-8", errors="ignore")) + 1
        return index + 1, column

    def offset(self, line: int, column: int) -> int:
        """Convert a 1-based (line, column) pair to a byte offset."""
        if line < 1:
            return 0
        if line > len(self._line_starts):
            return len(self.data)
        line_text = self.lines[line - 1]
        prefix = line_text[:max(0, column - 1)]
        return self._line_starts[line - 1] + len(prefix.encode("utf-8"))

    def get_line(self, number: int) -> str:
        """Return the text of a 1-based line number, without its terminator."""
        return self.lines[number - 1]

    def slice(self, start_byte: int, end_byte: int) -> str:
        return self.data[start_byte:end_byte].decode("utf-8", errors="replace")

    # === Tokens ===

    def _collect_tokens(self, tree: Any) -> List[Token]:
        root = getattr(tree, "root_node", tree)
        tokens = []
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type in COMMENT_NODE_TYPES:
                continue
            if node.child_count and not _is_atomic(node):
                stack.extend(reversed(node.children))
                continue
            if node.end_byte <= node.start_byte:
                # zero-width nodes are inserted by error recovery
                continue
            tokens.append(self._make_token(node))
        return tokens

    def _make_token(self, node: Any) -> Token:
        start_line, start_column = self.position(node.start_byte)
        end_line, end_column = self.position(node.end_byte)
        return Token(
            type=node.type,
            text=self.slice(node.start_byte, node.end_byte),
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            start_line=start_line,
            start_column=start_column,
            end_line=end_line,
            end_column=end_column,
        )

    def get_first_token(self, node: Any) -> Optional[Token]:
        """First token inside a node (or the token itself)."""
        index = bisect_left(self._starts, node.start_byte)
        if index < len(self.tokens) and self.tokens[index].end_byte <= node.end_byte:
            return self.tokens[index]
        return None

    def get_last_token(self, node: Any) -> Optional[Token]:
        """Last token inside a node (or the token itself)."""
        index = bisect_right(self._ends, node.end_byte) - 1
        if index >= 0 and self.tokens[index].start_byte >= node.start_byte:
            return self.tokens[index]
        return None

    def get_token_before(self, node: Any) -> Optional[Token]:
        """Token that ends at or before the start of a node or token."""
        index = bisect_right(self._ends, node.start_byte) - 1
        return self.tokens[index] if index >= 0 else None

    def get_token_after(self, node: Any) -> Optional[Token]:
        """Token that starts at or after the end of a node or token."""
        index = bisect_left(self._starts, node.end_byte)
        return self.tokens[index] if index < len(self.tokens) else None
