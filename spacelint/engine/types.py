"""
Core types for the spacelint Tree-sitter engine.

This module provides shared dataclasses and types used across the engine,
adapters, and rules.
"""

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Literal, Optional, Protocol, Tuple
from abc import ABC, abstractmethod


# Type aliases for clarity
Severity = Literal["info", "warn", "error"]
Priority = Literal["P0", "P1", "P2", "P3"]
Tier = Literal[0, 1]
FileRange = Tuple[int, int, int, int]  # (start_line, start_col, end_line, end_col) 1-based
NodeRange = Tuple[int, int]  # (start_byte, end_byte) 0-based


@dataclass(frozen=True)
class Edit:
    """A suggested edit to fix an issue."""
    start_byte: int
    end_byte: int
    replacement: str


@dataclass(frozen=True)
class Finding:
    """A finding represents an issue detected by a rule.

    ``line`` and ``column`` are 1-based and point at the reported location,
    which is not always ``start_byte`` (brace findings report the position
    just after an opening brace).
    """
    rule: str
    message: str
    file: str
    start_byte: int
    end_byte: int
    severity: Severity
    autofix: Optional[List[Edit]] = None
    meta: Optional[Dict[str, Any]] = None
    line: Optional[int] = None
    column: Optional[int] = None

    def _replace(self, **kwargs):
        """Provide NamedTuple-like _replace method for compatibility."""
        return replace(self, **kwargs)


@dataclass(frozen=True)
class Token:
    """A leaf of the syntax tree as seen by spacing rules.

    Lines and columns are 1-based; columns count characters.
    """
    type: str
    text: str
    start_byte: int
    end_byte: int
    start_line: int
    start_column: int
    end_line: int
    end_column: int


class ConstructKind(enum.Enum):
    """Brace-delimited constructs checked by the curly spacing rule."""
    OBJECT_PATTERN = "ObjectPattern"
    OBJECT_EXPRESSION = "ObjectExpression"
    IMPORT_DECLARATION = "ImportDeclaration"
    EXPORT_NAMED_DECLARATION = "ExportNamedDeclaration"


class ElementKind(enum.Enum):
    PROPERTY = "property"
    DEFAULT = "default"
    NAMESPACE = "namespace"
    NAMED = "named"


@dataclass(frozen=True)
class ConstructElement:
    kind: ElementKind
    node: Any


@dataclass(frozen=True)
class BraceConstruct:
    """A syntax node with its ordered inner elements (properties or specifiers)."""
    kind: ConstructKind
    node: Any
    elements: Tuple[ConstructElement, ...] = ()


@dataclass(frozen=True)
class RuleMeta:
    """Metadata about a rule.

    Attributes:
        id: Unique rule identifier (e.g., "style.no_trailing_spaces")
        category: Rule category for grouping
        tier: Analysis tier (0=raw text, 1=syntax)
        priority: P0-P3 priority level
        autofix_safety: Whether autofix is safe/caution/suggest-only
        description: Human-readable description
        langs: List of supported languages
    """
    id: str
    category: str
    tier: Tier
    priority: Priority
    autofix_safety: Literal["safe", "caution", "suggest-only"]
    description: str = ""
    langs: List[str] = None
    default_severity: Severity = "warn"

    def __post_init__(self):
        if self.langs is None:
            object.__setattr__(self, 'langs', [])


@dataclass(frozen=True)
class Requires:
    """Represents requirements that a rule needs to run."""
    raw_text: bool = False
    syntax: bool = True


@dataclass
class RuleContext:
    """Context passed to rules during execution."""
    file_path: str
    text: str
    tree: Any
    adapter: 'LanguageAdapter'  # Forward reference
    config: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self._source_code = None

    @property
    def source_code(self):
        """Token and line accessor for this file, built on first use."""
        if self._source_code is None:
            from .source import SourceCode
            self._source_code = SourceCode(self.text, self.tree)
        return self._source_code

    @property
    def language(self):
        return self.adapter.language_id if self.adapter else None

    def with_config(self, config: Dict[str, Any]) -> 'RuleContext':
        """Return a context sharing text, tree and tokens but with another rule config."""
        ctx = RuleContext(
            file_path=self.file_path,
            text=self.text,
            tree=self.tree,
            adapter=self.adapter,
            config=config,
        )
        ctx._source_code = self._source_code
        return ctx


class Rule(Protocol):
    """Protocol for all rules in the engine.

    Rules analyze code and return findings. They should be stateless and thread-safe.
    """
    meta: RuleMeta
    requires: Requires

    def visit(self, ctx: RuleContext) -> Iterable[Finding]:
        """Visit a file and return findings.

        Args:
            ctx: Rule context containing file path, text, tree, adapter, and config

        Returns:
            Iterable of findings for this file
        """
        ...


class LanguageAdapter(ABC):
    """Abstract base class for language adapters."""

    @property
    @abstractmethod
    def language_id(self) -> str:
        """Return the language identifier (e.g., 'javascript')."""
        pass

    @property
    @abstractmethod
    def file_extensions(self) -> Tuple[str, ...]:
        """Return supported file extensions (e.g., ('.js', '.mjs'))."""
        pass

    @abstractmethod
    def parse(self, text: str) -> Any:
        """Parse text and return a Tree-sitter tree."""
        pass

    @abstractmethod
    def list_files(self, paths: List[str]) -> List[str]:
        """List all files matching this adapter's extensions in the given paths."""
        pass

    @abstractmethod
    def node_text(self, text: str, start_byte: int, end_byte: int) -> str:
        """Extract text between byte offsets."""
        pass

    @abstractmethod
    def byte_to_linecol(self, text: str, byte: int) -> Tuple[int, int]:
        """Convert byte offset to (line, column) 1-based."""
        pass

    def iter_brace_constructs(self, tree: Any) -> Iterable[BraceConstruct]:
        """Enumerate brace-delimited constructs in document order."""
        return []
