"""
JavaScript language adapter for tree-sitter.
"""
import logging
import os
import threading
from typing import Any, Iterator, List, Optional, Tuple

import tree_sitter
import tree_sitter_javascript

from .source import COMMENT_NODE_TYPES, SourceCode
from .types import (
    BraceConstruct, ConstructElement, ConstructKind, ElementKind, LanguageAdapter,
)

logger = logging.getLogger(__name__)

JAVASCRIPT_LANGUAGE = tree_sitter.Language(tree_sitter_javascript.language())

_OBJECT_NODE_KINDS = {
    "object": ConstructKind.OBJECT_EXPRESSION,
    "object_pattern": ConstructKind.OBJECT_PATTERN,
}

IGNORED_DIRS = {"node_modules", "__pycache__", "dist", "build", "coverage"}


def _named_children(node: Any) -> List[Any]:
    return [child for child in node.named_children if child.type not in COMMENT_NODE_TYPES]


def _child_of_type(node: Any, node_type: str) -> Optional[Any]:
    for child in node.children:
        if child.type == node_type:
            return child
    return None


class JavaScriptAdapter(LanguageAdapter):
    """Tree-sitter adapter for JavaScript language."""

    def __init__(self):
        # tree-sitter parsers are not safe to share between threads
        self._local = threading.local()

    @property
    def language_id(self) -> str:
        """Return the language identifier."""
        return "javascript"

    @property
    def file_extensions(self) -> Tuple[str, ...]:
        """Return supported file extensions."""
        return (".js", ".jsx", ".mjs", ".cjs")

    def _get_parser(self) -> tree_sitter.Parser:
        """Get or create the tree-sitter parser for the current thread."""
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = tree_sitter.Parser()
            parser.language = JAVASCRIPT_LANGUAGE
            self._local.parser = parser
            logger.debug("JavaScript parser initialized for thread %s", threading.current_thread().name)
        return parser

    def parse(self, text: str) -> Any:
        """Parse text and return a Tree-sitter tree."""
        if isinstance(text, bytes):
            text_bytes = text
        elif isinstance(text, str):
            text_bytes = text.encode('utf-8')
        else:
            return None

        return self._get_parser().parse(text_bytes)

    def list_files(self, paths: List[str]) -> List[str]:
        """List all JavaScript files in the given paths."""
        js_files = []

        for path in paths:
            if os.path.isfile(path):
                if path.endswith(self.file_extensions):
                    js_files.append(path)
            elif os.path.isdir(path):
                for root, dirs, files in os.walk(path):
                    # Skip hidden and vendored directories
                    dirs[:] = [d for d in dirs if not d.startswith('.') and d not in IGNORED_DIRS]

                    for file in files:
                        if file.endswith(self.file_extensions):
                            js_files.append(os.path.join(root, file))
            else:
                logger.warning("Path '%s' does not exist", path)

        return sorted(set(js_files))

    def node_text(self, text: str, start_byte: int, end_byte: int) -> str:
        """Extract text between byte offsets."""
        try:
            if isinstance(text, bytes):
                text_bytes = text
            else:
                text_bytes = text.encode('utf-8')
            return text_bytes[start_byte:end_byte].decode('utf-8')
        except (UnicodeDecodeError, IndexError):
            return ""

    def byte_to_linecol(self, text: str, byte: int) -> Tuple[int, int]:
        """Convert byte offset to (line, column) 1-based."""
        return SourceCode(text).position(byte)

    # === Brace constructs ===

    def iter_brace_constructs(self, tree: Any) -> Iterator[BraceConstruct]:
        """Yield object literals, object patterns and import/export declarations.

        Import and export declarations are always yielded, with an empty
        element tuple when they have no specifiers.
        """
        if tree is None:
            return

        stack = [getattr(tree, 'root_node', tree)]
        while stack:
            node = stack.pop()
            construct = self._to_construct(node)
            if construct is not None:
                yield construct
            stack.extend(reversed(node.children))

    def _to_construct(self, node: Any) -> Optional[BraceConstruct]:
        kind = _OBJECT_NODE_KINDS.get(node.type)
        if kind is not None:
            elements = tuple(
                ConstructElement(ElementKind.PROPERTY, child) for child in _named_children(node)
            )
            return BraceConstruct(kind, node, elements)
        if node.type == "import_statement":
            return BraceConstruct(ConstructKind.IMPORT_DECLARATION, node, self._import_specifiers(node))
        if node.type == "export_statement":
            return BraceConstruct(ConstructKind.EXPORT_NAMED_DECLARATION, node, self._export_specifiers(node))
        return None

    def _import_specifiers(self, node: Any) -> Tuple[ConstructElement, ...]:
        clause = _child_of_type(node, "import_clause")
        if clause is None:
            return ()

        elements = []
        for child in _named_children(clause):
            if child.type == "identifier":
                elements.append(ConstructElement(ElementKind.DEFAULT, child))
            elif child.type == "namespace_import":
                elements.append(ConstructElement(ElementKind.NAMESPACE, child))
            elif child.type == "named_imports":
                elements.extend(
                    ConstructElement(ElementKind.NAMED, specifier)
                    for specifier in _named_children(child)
                    if specifier.type == "import_specifier"
                )
        return tuple(elements)

    def _export_specifiers(self, node: Any) -> Tuple[ConstructElement, ...]:
        clause = _child_of_type(node, "export_clause")
        if clause is None:
            return ()
        return tuple(
            ConstructElement(ElementKind.NAMED, specifier)
            for specifier in _named_children(clause)
            if specifier.type == "export_specifier"
        )


# Default instance
default_javascript_adapter = JavaScriptAdapter()
