"""
Style Rule: Object Curly Spacing

Enforces ("always") or disallows ("never") spaces just inside the braces of
object literals, destructuring patterns and import/export specifier lists:

    var obj = { foo: 1 };          // "always"
    var {x} = y;                   // "never"
    import { a, b } from 'mod';    // "always"

Options: ``["always" | "never", {arraysInObjects, objectsInObjects,
ObjectPattern, ObjectExpression, ImportDeclaration, ExportNamedDeclaration}]``.
"""

from typing import Callable, Dict, Iterator, Optional

from spacelint.engine.options import ObjectCurlySpacingConfig, SpacingOptions
from spacelint.engine.reporter import Reporter
from spacelint.engine.source import SourceCode
from spacelint.engine.spacing import SpacingViolation, check_pair, gap_is_whitespace
from spacelint.engine.types import (
    BraceConstruct, ConstructKind, Edit, ElementKind, Finding, Requires, RuleContext, RuleMeta, Token,
)


class BraceSpacingChecker:
    """Validates the spacing inside one file's brace-delimited constructs."""

    def __init__(self, source: SourceCode, options: SpacingOptions, reporter: Reporter):
        self.source = source
        self.options = options
        self.reporter = reporter
        self._handlers: Dict[ConstructKind, Callable[[BraceConstruct], None]] = {
            ConstructKind.OBJECT_PATTERN: self.check_object,
            ConstructKind.OBJECT_EXPRESSION: self.check_object,
            ConstructKind.IMPORT_DECLARATION: self.check_import,
            ConstructKind.EXPORT_NAMED_DECLARATION: self.check_export,
        }

    def check(self, construct: BraceConstruct) -> None:
        self._handlers[construct.kind](construct)

    def check_object(self, construct: BraceConstruct) -> None:
        if not construct.elements:
            return

        first = self.source.get_first_token(construct.node)
        last = self.source.get_last_token(construct.node)
        self._validate_braces(construct.kind, first, last)

    def check_import(self, construct: BraceConstruct) -> None:
        """Check ``import {a, b} from 'x'``, skipping a leading default binding."""
        elements = construct.elements
        if not elements or elements[-1].kind is not ElementKind.NAMED:
            return

        first_named = next(element for element in elements if element.kind is ElementKind.NAMED)
        self._check_specifier_list(construct.kind, first_named.node, elements[-1].node)

    def check_export(self, construct: BraceConstruct) -> None:
        elements = construct.elements
        if not elements:
            return

        self._check_specifier_list(construct.kind, elements[0].node, elements[-1].node)

    def _check_specifier_list(self, kind: ConstructKind, first_specifier, last_specifier) -> None:
        first = self.source.get_token_before(first_specifier)
        last = self.source.get_token_after(last_specifier)

        # the closing brace follows a trailing comma, if any
        if last is not None and last.text == ",":
            last = self.source.get_token_after(last)

        self._validate_braces(kind, first, last)

    def _validate_braces(self, kind: ConstructKind, first: Optional[Token], last: Optional[Token]) -> None:
        if first is None or last is None or first.text != "{" or last.text != "}":
            return

        second = self.source.get_token_after(first)
        penultimate = self.source.get_token_before(last)
        if second is None or penultimate is None:
            return

        spaced = self.options.for_construct(kind)
        closing_must_be_spaced = spaced
        if ((self.options.arrays_in_objects_exception and penultimate.text == "]") or
                (self.options.objects_in_objects_exception and penultimate.text == "}")):
            closing_must_be_spaced = not spaced

        opening = check_pair(self.source, first, second, spaced)
        if opening is SpacingViolation.MISSING_SPACE:
            self._report_after(kind, first, f"A space is required after '{first.text}'",
                               Edit(first.end_byte, first.end_byte, " "))
        elif opening is SpacingViolation.UNEXPECTED_SPACE:
            fix = None
            if gap_is_whitespace(self.source, first, second):
                fix = Edit(first.end_byte, second.start_byte, "")
            self._report_after(kind, first, f"There should be no space after '{first.text}'", fix)

        closing = check_pair(self.source, penultimate, last, closing_must_be_spaced)
        if closing is SpacingViolation.MISSING_SPACE:
            self._report_before(kind, last, f"A space is required before '{last.text}'",
                                Edit(last.start_byte, last.start_byte, " "))
        elif closing is SpacingViolation.UNEXPECTED_SPACE:
            fix = None
            if gap_is_whitespace(self.source, penultimate, last):
                fix = Edit(penultimate.end_byte, last.start_byte, "")
            self._report_before(kind, last, f"There should be no space before '{last.text}'", fix)

    def _report_after(self, kind: ConstructKind, token: Token, message: str, fix: Optional[Edit]) -> None:
        self.reporter.report(
            (token.end_line, token.end_column), message, fix,
            span=(token.start_byte, token.end_byte),
            meta={"construct": kind.value, "side": "opening"},
        )

    def _report_before(self, kind: ConstructKind, token: Token, message: str, fix: Optional[Edit]) -> None:
        self.reporter.report(
            token, message, fix,
            meta={"construct": kind.value, "side": "closing"},
        )


class StyleObjectCurlySpacingRule:
    """Rule to enforce consistent spacing inside braces."""

    meta = RuleMeta(
        id="style.object_curly_spacing",
        category="style",
        tier=1,
        priority="P3",
        autofix_safety="safe",
        description="Enforce consistent spacing inside braces of objects, patterns and import/export lists",
        langs=["javascript"],
    )

    requires = Requires(syntax=True)

    config_model = ObjectCurlySpacingConfig

    def visit(self, ctx: RuleContext) -> Iterator[Finding]:
        """Visit file and check brace spacing of every construct."""
        if ctx.language not in self.meta.langs or ctx.tree is None:
            return

        options = SpacingOptions.resolve((ctx.config or {}).get("options", []))
        reporter = Reporter(self.meta.id, ctx, self.meta.default_severity)
        checker = BraceSpacingChecker(ctx.source_code, options, reporter)

        for construct in ctx.adapter.iter_brace_constructs(ctx.tree):
            checker.check(construct)

        yield from reporter.findings


rule = StyleObjectCurlySpacingRule()
RULES = [rule]
