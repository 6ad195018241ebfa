"""
Tests for the rule and adapter registry.
"""

from spacelint.engine.registry import Registry
from spacelint.engine.types import LanguageAdapter, Requires, RuleMeta


class FakeAdapter(LanguageAdapter):

    @property
    def language_id(self):
        return "fake"

    @property
    def file_extensions(self):
        return (".fk",)

    def parse(self, text):
        return None

    def list_files(self, paths):
        return []

    def node_text(self, text, start_byte, end_byte):
        return text[start_byte:end_byte]

    def byte_to_linecol(self, text, byte):
        return 1, byte + 1


class FakeRule:

    def __init__(self, rule_id, langs=("fake",)):
        self.meta = RuleMeta(id=rule_id, category="style", tier=0, priority="P3",
                             autofix_safety="safe", langs=list(langs))
        self.requires = Requires(raw_text=True, syntax=False)

    def visit(self, ctx):
        return []


class TestRegistry:

    def setup_method(self):
        self.registry = Registry()

    def test_register_and_lookup(self):
        rule = FakeRule("style.a")
        self.registry.register_rule(rule)
        self.registry.register_rule(FakeRule("style.a"))

        assert self.registry.get_rule("style.a") is rule
        assert self.registry.get_rule_ids() == ["style.a"]
        assert self.registry.get_rule("style.missing") is None

    def test_rules_by_language(self):
        self.registry.register_rule(FakeRule("style.a"))
        self.registry.register_rule(FakeRule("style.b", langs=("other",)))
        assert [r.meta.id for r in self.registry.get_rules_for_language("fake")] == ["style.a"]

    def test_enabled_patterns(self):
        for rule_id in ("style.a", "style.b", "lint.c"):
            self.registry.register_rule(FakeRule(rule_id))

        assert len(self.registry.get_enabled_rules(["*"], "fake")) == 3
        assert [r.meta.id for r in self.registry.get_enabled_rules(["style.*"], "fake")] == ["style.a", "style.b"]
        assert [r.meta.id for r in self.registry.get_enabled_rules(["lint.c", "style.b"], "fake")] == [
            "style.b", "lint.c",
        ]
        assert self.registry.get_enabled_rules([], "fake") == []

    def test_adapter_for_file(self):
        adapter = FakeAdapter()
        self.registry.register_adapter("fake", adapter)
        assert self.registry.get_adapter("fake") is adapter
        assert self.registry.get_adapter_for_file("dir/thing.FK") is adapter
        assert self.registry.get_adapter_for_file("thing.py") is None
        assert self.registry.list_supported_languages() == ["fake"]

    def test_discover_builtin_rules(self):
        count = self.registry.discover_rules(["spacelint.rules"])
        assert count == 2
        assert sorted(self.registry.get_rule_ids()) == [
            "style.no_trailing_spaces", "style.object_curly_spacing",
        ]

    def test_discover_missing_package_is_skipped(self):
        assert self.registry.discover_rules(["spacelint.no_such_package"]) == 0

    def test_clear(self):
        self.registry.register_rule(FakeRule("style.a"))
        self.registry.register_adapter("fake", FakeAdapter())
        self.registry.clear()
        assert self.registry.get_all_rules() == []
        assert self.registry.get_all_adapters() == {}
