"""
spacelint Tree-sitter engine package.

This package provides the token-spacing analysis engine built on Tree-sitter.
"""

from .types import (
    Finding, RuleMeta, Rule, RuleContext, Edit, Requires, Token,
    LanguageAdapter, BraceConstruct, ConstructElement, ConstructKind, ElementKind,
    Severity, FileRange, NodeRange
)

from .registry import (
    register_rule, register_adapter, get_adapter, get_rule,
    get_all_rules, get_rules_for_language, get_enabled_rules,
    get_all_adapters, list_supported_languages, clear
)

from .config import (
    EngineConfig, load_config, get_default_config, save_config, find_config_file, get_rule_severity
)

from .options import ConfigError, SpacingOptions

__all__ = [
    # Types
    "Finding", "RuleMeta", "Rule", "RuleContext", "Edit", "Requires", "Token",
    "LanguageAdapter", "BraceConstruct", "ConstructElement", "ConstructKind", "ElementKind",
    "Severity", "FileRange", "NodeRange",

    # Registry
    "register_rule", "register_adapter", "get_adapter", "get_rule",
    "get_all_rules", "get_rules_for_language", "get_enabled_rules",
    "get_all_adapters", "list_supported_languages", "clear",

    # Config
    "EngineConfig", "load_config", "get_default_config", "save_config", "find_config_file",
    "get_rule_severity", "ConfigError", "SpacingOptions",
]
