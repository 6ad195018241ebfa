"""
Tests for configuration loading.
"""

import logging

import pytest

from spacelint.engine.config import (
    EngineConfig, find_config_file, get_default_config, get_rule_severity, load_config,
    meets_threshold, save_config, validate_rule_configs,
)
from spacelint.engine.options import ConfigError
from spacelint.rules.style_no_trailing_spaces import StyleNoTrailingSpacesRule
from spacelint.rules.style_object_curly_spacing import StyleObjectCurlySpacingRule


class TestLoadConfig:

    def test_defaults(self):
        config = get_default_config()
        assert config.enabled_rules == ["*"]
        assert config.max_findings_per_file == 200
        assert config.severity_threshold == "info"
        assert config.rule_config("style.object_curly_spacing") == {"options": ["never"]}
        assert config.rule_config("style.no_trailing_spaces") == {"skipBlankLines": False}
        assert config.rule_config("style.unknown") == {}

    def test_defaults_are_not_shared(self):
        first = get_default_config()
        first.rule_configs["style.object_curly_spacing"]["options"].append({})
        assert get_default_config().rule_config("style.object_curly_spacing") == {"options": ["never"]}

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(str(tmp_path / "missing.yml"))
        assert config.enabled_rules == ["*"]

    def test_yaml_overrides(self, tmp_path):
        path = tmp_path / ".spacelint.yml"
        path.write_text(
            "enabled_rules:\n"
            "  - style.object_curly_spacing\n"
            "rule_severities:\n"
            "  style.object_curly_spacing: error\n"
            "rule_configs:\n"
            "  style.object_curly_spacing:\n"
            "    options: [always, {arraysInObjects: false}]\n",
            encoding="utf-8",
        )

        config = load_config(str(path))

        assert config.enabled_rules == ["style.object_curly_spacing"]
        assert config.rule_severities == {"style.object_curly_spacing": "error"}
        assert config.rule_config("style.object_curly_spacing") == {
            "options": ["always", {"arraysInObjects": False}],
        }
        # untouched rules keep their defaults
        assert config.rule_config("style.no_trailing_spaces") == {"skipBlankLines": False}

    def test_invalid_yaml_falls_back(self, tmp_path, caplog):
        path = tmp_path / ".spacelint.yml"
        path.write_text("enabled_rules: [unclosed\n", encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="spacelint.engine.config"):
            config = load_config(str(path))

        assert config.enabled_rules == ["*"]
        assert "Failed to load config" in caplog.text

    def test_unknown_key_warns(self, tmp_path, caplog):
        path = tmp_path / ".spacelint.yml"
        path.write_text("colour: blue\n", encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="spacelint.engine.config"):
            load_config(str(path))

        assert "colour" in caplog.text

    def test_save_then_load(self, tmp_path):
        config = get_default_config()
        config.rule_severities["style.no_trailing_spaces"] = "error"
        path = tmp_path / "nested" / "spacelint.yaml"

        save_config(config, str(path))
        loaded = load_config(str(path))

        assert loaded == config


class TestFindConfigFile:

    def test_walks_up(self, tmp_path):
        (tmp_path / ".spacelint.yml").write_text("{}\n", encoding="utf-8")
        nested = tmp_path / "src" / "lib"
        nested.mkdir(parents=True)
        source_file = nested / "a.js"
        source_file.write_text("", encoding="utf-8")

        assert find_config_file(str(nested)) == str(tmp_path / ".spacelint.yml")
        assert find_config_file(str(source_file)) == str(tmp_path / ".spacelint.yml")

    def test_name_order(self, tmp_path):
        (tmp_path / "spacelint.yml").write_text("{}\n", encoding="utf-8")
        (tmp_path / ".spacelint.yaml").write_text("{}\n", encoding="utf-8")
        assert find_config_file(str(tmp_path)) == str(tmp_path / ".spacelint.yaml")


class TestSeverities:

    def test_rule_severity_override(self):
        config = EngineConfig(enabled_rules=["*"], rule_severities={"style.no_trailing_spaces": "error"})
        assert get_rule_severity("style.no_trailing_spaces", config) == "error"
        assert get_rule_severity("style.object_curly_spacing", config, "info") == "info"

    def test_threshold(self):
        config = EngineConfig(enabled_rules=["*"], severity_threshold="warn")
        assert not meets_threshold("info", config)
        assert meets_threshold("warn", config)
        assert meets_threshold("error", config)


class TestValidateRuleConfigs:

    def setup_method(self):
        self.rules = [StyleObjectCurlySpacingRule(), StyleNoTrailingSpacesRule()]

    def test_defaults_are_valid(self):
        validate_rule_configs(get_default_config(), self.rules)

    def test_bad_rule_options(self):
        config = get_default_config()
        config.rule_configs["style.object_curly_spacing"] = {"options": ["sometimes"]}
        with pytest.raises(ConfigError) as exc_info:
            validate_rule_configs(config, self.rules)
        assert exc_info.value.rule_id == "style.object_curly_spacing"

    def test_bad_severity(self):
        config = get_default_config()
        config.rule_severities["style.no_trailing_spaces"] = "fatal"
        with pytest.raises(ConfigError):
            validate_rule_configs(config, self.rules)

    def test_bad_threshold(self):
        config = get_default_config()
        config.severity_threshold = "loud"
        with pytest.raises(ConfigError):
            validate_rule_configs(config, self.rules)
