"""
Configuration management for the spacelint engine.

This module provides configuration loading with sensible defaults for
limits, severities, and per-rule options.
"""

import copy
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

import yaml

from .options import ConfigError, validate_rule_config

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = [".spacelint.yml", ".spacelint.yaml", "spacelint.yml", "spacelint.yaml"]

SEVERITY_ORDER = {"info": 0, "warn": 1, "error": 2}


@dataclass
class EngineConfig:
    """Configuration for the spacelint engine."""

    # Rule execution settings
    enabled_rules: List[str]
    max_findings_per_file: int = 200
    max_total_findings: int = 5000

    # Findings below this severity are dropped
    severity_threshold: str = "info"

    # Rule severity overrides (rule_id -> severity)
    rule_severities: Dict[str, str] = None

    # Rule-specific configuration (rule_id -> raw options)
    rule_configs: Dict[str, Dict[str, Any]] = None

    def __post_init__(self):
        if self.rule_severities is None:
            self.rule_severities = {}
        if self.rule_configs is None:
            self.rule_configs = {}

    def rule_config(self, rule_id: str) -> Dict[str, Any]:
        return dict(self.rule_configs.get(rule_id) or {})


DEFAULTS: Dict[str, Any] = {
    "enabled_rules": ["*"],
    "max_findings_per_file": 200,
    "max_total_findings": 5000,
    "severity_threshold": "info",
    "rule_severities": {},
    "rule_configs": {
        "style.object_curly_spacing": {
            "options": ["never"],
        },
        "style.no_trailing_spaces": {
            "skipBlankLines": False,
        },
    },
}


def load_config(config_path: Optional[str] = None) -> EngineConfig:
    """
    Load configuration from file or use defaults.

    Args:
        config_path: Path to config file (YAML). If None, uses defaults.

    Returns:
        EngineConfig instance
    """
    merged_config = copy.deepcopy(DEFAULTS)

    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                file_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Failed to load config from %s: %s; using default configuration", config_path, e)
            return EngineConfig(**merged_config)

        for key, value in file_config.items():
            if key not in merged_config:
                logger.warning("Ignoring unknown config key '%s' in %s", key, config_path)
                continue
            if key == "rule_severities":
                merged_config[key].update(value or {})
            elif key == "rule_configs":
                # Rule options replace the defaults wholesale, like the
                # positional options of the rules themselves.
                for rule_id, rule_config in (value or {}).items():
                    merged_config[key][rule_id] = rule_config
            else:
                merged_config[key] = value

    return EngineConfig(**merged_config)


def get_default_config() -> EngineConfig:
    """Get default configuration without loading from file."""
    return load_config(None)


def save_config(config: EngineConfig, config_path: str) -> None:
    """
    Save configuration to file.

    Args:
        config: EngineConfig to save
        config_path: Path where to save the config
    """
    config_dict = {
        "enabled_rules": config.enabled_rules,
        "max_findings_per_file": config.max_findings_per_file,
        "max_total_findings": config.max_total_findings,
        "severity_threshold": config.severity_threshold,
        "rule_severities": config.rule_severities,
        "rule_configs": config.rule_configs,
    }

    directory = os.path.dirname(config_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(config_dict, f, default_flow_style=False, indent=2, sort_keys=False)


def find_config_file(start_path: str = ".") -> Optional[str]:
    """
    Find configuration file by walking up the directory tree.

    Looks for files in this order:
    1. .spacelint.yml
    2. .spacelint.yaml
    3. spacelint.yml
    4. spacelint.yaml

    Args:
        start_path: File or directory to start searching from

    Returns:
        Path to config file or None if not found
    """
    current_path = os.path.abspath(start_path)
    if os.path.isfile(current_path):
        current_path = os.path.dirname(current_path)

    while True:
        for config_name in CONFIG_FILE_NAMES:
            config_path = os.path.join(current_path, config_name)
            if os.path.exists(config_path):
                return config_path

        parent_path = os.path.dirname(current_path)
        if parent_path == current_path:
            # Reached the root directory
            break
        current_path = parent_path

    return None


def get_rule_severity(rule_id: str, config: EngineConfig, default_severity: str = "warn") -> str:
    """
    Get the configured severity for a rule, falling back to default.

    Args:
        rule_id: Rule identifier (e.g., "style.no_trailing_spaces")
        config: Engine configuration
        default_severity: Fallback severity if not configured

    Returns:
        Severity level ("info", "warn", or "error")
    """
    if config.rule_severities and rule_id in config.rule_severities:
        return config.rule_severities[rule_id]
    return default_severity


def meets_threshold(severity: str, config: EngineConfig) -> bool:
    return SEVERITY_ORDER.get(severity, 1) >= SEVERITY_ORDER.get(config.severity_threshold, 0)


def validate_rule_configs(config: EngineConfig, rules: Iterable[Any]) -> None:
    """
    Check every rule's options and severity before analysis starts.

    Raises:
        ConfigError: if any option or severity does not match its schema
    """
    for rule in rules:
        rule_id = rule.meta.id
        model = getattr(rule, "config_model", None)
        if model is not None:
            validate_rule_config(rule_id, model, config.rule_configs.get(rule_id))

    for rule_id, severity in config.rule_severities.items():
        if severity not in SEVERITY_ORDER:
            raise ConfigError(rule_id, f"unknown severity {severity!r}")

    if config.severity_threshold not in SEVERITY_ORDER:
        raise ConfigError("*", f"unknown severity threshold {config.severity_threshold!r}")
