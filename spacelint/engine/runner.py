"""
CLI runner for the spacelint Tree-sitter engine.

This module provides the library entry points and the CLI for loading
adapters, parsing files, running rules, applying fixes and outputting
results.
"""

import argparse
import concurrent.futures
import json
import logging
import sys
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .autofix import apply_edits, collect_edits, unified_diff
from .config import (
    EngineConfig, find_config_file, get_default_config, get_rule_severity, load_config,
    meets_threshold, validate_rule_configs,
)
from .options import ConfigError
from .registry import get_adapter, get_adapter_for_file, get_enabled_rules, register_adapter
from .source import SourceCode
from .suppressions import filter_suppressed_findings
from .types import Finding, LanguageAdapter, RuleContext

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "1"
ENGINE_VERSION = "0.1.0"

# Upper bound on fix passes; each pass re-parses and re-runs every rule
MAX_FIX_PASSES = 10

_adapters_ready = False


def setup_adapters() -> None:
    """Set up and register language adapters and the built-in rules."""
    global _adapters_ready
    if _adapters_ready:
        return

    from .javascript_adapter import default_javascript_adapter
    from spacelint.rules import register_builtin_rules

    register_adapter(default_javascript_adapter.language_id, default_javascript_adapter)
    discovered = register_builtin_rules()
    if discovered:
        logger.debug("Registered %d built-in rules", discovered)
    _adapters_ready = True


def resolve_rules(config: EngineConfig, language: str, rule_patterns: Optional[List[str]] = None) -> List:
    """Enabled rules for a language, with their options validated."""
    rules = get_enabled_rules(rule_patterns or config.enabled_rules, language)
    validate_rule_configs(config, rules)
    return rules


def analyze_source(text: str, file_path: str = "<input>.js", rules: Optional[List] = None,
                   config: Optional[EngineConfig] = None,
                   adapter: Optional[LanguageAdapter] = None) -> List[Finding]:
    """Analyze one in-memory buffer and return its findings."""
    findings, _ = _analyze_text(text, file_path, rules, config, adapter)
    return findings


def _analyze_text(text: str, file_path: str, rules: Optional[List], config: Optional[EngineConfig],
                  adapter: Optional[LanguageAdapter]) -> Tuple[List[Finding], float]:
    setup_adapters()
    config = config or get_default_config()
    adapter = adapter or get_adapter_for_file(file_path) or get_adapter("javascript")
    if rules is None:
        rules = resolve_rules(config, adapter.language_id)

    parse_start = time.time()
    tree = adapter.parse(text) if any(rule.requires.syntax for rule in rules) else None
    parse_time = (time.time() - parse_start) * 1000

    context = RuleContext(file_path=file_path, text=text, tree=tree, adapter=adapter)
    # build tokens once; every rule context shares them
    context._source_code = SourceCode(text, tree)

    findings: List[Finding] = []
    for rule in rules:
        if rule.requires.syntax and tree is None:
            continue

        rule_id = rule.meta.id
        rule_context = context.with_config(config.rule_config(rule_id))
        try:
            rule_findings = list(rule.visit(rule_context))
        except Exception as e:
            logger.warning("Rule '%s' failed on %s: %s", rule_id, file_path, e)
            continue

        severity = get_rule_severity(rule_id, config, rule.meta.default_severity)
        for finding in rule_findings:
            if finding.severity != severity:
                finding = finding._replace(severity=severity)
            if meets_threshold(finding.severity, config):
                findings.append(finding)

    findings = filter_suppressed_findings(findings, text)
    findings.sort(key=lambda f: (f.start_byte, f.rule))
    return findings[:config.max_findings_per_file], parse_time


def analyze_file(file_path: str, rules: Optional[List] = None,
                 config: Optional[EngineConfig] = None) -> Tuple[List[Finding], float]:
    """Analyze a single file and return findings and parse time."""
    try:
        with open(file_path, 'r', encoding='utf-8', newline='') as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read %s: %s", file_path, e)
        return [], 0.0

    return _analyze_text(content, file_path, rules, config, None)


def fix_source(text: str, file_path: str = "<input>.js", rules: Optional[List] = None,
               config: Optional[EngineConfig] = None) -> Tuple[str, List[Finding]]:
    """
    Apply autofixes until the text is stable.

    Returns:
        The fixed text and the findings that remain on it
    """
    findings = analyze_source(text, file_path, rules, config)
    for _ in range(MAX_FIX_PASSES):
        edits = collect_edits(findings)
        if not edits:
            break
        fixed = apply_edits(text, edits)
        if fixed == text:
            break
        text = fixed
        findings = analyze_source(text, file_path, rules, config)
    return text, findings


def run_analysis_parallel(files: List[str], rules: List, config: EngineConfig,
                          jobs: int = 1) -> Tuple[List[Finding], float]:
    """Run analysis on files with optional parallelization, keeping file order."""
    all_findings: List[Finding] = []
    total_parse_time = 0.0

    if jobs <= 1:
        results = (analyze_file(file_path, rules, config) for file_path in files)
        for findings, parse_time in results:
            all_findings.extend(findings)
            total_parse_time += parse_time
            if len(all_findings) >= config.max_total_findings:
                break
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=jobs) as executor:
            for findings, parse_time in executor.map(lambda path: analyze_file(path, rules, config), files):
                all_findings.extend(findings)
                total_parse_time += parse_time

    return all_findings[:config.max_total_findings], total_parse_time


def finding_to_dict(finding: Finding, source: Optional[SourceCode] = None) -> Dict[str, Any]:
    """Convert a finding to the JSON protocol shape."""
    start_line, start_col = finding.line or 1, finding.column or 1
    end_line, end_col = start_line, start_col
    if source is not None:
        end_line, end_col = source.position(finding.end_byte)

    finding_dict = {
        "rule_id": finding.rule,
        "message": finding.message,
        "file_path": finding.file,
        "start_byte": finding.start_byte,
        "end_byte": finding.end_byte,
        "range": {
            "startLine": start_line,
            "startCol": start_col,
            "endLine": end_line,
            "endCol": end_col,
        },
        "severity": finding.severity,
    }

    if finding.autofix:
        finding_dict["autofix"] = [
            {"start_byte": edit.start_byte, "end_byte": edit.end_byte, "replacement": edit.replacement}
            for edit in finding.autofix
        ]

    if finding.meta:
        finding_dict["meta"] = finding.meta

    return finding_dict


def format_output(findings: List[Finding], files_count: int, rules_count: int, metrics: Dict[str, float],
                  format_type: str, text_cache: Optional[Dict[str, str]] = None) -> str:
    """Format output according to specified format."""
    sources = {path: SourceCode(text) for path, text in (text_cache or {}).items()}

    if format_type == "json":
        output = {
            "spacelint.protocol": PROTOCOL_VERSION,
            "engine_version": ENGINE_VERSION,
            "files_scanned": files_count,
            "rules_run": rules_count,
            "findings": [finding_to_dict(f, sources.get(f.file)) for f in findings],
            "metrics": metrics,
        }
        return json.dumps(output, indent=2)

    elif format_type == "pretty":
        lines = [f"Scanned {files_count} files with {rules_count} rules",
                 f"Found {len(findings)} issues", ""]

        # Group findings by file
        by_file: Dict[str, List[Finding]] = {}
        for finding in findings:
            by_file.setdefault(finding.file, []).append(finding)

        for file_path, file_findings in sorted(by_file.items()):
            lines.append(file_path)
            for finding in file_findings:
                fix_marker = " [fixable]" if finding.autofix else ""
                lines.append(f"  {finding.line}:{finding.column}  {finding.severity:<5}  "
                             f"{finding.message} ({finding.rule}){fix_marker}")
            lines.append("")

        lines.append(f"Parse time: {metrics.get('parse_ms', 0.0):.1f}ms, "
                     f"total time: {metrics.get('total_ms', 0.0):.1f}ms")
        return "\n".join(lines)

    else:
        raise ValueError(f"Unknown format: {format_type}")


def analyze_paths(paths: List[str], rule_patterns: Optional[List[str]] = None,
                  config_path: Optional[str] = None, jobs: int = 1) -> Dict[str, Any]:
    """
    Library function to analyze paths.

    Args:
        paths: List of file/directory paths to analyze
        rule_patterns: Rule patterns to run (default: config's enabled_rules)
        config_path: Path to config file (default: auto-detect)
        jobs: Number of worker threads

    Returns:
        Dictionary with analysis results in the JSON protocol format
    """
    setup_adapters()
    if not config_path:
        config_path = find_config_file(paths[0] if paths else ".")
    config = load_config(config_path)

    adapter = get_adapter("javascript")
    rules = resolve_rules(config, adapter.language_id, rule_patterns)
    files = adapter.list_files(paths)

    start = time.time()
    findings, parse_ms = run_analysis_parallel(files, rules, config, jobs)
    total_ms = (time.time() - start) * 1000

    return json.loads(format_output(findings, len(files), len(rules),
                                    {"parse_ms": parse_ms, "total_ms": total_ms}, "json"))


def _read_texts(files: Sequence[str]) -> Dict[str, str]:
    texts = {}
    for file_path in files:
        try:
            with open(file_path, 'r', encoding='utf-8', newline='') as f:
                texts[file_path] = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read %s: %s", file_path, e)
    return texts


def _fix_files(files: Sequence[str], rules: List, config: EngineConfig, show_diff: bool) -> List[Finding]:
    remaining: List[Finding] = []
    for file_path, original in _read_texts(files).items():
        fixed, findings = fix_source(original, file_path, rules, config)
        remaining.extend(findings)
        if fixed == original:
            continue
        if show_diff:
            sys.stdout.write(unified_diff(original, fixed, file_path))
        else:
            with open(file_path, 'w', encoding='utf-8', newline='') as f:
                f.write(fixed)
        logger.info("Fixed %s", file_path)
    return remaining


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="spacelint",
        description="Brace and whitespace spacing checks for JavaScript",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  spacelint --paths src/ --format pretty
  spacelint --paths app.js --rules "style.object_curly_spacing" --fix
  spacelint --paths lib/ --jobs 4 --config .spacelint.yml
        """
    )

    parser.add_argument("--paths", nargs="+", required=True,
                        help="Paths to files or directories to analyze")
    parser.add_argument("--rules", default=None,
                        help="Comma-separated rule IDs or glob patterns (default: config enabled_rules)")
    parser.add_argument("--config", help="Path to configuration file")
    parser.add_argument("--format", choices=["json", "pretty"], default="pretty",
                        help="Output format (default: pretty)")
    parser.add_argument("--fix", action="store_true", help="Apply autofixes to files in place")
    parser.add_argument("--diff", action="store_true", help="With --fix, print a diff instead of writing files")
    parser.add_argument("--jobs", type=int, default=1, help="Number of parallel jobs (default: 1)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    total_start = time.time()
    setup_adapters()

    config_path = args.config or find_config_file(args.paths[0])
    config = load_config(config_path)
    logger.debug("Using config: %s", config_path or "defaults")

    rule_patterns = None
    if args.rules:
        rule_patterns = [pattern.strip() for pattern in args.rules.split(",") if pattern.strip()]

    adapter = get_adapter("javascript")
    try:
        rules = resolve_rules(config, adapter.language_id, rule_patterns)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    logger.debug("Running %d rules: %s", len(rules), [r.meta.id for r in rules])

    files = adapter.list_files(args.paths)
    if not files:
        print("No files found to analyze", file=sys.stderr)
        return 1

    if args.fix:
        findings = _fix_files(files, rules, config, args.diff)
        parse_ms = 0.0
    else:
        findings, parse_ms = run_analysis_parallel(files, rules, config, max(1, args.jobs))

    metrics = {"parse_ms": parse_ms, "total_ms": (time.time() - total_start) * 1000}
    text_cache = _read_texts(sorted({f.file for f in findings})) if args.format == "json" else None
    print(format_output(findings, len(files), len(rules), metrics, args.format, text_cache))

    return 1 if findings else 0


if __name__ == "__main__":
    sys.exit(main())
