# SPDX-License-Identifier: MIT
"""Angular lint engine — tree-sitter syntax trees in, diagnostics and fixes out."""

from ngstandards.rules.base import (
    TRAVERSAL_END,
    Diagnostic,
    LintReport,
    NgStandardsError,
    Rule,
    RuleFault,
    RuleSeverity,
)
from ngstandards.rules.config import ConfigError, PresetConfig, load_preset
from ngstandards.rules.context import RuleContext
from ngstandards.rules.engine import RuleEngine
from ngstandards.rules.fixes import Fix, FixError, TextEdit, apply_fix, apply_fixes
from ngstandards.rules.nodes import Node, SourceFile, Span
from ngstandards.rules.parser import parse_source
from ngstandards.rules.selectors import Selector, SelectorError, compile_selector

__all__ = [
    "TRAVERSAL_END",
    "ConfigError",
    "Diagnostic",
    "Fix",
    "FixError",
    "LintReport",
    "NgStandardsError",
    "Node",
    "PresetConfig",
    "Rule",
    "RuleContext",
    "RuleEngine",
    "RuleFault",
    "RuleSeverity",
    "Selector",
    "SelectorError",
    "SourceFile",
    "Span",
    "TextEdit",
    "apply_fix",
    "apply_fixes",
    "compile_selector",
    "load_preset",
    "parse_source",
]


def run_rules(text: str, filename: str, preset: PresetConfig) -> LintReport:
    """Convenience: parse source, run all rules at the preset's severities."""
    engine = RuleEngine(severities=preset.severities)
    return engine.run(parse_source(text, filename))


def check_gate(report: LintReport) -> bool:
    """Convenience: check if any diagnostic is at ERROR severity."""
    engine = RuleEngine(rule_classes=[])
    return engine.check_gate(report)
