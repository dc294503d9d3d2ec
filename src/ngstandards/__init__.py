# SPDX-License-Identifier: MIT
"""ngstandards — Angular coding-standards linter built on tree-sitter."""

from ngstandards.lint import lint_file, lint_paths
from ngstandards.rules import (
    Diagnostic,
    LintReport,
    RuleEngine,
    RuleSeverity,
    load_preset,
    parse_source,
)

__all__ = [
    "Diagnostic",
    "LintReport",
    "RuleEngine",
    "RuleSeverity",
    "lint_file",
    "lint_paths",
    "load_preset",
    "parse_source",
]
