# SPDX-License-Identifier: MIT
"""File-level lint driver — reads sources, runs the engine, prints findings, applies fixes.

Usage:
    python -m ngstandards [--preset NAME] [--fix] [--option RULE=JSON] PATH...

Environment variables:
    NGSTANDARDS_PRESET  — preset name when --preset is not given (default: recommended)

Exit status: 0 clean, 1 when any ERROR diagnostic remains, 2 on configuration errors
or when a file could not be read.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterable, Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any

from ngstandards.rules import (
    ConfigError,
    Diagnostic,
    LintReport,
    RuleEngine,
    RuleSeverity,
    SourceFile,
    apply_fixes,
    load_preset,
    parse_source,
)

log = logging.getLogger(__name__)

SOURCE_SUFFIXES = (".ts", ".tsx")
SKIPPED_DIRS = frozenset({"node_modules", ".angular", "dist", ".git"})
# Conflicting fixes are deferred to the next pass.
MAX_FIX_PASSES = 10

EXIT_CLEAN = 0
EXIT_GATE_FAILED = 1
EXIT_CONFIG_ERROR = 2


def parse_rule_option(spec: str) -> tuple[str, dict[str, Any]]:
    """Split a ``RULE=JSON`` command-line option into rule id and option mapping.

    Raises:
        ConfigError: If the spec has no ``=``, or the JSON is not an object.
    """
    rule_id, sep, raw = spec.partition("=")
    if not sep or not rule_id.strip():
        msg = f"Expected RULE=JSON, got {spec!r}"
        raise ConfigError(msg)
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON for rule {rule_id.strip()!r}: {e.msg}"
        raise ConfigError(msg) from e
    if not isinstance(value, dict):
        msg = f"Options for rule {rule_id.strip()!r} must be a JSON object"
        raise ConfigError(msg)
    return rule_id.strip(), value


def iter_source_files(paths: Iterable[Path]) -> Iterator[Path]:
    """Yield TypeScript files; directories are walked, declaration files skipped."""
    for path in paths:
        if path.is_dir():
            for child in sorted(path.rglob("*")):
                if SKIPPED_DIRS.intersection(child.relative_to(path).parts):
                    continue
                if _is_source(child):
                    yield child
        else:
            yield path


def _is_source(path: Path) -> bool:
    return path.is_file() and path.suffix in SOURCE_SUFFIXES and not path.name.endswith(".d.ts")


def format_diagnostic(source_file: SourceFile, diagnostic: Diagnostic) -> str:
    line, col = source_file.line_col(diagnostic.span.start)
    severity = diagnostic.severity.name.lower()
    return (
        f"{source_file.filename}:{line}:{col} {severity} "
        f"{diagnostic.message} [{diagnostic.rule_id}]"
    )


def lint_file(
    path: Path, engine: RuleEngine, *, fix: bool = False
) -> tuple[LintReport, SourceFile, int]:
    """Lint one file; with ``fix``, rewrite it until no fix applies.

    Returns:
        The final report, the parsed source it refers to, and the number of
        fixes written back.
    """
    text = path.read_text(encoding="utf-8")
    filename = path.as_posix()
    source_file = parse_source(text, filename)
    report = engine.run(source_file)
    fixed = 0
    if not fix:
        return report, source_file, fixed

    for _ in range(MAX_FIX_PASSES):
        patched, applied = apply_fixes(source_file.text, report.diagnostics)
        if applied == 0:
            break
        fixed += applied
        source_file = parse_source(patched, filename)
        report = engine.run(source_file)
    if fixed:
        path.write_text(source_file.text, encoding="utf-8")
        log.info("Applied %d fix(es) to %s", fixed, filename)
    return report, source_file, fixed


def lint_paths(
    paths: Sequence[str | Path],
    engine: RuleEngine,
    *,
    fix: bool = False,
    unreadable: list[tuple[Path, str]] | None = None,
) -> list[tuple[LintReport, SourceFile, int]]:
    """Lint every source file under ``paths``.

    A file that cannot be read or decoded is logged and skipped; when
    ``unreadable`` is given, ``(path, reason)`` is appended to it.
    """
    results = []
    for path in iter_source_files(Path(p) for p in paths):
        try:
            results.append(lint_file(path, engine, fix=fix))
        except (OSError, UnicodeDecodeError) as exc:
            log.warning("Skipping %s: %s", path.as_posix(), exc)
            if unreadable is not None:
                unreadable.append((path, f"{type(exc).__name__}: {exc}"))
    return results


def main(
    paths: Sequence[str],
    *,
    preset: str | None = None,
    fix: bool = False,
    options: Sequence[str] = (),
) -> int:
    """CLI entry point — lint paths, print findings, return the exit status."""
    try:
        preset_config = load_preset(preset)
        rule_options: Mapping[str, dict[str, Any]] = dict(parse_rule_option(o) for o in options)
        engine = RuleEngine(severities=preset_config.severities, options=rule_options)
    except (ConfigError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    errors = warnings = faults = 0
    unreadable: list[tuple[Path, str]] = []
    try:
        results = lint_paths(paths, engine, fix=fix, unreadable=unreadable)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    for report, source_file, fixed in results:
        for diagnostic in report.diagnostics:
            print(format_diagnostic(source_file, diagnostic))
        for fault in report.faults:
            print(f"{report.path}: rule {fault.rule_id} failed on {fault.event}: {fault.error}")
        if fixed:
            print(f"{report.path}: fixed {fixed} problem(s)")
        errors += sum(1 for d in report.diagnostics if d.severity == RuleSeverity.ERROR)
        warnings += sum(1 for d in report.diagnostics if d.severity == RuleSeverity.WARN)
        faults += len(report.faults)
    for path, reason in unreadable:
        print(f"error: {path.as_posix()}: could not read: {reason}", file=sys.stderr)

    total = errors + warnings
    if total or faults or unreadable:
        print(
            f"{total} problem(s) ({errors} error(s), {warnings} warning(s)), "
            f"{faults} rule fault(s), {len(unreadable)} unreadable file(s)"
        )
    if unreadable:
        return EXIT_CONFIG_ERROR
    gate_failed = any(engine.check_gate(report) for report, _, _ in results)
    return EXIT_GATE_FAILED if gate_failed else EXIT_CLEAN
