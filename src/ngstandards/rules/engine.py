# SPDX-License-Identifier: MIT
"""Rule engine — one pre-order traversal per file, dispatching node events to rules."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from ngstandards.rules.base import (
    EXIT_SUFFIX,
    TRAVERSAL_END,
    Diagnostic,
    EventKey,
    Handler,
    LintReport,
    Rule,
    RuleFault,
    RuleSeverity,
)
from ngstandards.rules.config import ConfigError, resolve_options
from ngstandards.rules.context import RuleContext
from ngstandards.rules.selectors import Selector, compile_selector

if TYPE_CHECKING:
    from pydantic import BaseModel

    from ngstandards.rules.nodes import Node, SourceFile

log = logging.getLogger(__name__)


@lru_cache(maxsize=256)
def _compiled(text: str) -> Selector:
    return compile_selector(text)


@dataclass
class _ActiveRule:
    """A rule's handler table for one file, plus its fault switch."""

    rule_id: str
    enabled: bool = True


class _Dispatch:
    """Handler tables for one file, in rule registration order."""

    def __init__(self) -> None:
        self.enter: dict[str, list[tuple[_ActiveRule, Handler]]] = {}
        self.exit: dict[str, list[tuple[_ActiveRule, Handler]]] = {}
        self.selectors: list[tuple[_ActiveRule, Selector, Handler]] = []
        self.end: list[tuple[_ActiveRule, Handler]] = []

    def add_all(self, active: _ActiveRule, handlers: Mapping[EventKey, Handler]) -> None:
        """Register one rule's handler table; selector strings compile before anything is added.

        Raises:
            SelectorError: If a selector key is malformed.
        """
        resolved: list[tuple[str | Selector, Handler]] = [
            (_compiled(key) if isinstance(key, str) and "[" in key else key, handler)
            for key, handler in handlers.items()
        ]
        for key, handler in resolved:
            self.add(active, key, handler)

    def add(self, active: _ActiveRule, key: str | Selector, handler: Handler) -> None:
        if isinstance(key, Selector):
            self.selectors.append((active, key, handler))
        elif key == TRAVERSAL_END:
            self.end.append((active, handler))
        elif key.endswith(EXIT_SUFFIX):
            kind = key[: -len(EXIT_SUFFIX)]
            self.exit.setdefault(kind, []).append((active, handler))
        else:
            self.enter.setdefault(key, []).append((active, handler))


class RuleEngine:
    """Instantiates rules from the class registry and lints one file per run().

    Holds only immutable rule objects, validated options and severities, so a
    single engine may serve concurrent runs; per-file state is built in run().
    """

    def __init__(
        self,
        rule_classes: Sequence[type[Rule]] | None = None,
        severities: Mapping[str, RuleSeverity] | None = None,
        options: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> None:
        """Activate rules: resolve severities and validate options.

        Raises:
            ConfigError: On options for an unknown rule or invalid option values.
        """
        from ngstandards.rules.registry import RULE_REGISTRY

        classes = RULE_REGISTRY if rule_classes is None else rule_classes
        known = {cls.id for cls in classes}
        severities = severities or {}
        options = options or {}
        for rule_id in options:
            if rule_id not in known:
                msg = f"Options given for unknown rule: {rule_id!r}"
                raise ConfigError(msg)

        self._rules: list[tuple[Rule, RuleSeverity, BaseModel]] = []
        for cls in classes:
            severity = severities.get(cls.id, cls.default_severity)
            if severity == RuleSeverity.OFF:
                continue
            validated = resolve_options(cls.id, cls.options_model, options.get(cls.id))
            self._rules.append((cls(), severity, validated))

    @property
    def rule_ids(self) -> list[str]:
        return [rule.id for rule, _, _ in self._rules]

    def run(self, source_file: SourceFile) -> LintReport:
        """Traverse the file once and collect every rule's diagnostics."""
        report = LintReport(path=source_file.filename)
        root = source_file.root
        if root is None:
            return report

        dispatch = _Dispatch()
        for rule, severity, options in self._rules:
            active = _ActiveRule(rule.id)
            ctx = RuleContext(
                rule.id,
                rule.messages,
                source_file,
                options,
                severity,
                sink=report.diagnostics.append,
            )
            try:
                dispatch.add_all(active, rule.create(ctx))
            except Exception as exc:
                self._fault(report, active, "create", None, exc)

        stack: list[tuple[Node, bool]] = [(root, False)]
        while stack:
            node, leaving = stack.pop()
            if leaving:
                for active, handler in dispatch.exit.get(node.kind, ()):
                    self._call(report, active, handler, node, node.kind + EXIT_SUFFIX)
                continue
            for active, handler in dispatch.enter.get(node.kind, ()):
                self._call(report, active, handler, node, node.kind)
            for active, selector, handler in dispatch.selectors:
                if active.enabled and selector.matches(node):
                    self._call(report, active, handler, node, str(selector))
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(list(node.children())))

        for active, handler in dispatch.end:
            self._call(report, active, handler, root, TRAVERSAL_END)
        return report

    def _call(
        self,
        report: LintReport,
        active: _ActiveRule,
        handler: Handler,
        node: Node,
        event: str,
    ) -> None:
        if not active.enabled:
            return
        try:
            handler(node)
        except Exception as exc:
            self._fault(report, active, event, node, exc)

    @staticmethod
    def _fault(
        report: LintReport,
        active: _ActiveRule,
        event: str,
        node: Node | None,
        exc: Exception,
    ) -> None:
        active.enabled = False
        log.warning(
            "Rule %s failed on %s in %s; disabled for this file",
            active.rule_id,
            event,
            report.path,
            exc_info=exc,
        )
        report.faults.append(
            RuleFault(
                rule_id=active.rule_id,
                event=event,
                node_kind=node.kind if node is not None else None,
                span=node.span if node is not None else None,
                error=f"{type(exc).__name__}: {exc}",
            )
        )

    def check_gate(self, diagnostics: LintReport | Sequence[Diagnostic]) -> bool:
        """Return True if any diagnostic is at ERROR severity."""
        if isinstance(diagnostics, LintReport):
            diagnostics = diagnostics.diagnostics
        return any(d.severity >= RuleSeverity.ERROR for d in diagnostics)
