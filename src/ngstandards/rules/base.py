# SPDX-License-Identifier: MIT
"""Rule severity, diagnostic dataclasses, and Rule protocol for the lint engine."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, ClassVar, Protocol, Union, runtime_checkable

from ngstandards.rules.nodes import Node, Span

if TYPE_CHECKING:
    from pydantic import BaseModel

    from ngstandards.rules.context import RuleContext
    from ngstandards.rules.fixes import Fix
    from ngstandards.rules.selectors import Selector

# Pseudo-event fired once after the whole tree has been visited.
TRAVERSAL_END = "traversal:end"
EXIT_SUFFIX = ":exit"

Handler = Callable[[Node], None]
EventKey = Union[str, "Selector"]


class NgStandardsError(Exception):
    """Base class for every error raised by the lint engine."""


class RuleSeverity(IntEnum):
    """Severity levels for rule findings, ordered for gate comparison."""

    OFF = 0
    WARN = 1
    ERROR = 2


@dataclass(frozen=True)
class Diagnostic:
    """A single reported violation."""

    rule_id: str
    message_id: str
    message: str
    span: Span
    severity: RuleSeverity = RuleSeverity.ERROR
    data: Mapping[str, str] = field(default_factory=dict)
    fix: Fix | None = None


@dataclass(frozen=True)
class RuleFault:
    """A rule handler raised; the rule stopped reporting for this file."""

    rule_id: str
    event: str
    node_kind: str | None
    span: Span | None
    error: str


@dataclass
class LintReport:
    """Everything one file's analysis produced."""

    path: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    faults: list[RuleFault] = field(default_factory=list)

    def for_rule(self, rule_id: str) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.rule_id == rule_id]

    @property
    def message_ids(self) -> list[str]:
        return [d.message_id for d in self.diagnostics]


@runtime_checkable
class Rule(Protocol):
    """Protocol that every lint rule must satisfy.

    ``create`` runs once per file and returns the handler table for that
    traversal. Keys are a node kind (enter), ``"<kind>:exit"``, a compiled
    ``Selector``, or ``TRAVERSAL_END``. Per-file state lives in the closure.
    """

    id: ClassVar[str]
    description: ClassVar[str]
    default_severity: ClassVar[RuleSeverity]
    fixable: ClassVar[bool]
    messages: ClassVar[Mapping[str, str]]
    options_model: ClassVar[type[BaseModel]]

    def create(self, ctx: RuleContext) -> Mapping[EventKey, Handler]: ...
