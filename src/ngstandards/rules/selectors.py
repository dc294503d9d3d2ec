# SPDX-License-Identifier: MIT
"""Selector matcher — node kind plus attribute-path equality/existence constraints.

Compact form, parsed once at compile time::

    decorator[call_expression.function.text="Injectable"]
    import_statement[source.value="@angular/core"][import_clause]

``[path]`` is an existence check; ``[path=literal]`` compares for equality.
Literals: double- or single-quoted strings, integers, floats, true/false/null.
Constraints are conjunctive; there is no disjunction or negation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ngstandards.rules.base import NgStandardsError
from ngstandards.rules.nodes import MISSING, Node, split_path

Literal = str | int | float | bool | None


class _Exists:
    def __repr__(self) -> str:
        return "EXISTS"


EXISTS = _Exists()


class SelectorError(NgStandardsError):
    """Raised when a selector is malformed; always at rule registration time."""


@dataclass(frozen=True)
class Constraint:
    path: tuple[str | int, ...]
    expected: Literal | _Exists

    def holds(self, node: Node) -> bool:
        value = node.resolve(self.path)
        if value is MISSING:
            return False
        if self.expected is EXISTS:
            return True
        if isinstance(value, Node | tuple):
            return False
        # bool is an int subclass; keep True != 1 for literal comparisons
        if isinstance(self.expected, bool) or isinstance(value, bool):
            return type(value) is type(self.expected) and value == self.expected
        return value == self.expected


@dataclass(frozen=True)
class Selector:
    """Compiled selector: a pure predicate over nodes."""

    kind: str
    constraints: tuple[Constraint, ...] = field(default=())

    def __post_init__(self) -> None:
        if not _KIND_RE.fullmatch(self.kind):
            msg = f"Invalid node kind in selector: {self.kind!r}"
            raise SelectorError(msg)

    def matches(self, node: Node) -> bool:
        if node.kind != self.kind:
            return False
        return all(c.holds(node) for c in self.constraints)

    def __str__(self) -> str:
        parts = [self.kind]
        for c in self.constraints:
            path = ".".join(str(s) for s in c.path)
            if c.expected is EXISTS:
                parts.append(f"[{path}]")
            else:
                parts.append(f"[{path}={_format_literal(c.expected)}]")
        return "".join(parts)


_KIND_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_SEGMENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*|\d+")
_CONSTRAINT_RE = re.compile(
    r"""\[\s*
        (?P<path>[^\]=\s]+)
        \s*
        (?:=\s*(?P<value>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'|[^\]\s]+)\s*)?
        \]""",
    re.VERBOSE,
)


def _format_literal(value: Literal) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return str(value)


def _parse_literal(raw: str, selector: str) -> Literal:
    if raw[0] in "\"'":
        return re.sub(r"\\(.)", r"\1", raw[1:-1])
    if raw == "true":
        return True
    if raw == "false":
        return False
    if raw == "null":
        return None
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        msg = f"Unrecognized literal {raw!r} in selector {selector!r}"
        raise SelectorError(msg) from None


def _parse_path(raw: str, selector: str) -> tuple[str | int, ...]:
    parts = raw.split(".")
    if not all(_SEGMENT_RE.fullmatch(p) for p in parts):
        msg = f"Invalid attribute path {raw!r} in selector {selector!r}"
        raise SelectorError(msg)
    return split_path(raw)


def constraint(path: str, expected: Literal | _Exists = EXISTS) -> Constraint:
    """Build a single constraint from a dotted path."""
    return Constraint(_parse_path(path, path), expected)


def compile_selector(text: str) -> Selector:
    """Compile the compact selector form into a Selector.

    Raises:
        SelectorError: If the text is not a well-formed selector.
    """
    stripped = text.strip()
    kind_match = _KIND_RE.match(stripped)
    if not kind_match:
        msg = f"Selector must start with a node kind: {text!r}"
        raise SelectorError(msg)

    constraints: list[Constraint] = []
    pos = kind_match.end()
    while pos < len(stripped):
        match = _CONSTRAINT_RE.match(stripped, pos)
        if not match:
            msg = f"Malformed constraint at offset {pos} in selector {text!r}"
            raise SelectorError(msg)
        path = _parse_path(match.group("path"), text)
        raw_value = match.group("value")
        expected = EXISTS if raw_value is None else _parse_literal(raw_value, text)
        constraints.append(Constraint(path, expected))
        pos = match.end()

    return Selector(kind_match.group(0), tuple(constraints))
