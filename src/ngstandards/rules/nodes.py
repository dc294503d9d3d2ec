# SPDX-License-Identifier: MIT
"""Node model — read-only, kind-tagged view over one parsed source file."""

from __future__ import annotations

import weakref
from bisect import bisect_right
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Union

AttributeValue = Union[str, int, float, bool, "Node", tuple["Node", ...], None]


class _Missing:
    """Sentinel for an attribute path that does not resolve."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


@dataclass(frozen=True, order=True)
class Span:
    """Half-open [start, end) character range into the source text."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            msg = f"Invalid span: [{self.start}, {self.end})"
            raise ValueError(msg)

    def __len__(self) -> int:
        return self.end - self.start

    def contains(self, other: Span) -> bool:
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: Span) -> bool:
        """True if the ranges share a character, or are the same insertion point."""
        if self.start == self.end == other.start == other.end:
            return True
        return self.start < other.end and other.start < self.end


def split_path(path: str) -> tuple[str | int, ...]:
    """Split a dotted attribute path; all-digit segments become positions."""
    segments: list[str | int] = []
    for part in path.split("."):
        segments.append(int(part) if part.isdigit() else part)
    return tuple(segments)


class Node:
    """One syntax node: kind tag, span, attribute map, children, parent link.

    Attribute lookups never raise. An absent attribute reads as ``None``
    through ``attribute()`` and as ``MISSING`` through ``resolve()``.
    """

    __slots__ = ("__weakref__", "_attributes", "_children", "_parent", "_source", "kind", "span")

    def __init__(
        self,
        kind: str,
        span: Span,
        source: SourceFile,
        attributes: dict[str, AttributeValue] | None = None,
        children: tuple[Node, ...] = (),
    ) -> None:
        self.kind = kind
        self.span = span
        self._source = source
        self._attributes: dict[str, AttributeValue] = attributes or {}
        self._children = children
        self._parent: weakref.ref[Node] | None = None

    def __repr__(self) -> str:
        return f"Node({self.kind!r}, {self.span.start}..{self.span.end})"

    @property
    def attributes(self) -> Mapping[str, AttributeValue]:
        return self._attributes

    @property
    def parent(self) -> Node | None:
        return self._parent() if self._parent is not None else None

    @property
    def text(self) -> str:
        return self.source_text()

    @property
    def source(self) -> SourceFile:
        return self._source

    def children(self) -> Iterator[Node]:
        """Iterate direct named children in source order (restartable per call)."""
        return iter(self._children)

    def resolve(self, path: str | tuple[str | int, ...]) -> AttributeValue | _Missing:
        """Follow a dotted attribute path; MISSING as soon as a segment is absent."""
        segments = split_path(path) if isinstance(path, str) else path
        current: object = self
        for segment in segments:
            if isinstance(segment, int):
                # A field that occurred once is its own position 0
                if isinstance(current, Node) and segment == 0:
                    continue
                if not isinstance(current, tuple) or segment >= len(current):
                    return MISSING
                current = current[segment]
            else:
                if not isinstance(current, Node) or segment not in current._attributes:
                    return MISSING
                current = current._attributes[segment]
            if current is None:
                return MISSING
        return current  # type: ignore[return-value]

    def attribute(self, path: str) -> AttributeValue:
        value = self.resolve(path)
        return None if value is MISSING else value  # type: ignore[return-value]

    def attribute_nodes(self, name: str) -> tuple[Node, ...]:
        """Return a possibly repeated field as a tuple of nodes."""
        value = self._attributes.get(name)
        if isinstance(value, Node):
            return (value,)
        if isinstance(value, tuple):
            return value
        return ()

    def children_of_kind(self, *kinds: str) -> list[Node]:
        return [child for child in self._children if child.kind in kinds]

    def source_text(self, span: Span | None = None) -> str:
        target = span or self.span
        return self._source.text[target.start : target.end]

    def ancestors(self) -> Iterator[Node]:
        current = self.parent
        while current is not None:
            yield current
            current = current.parent


class SourceFile:
    """Source text, filename and the root of its Node model."""

    def __init__(self, text: str, filename: str = "<input>") -> None:
        self.text = text
        self.filename = filename
        self.root: Node | None = None
        self.has_errors = False
        self._line_starts: list[int] | None = None

    def __len__(self) -> int:
        return len(self.text)

    def line_col(self, offset: int) -> tuple[int, int]:
        """1-based (line, column) for a character offset."""
        if self._line_starts is None:
            starts = [0]
            for i, ch in enumerate(self.text):
                if ch == "\n":
                    starts.append(i + 1)
            self._line_starts = starts
        line = bisect_right(self._line_starts, offset) - 1
        return line + 1, offset - self._line_starts[line] + 1

    def line_indent(self, offset: int) -> str:
        """Leading whitespace of the line containing offset."""
        line_start = self.text.rfind("\n", 0, offset) + 1
        end = line_start
        while end < len(self.text) and self.text[end] in " \t":
            end += 1
        return self.text[line_start:end]


def link_parents(root: Node) -> None:
    """Set weak parent references for every node below root."""
    stack = [root]
    while stack:
        node = stack.pop()
        for child in node._children:
            child._parent = weakref.ref(node)
            stack.append(child)
