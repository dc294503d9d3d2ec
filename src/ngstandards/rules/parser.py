# SPDX-License-Identifier: MIT
"""Tree producer adapter — tree-sitter TypeScript trees to the Node model.

Attribute layout per node:
    - field-labelled children under their field name (repeated fields -> tuple)
    - unlabelled named children under their kind (first occurrence)
    - ``text`` on named leaves, ``value`` on string literals
    - modifier keywords (``async``, ``static``, ...) as ``True`` flags
Comments are dropped; tree-sitter byte offsets become ``str`` indices.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

import tree_sitter_typescript as tsts
from tree_sitter import Language, Parser

from ngstandards.rules.nodes import AttributeValue, Node, SourceFile, Span, link_parents

if TYPE_CHECKING:
    from tree_sitter import Node as TSNode

log = logging.getLogger(__name__)

MODIFIER_KEYWORDS = frozenset(
    {
        "abstract",
        "async",
        "declare",
        "default",
        "export",
        "get",
        "override",
        "readonly",
        "set",
        "static",
    }
)

_SKIPPED_KINDS = frozenset({"comment", "html_comment"})


@lru_cache(maxsize=2)
def _language(tsx: bool) -> Language:
    capsule = tsts.language_tsx() if tsx else tsts.language_typescript()
    return Language(capsule)


def _offset_map(raw: bytes, text: str) -> list[int] | None:
    """Byte offset -> character offset table, or None when they coincide."""
    if len(raw) == len(text):
        return None
    table: list[int] = []
    for index, ch in enumerate(text):
        table.extend([index] * len(ch.encode("utf-8")))
    table.append(len(text))
    return table


def _iter_fields(ts_node: TSNode):
    """Yield (field_name, child) for every child, anonymous tokens included."""
    cursor = ts_node.walk()
    if not cursor.goto_first_child():
        return
    while True:
        yield cursor.field_name, cursor.node
        if not cursor.goto_next_sibling():
            break


def parse_source(text: str, filename: str = "<input>") -> SourceFile:
    """Parse TypeScript source and build its Node model.

    ``.tsx`` filenames use the TSX grammar. Syntax errors do not raise:
    tree-sitter recovers, the file is flagged and a warning is logged.
    """
    raw = text.encode("utf-8")
    parser = Parser(_language(filename.endswith(".tsx")))
    tree = parser.parse(raw)
    source = SourceFile(text, filename)
    offsets = _offset_map(raw, text)

    def span_of(ts_node: TSNode) -> Span:
        if offsets is None:
            return Span(ts_node.start_byte, ts_node.end_byte)
        return Span(offsets[ts_node.start_byte], offsets[ts_node.end_byte])

    # Post-order build with explicit stacks; deep trees stay off the call stack.
    # Finished nodes land on `built` in source order, so a parent's children
    # are always the top entries when the parent itself is finished.
    root_ts = tree.root_node
    pending: list[tuple[TSNode, int]] = [(root_ts, -1)]
    built: list[Node] = []
    while pending:
        ts_node, arity = pending.pop()
        if arity < 0:
            named = [c for c in ts_node.named_children if c.type not in _SKIPPED_KINDS]
            pending.append((ts_node, len(named)))
            pending.extend((child, -1) for child in reversed(named))
            continue

        built_children = built[len(built) - arity :] if arity else []
        del built[len(built) - arity :]
        next_child = iter(built_children)

        attributes: dict[str, AttributeValue] = {}
        by_kind: dict[str, Node] = {}
        children: list[Node] = []
        for field, child in _iter_fields(ts_node):
            if not child.is_named:
                if child.type in MODIFIER_KEYWORDS and field is None:
                    attributes.setdefault(child.type, True)
                continue
            if child.type in _SKIPPED_KINDS:
                continue
            node = next(next_child)
            children.append(node)
            if field is None:
                by_kind.setdefault(child.type, node)
                continue
            existing = attributes.get(field)
            if isinstance(existing, Node):
                attributes[field] = (existing, node)
            elif isinstance(existing, tuple):
                attributes[field] = (*existing, node)
            else:
                attributes[field] = node
        for kind, node in by_kind.items():
            attributes.setdefault(kind, node)

        span = span_of(ts_node)
        if not children:
            attributes.setdefault("text", text[span.start : span.end])
        if ts_node.type == "string":
            attributes["value"] = text[span.start + 1 : span.end - 1]

        built.append(Node(ts_node.type, span, source, attributes, tuple(children)))

    root = built.pop()
    link_parents(root)
    source.root = root
    source.has_errors = root_ts.has_error
    if source.has_errors:
        log.warning("Syntax errors in %s; analyzing recovered tree", filename)
    return source
