# SPDX-License-Identifier: MIT
"""Fix protocol — text edits into the original source, validation, application."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ngstandards.rules.base import NgStandardsError
from ngstandards.rules.nodes import Node, Span

if TYPE_CHECKING:
    from ngstandards.rules.base import Diagnostic


class FixError(NgStandardsError):
    """A rule built an invalid fix (overlapping or out-of-bounds edits)."""


@dataclass(frozen=True)
class TextEdit:
    """Replace the half-open range ``span`` of the original text with ``text``."""

    span: Span
    text: str


@dataclass(frozen=True)
class Fix:
    """Sorted, non-overlapping edits that resolve one diagnostic."""

    edits: tuple[TextEdit, ...]

    @classmethod
    def from_edits(cls, edits: Iterable[TextEdit], source_length: int) -> Fix:
        """Sort and validate edits.

        Raises:
            FixError: If an edit falls outside the source or two edits overlap.
        """
        ordered = sorted(edits, key=lambda e: (e.span.start, e.span.end))
        if not ordered:
            msg = "A fix needs at least one edit"
            raise FixError(msg)
        for edit in ordered:
            if edit.span.end > source_length:
                msg = f"Edit {edit.span} exceeds source length {source_length}"
                raise FixError(msg)
        for prev, nxt in zip(ordered, ordered[1:], strict=False):
            if prev.span.overlaps(nxt.span):
                msg = f"Overlapping edits {prev.span} and {nxt.span}"
                raise FixError(msg)
        return cls(tuple(ordered))

    @property
    def span(self) -> Span:
        """Smallest span covering every edit."""
        return Span(self.edits[0].span.start, max(e.span.end for e in self.edits))

    def conflicts_with(self, other: Fix) -> bool:
        return any(a.span.overlaps(b.span) for a in self.edits for b in other.edits)


class RuleFixer:
    """Edit builders handed to rules through their context."""

    @staticmethod
    def _span(target: Node | Span) -> Span:
        return target.span if isinstance(target, Node) else target

    def insert_before(self, target: Node | Span, text: str) -> TextEdit:
        start = self._span(target).start
        return TextEdit(Span(start, start), text)

    def insert_after(self, target: Node | Span, text: str) -> TextEdit:
        end = self._span(target).end
        return TextEdit(Span(end, end), text)

    def replace(self, target: Node | Span, text: str) -> TextEdit:
        return TextEdit(self._span(target), text)

    def remove(self, target: Node | Span) -> TextEdit:
        return TextEdit(self._span(target), "")


def apply_fix(source: str, fix: Fix) -> str:
    """Apply one fix to the original text."""
    result = source
    for edit in reversed(fix.edits):
        result = result[: edit.span.start] + edit.text + result[edit.span.end :]
    return result


def apply_fixes(source: str, diagnostics: Sequence[Diagnostic]) -> tuple[str, int]:
    """Apply every non-conflicting fix in diagnostic order.

    A fix overlapping one already accepted is skipped; its diagnostic will
    surface again on the next lint pass. Returns (new_text, applied_count).
    """
    accepted: list[Fix] = []
    for diag in diagnostics:
        if diag.fix is None:
            continue
        if any(diag.fix.conflicts_with(prior) for prior in accepted):
            continue
        accepted.append(diag.fix)

    edits = sorted(
        (edit for fix in accepted for edit in fix.edits),
        key=lambda e: (e.span.start, e.span.end),
    )
    result = source
    for edit in reversed(edits):
        result = result[: edit.span.start] + edit.text + result[edit.span.end :]
    return result, len(accepted)
