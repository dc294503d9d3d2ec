# SPDX-License-Identifier: MIT
"""Tests for ngstandards.rules.fixes — edit validation and fix application."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from ngstandards.rules.base import Diagnostic
from ngstandards.rules.fixes import Fix, FixError, RuleFixer, TextEdit, apply_fix, apply_fixes
from ngstandards.rules.nodes import Span
from ngstandards.rules.parser import parse_source


def _edit(start: int, end: int, text: str = "") -> TextEdit:
    return TextEdit(Span(start, end), text)


def _diag(fix: Fix | None) -> Diagnostic:
    return Diagnostic(rule_id="r", message_id="m", message="m", span=Span(0, 0), fix=fix)


class TestFixValidation:
    def test_edits_are_sorted(self) -> None:
        fix = Fix.from_edits([_edit(5, 6, "b"), _edit(0, 1, "a")], 10)
        assert [e.span.start for e in fix.edits] == [0, 5]

    def test_empty_fix_rejected(self) -> None:
        with pytest.raises(FixError, match="at least one edit"):
            Fix.from_edits([], 10)

    def test_out_of_bounds_rejected(self) -> None:
        with pytest.raises(FixError, match="exceeds source length"):
            Fix.from_edits([_edit(8, 11)], 10)

    def test_insert_at_end_allowed(self) -> None:
        fix = Fix.from_edits([_edit(10, 10, "!")], 10)
        assert fix.span == Span(10, 10)

    def test_overlap_rejected(self) -> None:
        with pytest.raises(FixError, match="Overlapping"):
            Fix.from_edits([_edit(0, 4), _edit(3, 6)], 10)

    def test_two_inserts_at_same_offset_rejected(self) -> None:
        with pytest.raises(FixError, match="Overlapping"):
            Fix.from_edits([_edit(2, 2, "a"), _edit(2, 2, "b")], 10)

    def test_touching_edits_allowed(self) -> None:
        fix = Fix.from_edits([_edit(0, 2, "x"), _edit(2, 4, "y")], 10)
        assert len(fix.edits) == 2

    def test_span_covers_all_edits(self) -> None:
        fix = Fix.from_edits([_edit(1, 2), _edit(6, 9)], 10)
        assert fix.span == Span(1, 9)

    def test_conflicts_with(self) -> None:
        a = Fix.from_edits([_edit(0, 3)], 10)
        b = Fix.from_edits([_edit(2, 5)], 10)
        c = Fix.from_edits([_edit(5, 6)], 10)
        assert a.conflicts_with(b)
        assert not a.conflicts_with(c)


class TestRuleFixer:
    def test_builders_on_node(self) -> None:
        sf = parse_source("foo(1);")
        call = next(sf.root.children())
        fixer = RuleFixer()
        assert fixer.insert_before(call, "x").span == Span(call.span.start, call.span.start)
        assert fixer.insert_after(call, "x").span == Span(call.span.end, call.span.end)
        assert fixer.replace(call, "y") == TextEdit(call.span, "y")
        assert fixer.remove(call) == TextEdit(call.span, "")

    def test_builders_on_span(self) -> None:
        fixer = RuleFixer()
        assert fixer.insert_after(Span(2, 4), ",") == TextEdit(Span(4, 4), ",")


class TestApply:
    def test_apply_fix_right_to_left(self) -> None:
        source = "let a = 1;"
        fix = Fix.from_edits([_edit(4, 5, "total"), _edit(8, 9, "42")], len(source))
        assert apply_fix(source, fix) == "let total = 42;"

    def test_apply_fixes_skips_conflicts(self) -> None:
        source = "abcdef"
        first = Fix.from_edits([_edit(0, 3, "X")], len(source))
        clash = Fix.from_edits([_edit(2, 4, "Y")], len(source))
        later = Fix.from_edits([_edit(5, 6, "Z")], len(source))
        text, count = apply_fixes(source, [_diag(first), _diag(clash), _diag(None), _diag(later)])
        assert text == "XdeZ"
        assert count == 2

    def test_apply_fixes_without_fixes(self) -> None:
        assert apply_fixes("same", [_diag(None)]) == ("same", 0)


@st.composite
def _edits(draw: st.DrawFn) -> tuple[str, list[TextEdit]]:
    source = draw(st.text(alphabet="abc \n", max_size=30))
    n = len(source)
    edits = []
    for _ in range(draw(st.integers(0, 5))):
        start = draw(st.integers(0, n))
        end = draw(st.integers(start, n))
        edits.append(_edit(start, end, draw(st.text(alphabet="xyz", max_size=4))))
    return source, edits


@given(case=_edits())
@settings(max_examples=300)
def test_valid_fixes_are_sorted_and_disjoint(case: tuple[str, list[TextEdit]]) -> None:
    source, edits = case
    try:
        fix = Fix.from_edits(edits, len(source))
    except FixError:
        return
    for prev, nxt in zip(fix.edits, fix.edits[1:], strict=False):
        assert prev.span.start <= nxt.span.start
        assert not prev.span.overlaps(nxt.span)
    removed = sum(len(e.span) for e in fix.edits)
    added = sum(len(e.text) for e in fix.edits)
    assert len(apply_fix(source, fix)) == len(source) - removed + added


@given(case=_edits())
@settings(max_examples=200)
def test_apply_fixes_never_applies_overlapping_edits(case: tuple[str, list[TextEdit]]) -> None:
    source, edits = case
    diagnostics = [_diag(Fix.from_edits([e], len(source))) for e in edits]
    _, count = apply_fixes(source, diagnostics)
    assert 0 <= count <= len(diagnostics)
    if edits:
        assert count >= 1
