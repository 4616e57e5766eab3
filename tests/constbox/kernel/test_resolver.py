"""Tests for constbox.kernel.resolver."""

from __future__ import annotations

from constbox.kernel.constant_table import ConstantEntry, ConstantTable
from constbox.kernel.models import ReferenceEvent, SourceLocation
from constbox.kernel.resolver import candidate_prefixes, resolve, resolve_all

_HERE = SourceLocation("lib/use.rb", 1)


def _table(*names: str) -> ConstantTable:
    return ConstantTable({
        name: ConstantEntry(name=name, package=".", location=_HERE, kind="namespace")
        for name in names
    })


def _ref(name: str, *frames: str, absolute: bool = False) -> ReferenceEvent:
    return ReferenceEvent(
        segments=tuple(name.split("::")),
        nesting=tuple(tuple(frame.split("::")) for frame in frames),
        location=_HERE,
        absolute=absolute,
    )


class TestCandidatePrefixes:
    """Order in which prefixes are tried."""

    def test_innermost_first_then_root(self) -> None:
        reference = _ref("Widget", "A", "A::B", "A::B::C")
        assert candidate_prefixes(reference) == [("A", "B", "C"), ("A", "B"), ("A",), ()]

    def test_root_anchored_tries_only_root(self) -> None:
        assert candidate_prefixes(_ref("Widget", "A", absolute=True)) == [()]

    def test_top_level_tries_root(self) -> None:
        assert candidate_prefixes(_ref("Widget")) == [()]


class TestResolve:
    """Resolution against a constant table."""

    def test_innermost_match_wins(self) -> None:
        table = _table("A", "A::Widget", "Widget")
        resolved = resolve(_ref("Widget", "A"), table)
        assert resolved.canonical_name == "A::Widget"
        assert resolved.is_resolved

    def test_falls_back_to_outer_and_root(self) -> None:
        table = _table("A", "A::B", "Widget")
        assert resolve(_ref("Widget", "A", "A::B"), table).canonical_name == "Widget"

    def test_root_anchored_skips_nesting(self) -> None:
        table = _table("A", "A::Widget", "Widget")
        assert resolve(_ref("Widget", "A", absolute=True), table).canonical_name == "Widget"

    def test_compound_reference(self) -> None:
        table = _table("A", "A::Widget", "B")
        assert resolve(_ref("A::Widget", "B"), table).canonical_name == "A::Widget"

    def test_compound_reference_fails_on_missing_segment(self) -> None:
        table = _table("A", "A::Widget")
        assert resolve(_ref("A::Gadget"), table).canonical_name is None

    def test_compound_does_not_backtrack_to_outer_prefix(self) -> None:
        # B::A shadows ::A, and B::A has no Widget
        table = _table("A", "A::Widget", "B", "B::A")
        resolved = resolve(_ref("A::Widget", "B"), table)
        assert resolved.canonical_name is None
        assert not resolved.is_resolved

    def test_implied_namespace_resolves_first_segment(self) -> None:
        # class A::Widget declared without a separate module A
        table = _table("A::Widget")
        assert resolve(_ref("A::Widget"), table).canonical_name == "A::Widget"

    def test_implied_namespace_alone_is_unresolved(self) -> None:
        assert resolve(_ref("A"), _table("A::Widget")).canonical_name is None

    def test_undefined_name_is_unresolved(self) -> None:
        assert resolve(_ref("Nowhere", "A"), _table("A")).canonical_name is None

    def test_exact_match_only(self) -> None:
        assert resolve(_ref("widget"), _table("Widget")).canonical_name is None

    def test_resolve_all_keeps_order(self) -> None:
        table = _table("A", "B")
        results = resolve_all([_ref("B"), _ref("C"), _ref("A")], table)
        assert [r.canonical_name for r in results] == ["B", None, "A"]
