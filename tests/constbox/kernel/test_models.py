"""Tests for constbox.kernel.models."""

from __future__ import annotations

from constbox.kernel.models import (
    ConfigError,
    DefinitionEvent,
    ReferenceEvent,
    SourceLocation,
    SyntaxFailure,
    Violation,
    join_name,
    split_name,
)


class TestNames:
    """Canonical name helpers."""

    def test_join_and_split(self) -> None:
        assert join_name("A", "", "B") == "A::B"
        assert split_name("A::B::C") == ("A", "B", "C")
        assert split_name("::A") == ("A",)

    def test_canonical_name_uses_innermost_frame(self) -> None:
        definition = DefinitionEvent(
            segments=("Widget",),
            nesting=(("A",), ("A", "B")),
            location=SourceLocation("a/b/widget.rb", 3),
        )
        assert definition.canonical_name == "A::B::Widget"

    def test_reference_name_marks_root(self) -> None:
        location = SourceLocation("x.rb", 1)
        assert ReferenceEvent(("A", "B"), (), location).name == "A::B"
        assert ReferenceEvent(("A",), (), location, absolute=True).name == "::A"


class TestRendering:
    """Report line formats."""

    def test_violation_lines(self) -> None:
        location = SourceLocation("b/use.rb", 5)
        privacy = Violation("privacy", "A::Widget", "b", "a", location)
        dependency = Violation("dependency", "A::Widget", "b", "a", location)
        assert str(privacy) == "non exported reference A::Widget found in b/use.rb on line 5"
        assert str(dependency) == "non imported reference A::Widget found in b/use.rb on line 5"

    def test_locations_order_by_file_then_line(self) -> None:
        locations = [
            SourceLocation("b.rb", 1),
            SourceLocation("a.rb", 10),
            SourceLocation("a.rb", 2),
        ]
        assert [str(loc) for loc in sorted(locations)] == ["a.rb:2", "a.rb:10", "b.rb:1"]

    def test_error_lines(self) -> None:
        failure = SyntaxFailure("a/x.rb", "not valid UTF-8")
        assert str(failure) == "skipped a/x.rb: not valid UTF-8"
        assert str(ConfigError("a/box.yml", "bad")) == "invalid box a/box.yml: bad"
