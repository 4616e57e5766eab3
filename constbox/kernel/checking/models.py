"""Aggregated results of boundary checking."""

from __future__ import annotations

from collections.abc import Iterable

from constbox.kernel.models import Violation


class BoundaryReport:
    """Violations found by running boundary rules over resolved references."""

    __slots__ = ("_violations",)

    def __init__(self, violations: Iterable[Violation] = ()) -> None:
        """Initialize a report, optionally seeded with violations."""
        self._violations: set[Violation] = set(violations)

    def add(self, violation: Violation) -> None:
        """Add a violation; duplicates collapse."""
        self._violations.add(violation)

    def merge(self, other: BoundaryReport) -> None:
        """Fold another report (e.g. from a worker) into this one."""
        self._violations.update(other._violations)

    @property
    def violations(self) -> list[Violation]:
        """All violations sorted by file, line, kind and name."""
        return sorted(self._violations, key=Violation.sort_key)

    @property
    def privacy(self) -> list[Violation]:
        """Violations of a defining package's exports."""
        return [v for v in self.violations if v.kind == "privacy"]

    @property
    def dependency(self) -> list[Violation]:
        """Violations of a referencing package's imports."""
        return [v for v in self.violations if v.kind == "dependency"]

    @property
    def is_clean(self) -> bool:
        return not self._violations

    def __len__(self) -> int:
        return len(self._violations)

