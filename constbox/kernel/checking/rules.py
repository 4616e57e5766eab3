"""Boundary rules and the runner that applies them to resolved references."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol

from constbox.kernel.checking.models import BoundaryReport
from constbox.kernel.constant_table import ConstantTable
from constbox.kernel.models import ReferenceEvent, ResolvedReference, Violation, ViolationKind
from constbox.kernel.packages import Package, PackageTree


class BoundaryRule(Protocol):
    """Protocol for a single cross-package check."""

    kind: ViolationKind
    description: str

    def check(
        self, name: str, reference: ReferenceEvent, using: Package, defining: Package
    ) -> Violation | None:
        """Check one cross-package reference to ``name``."""
        ...


class PrivacyRule:
    """The defining package must export the referenced name."""

    kind: ViolationKind = "privacy"
    description = "Reference to a name its package does not export"

    def check(
        self, name: str, reference: ReferenceEvent, using: Package, defining: Package
    ) -> Violation | None:
        """Flag ``name`` unless ``defining`` exports it."""
        # The implicit root has no configuration to declare exports in
        if defining.implicit or name in defining.exports:
            return None
        return Violation(
            kind=self.kind,
            name=name,
            referencing_package=using.root,
            defining_package=defining.root,
            location=reference.location,
        )


class DependencyRule:
    """The referencing package must import the referenced name."""

    kind: ViolationKind = "dependency"
    description = "Reference to a name the referencing package does not import"

    def check(
        self, name: str, reference: ReferenceEvent, using: Package, defining: Package
    ) -> Violation | None:
        """Flag ``name`` unless ``using`` imports it."""
        if using.implicit or name in using.imports:
            return None
        return Violation(
            kind=self.kind,
            name=name,
            referencing_package=using.root,
            defining_package=defining.root,
            location=reference.location,
        )


ALL_BOUNDARY_RULES: tuple[BoundaryRule, ...] = (PrivacyRule(), DependencyRule())


def run_rules(
    rules: Sequence[BoundaryRule],
    resolved: Iterable[ResolvedReference],
    table: ConstantTable,
    tree: PackageTree,
) -> BoundaryReport:
    """Run rules over every resolved cross-package reference.

    Unresolved references and references within one package are skipped.
    """
    report = BoundaryReport()
    for item in resolved:
        if item.canonical_name is None:
            continue
        entry = table.lookup(item.canonical_name)
        if entry is None:
            continue

        using = tree.owner(item.reference.location.file)
        defining = tree.owner(entry.location.file)
        if using.root == defining.root:
            continue

        for rule in rules:
            violation = rule.check(item.canonical_name, item.reference, using, defining)
            if violation is not None:
                report.add(violation)
    return report
