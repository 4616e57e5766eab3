"""Usage aggregation: candidate allow-lists for one package.

Run the checks with every allow-list empty and every cross-package reference
becomes a violation. Restricted to one package, dependency violations raised
from inside it name what it imports, and privacy violations against names it
defines name what it must export.
"""

from __future__ import annotations

from dataclasses import dataclass

from constbox.kernel.checking.models import BoundaryReport
from constbox.kernel.models import Violation
from constbox.kernel.packages import normalize_dir


@dataclass(frozen=True, slots=True)
class PackageUsage:
    """Candidate allow-lists for one package, with the references behind them.

    Attributes
    ----------
    package : str
        Package root directory
    exports : tuple[str, ...]
        Own names referenced from other packages, sorted
    imports : tuple[str, ...]
        Other packages' names referenced from this package, sorted
    evidence : tuple[Violation, ...]
        The underlying violations, sorted by location
    """

    package: str
    exports: tuple[str, ...] = ()
    imports: tuple[str, ...] = ()
    evidence: tuple[Violation, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.exports and not self.imports


def aggregate_usage(report: BoundaryReport, package: str) -> PackageUsage:
    """Partition the violations involving ``package`` into candidate allow-lists.

    Parameters
    ----------
    report : BoundaryReport
        Findings of a run with empty allow-lists
    package : str
        Root directory of the focal package

    Returns
    -------
    PackageUsage
        Candidate exports and imports for ``package``
    """
    package = normalize_dir(package)
    exports: set[str] = set()
    imports: set[str] = set()
    evidence: list[Violation] = []

    for violation in report.violations:
        if violation.kind == "dependency" and violation.referencing_package == package:
            imports.add(violation.name)
            evidence.append(violation)
        elif violation.kind == "privacy" and violation.defining_package == package:
            exports.add(violation.name)
            evidence.append(violation)

    return PackageUsage(
        package=package,
        exports=tuple(sorted(exports)),
        imports=tuple(sorted(imports)),
        evidence=tuple(evidence),
    )
