"""Boundary checking: privacy and dependency rules."""

from constbox.kernel.checking.models import BoundaryReport
from constbox.kernel.checking.rules import (
    ALL_BOUNDARY_RULES,
    BoundaryRule,
    DependencyRule,
    PrivacyRule,
    run_rules,
)

__all__ = [
    "ALL_BOUNDARY_RULES",
    "BoundaryReport",
    "BoundaryRule",
    "DependencyRule",
    "PrivacyRule",
    "run_rules",
]
