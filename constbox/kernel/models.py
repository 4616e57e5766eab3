"""Value types shared by every analysis phase.

Everything here is immutable so that extraction results and the frozen
lookup structures can be handed to worker threads without locking.
Paths are POSIX strings relative to the analyzed repository root.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

SCOPE_SEPARATOR = "::"

# A frame is the fully qualified segment tuple of one open namespace.
ScopeFrame = tuple[str, ...]
NestingPath = tuple[ScopeFrame, ...]

DefinitionKind = Literal["namespace", "value"]
ViolationKind = Literal["privacy", "dependency"]

_VIOLATION_LABELS: dict[str, str] = {
    "privacy": "non exported",
    "dependency": "non imported",
}


def join_name(*segments: str) -> str:
    """Join name segments with the scope separator, skipping empty ones."""
    return SCOPE_SEPARATOR.join(s for s in segments if s)


def split_name(name: str) -> tuple[str, ...]:
    """Split a canonical name into its segments."""
    return tuple(s for s in name.split(SCOPE_SEPARATOR) if s)


@dataclass(frozen=True, slots=True, order=True)
class SourceLocation:
    """A file and 1-based line number."""

    file: str
    line: int

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"


@dataclass(frozen=True, slots=True)
class DefinitionEvent:
    """A namespace opening or constant assignment.

    Attributes
    ----------
    segments : tuple[str, ...]
        Declared name segments; more than one for compact declarations
        such as ``class Billing::Invoice``.
    nesting : NestingPath
        Namespaces open at the point of declaration, outermost first.
    location : SourceLocation
        Where the declaration starts.
    kind : DefinitionKind
        ``"namespace"`` for class/module, ``"value"`` for constant assignment.
    """

    segments: tuple[str, ...]
    nesting: NestingPath
    location: SourceLocation
    kind: DefinitionKind = "namespace"

    @property
    def canonical_name(self) -> str:
        enclosing = self.nesting[-1] if self.nesting else ()
        return join_name(*enclosing, *self.segments)


@dataclass(frozen=True, slots=True)
class ReferenceEvent:
    """A use of a constant name.

    ``absolute`` marks a root-anchored reference (``::Foo``).
    """

    segments: tuple[str, ...]
    nesting: NestingPath
    location: SourceLocation
    absolute: bool = False

    @property
    def name(self) -> str:
        written = join_name(*self.segments)
        return f"{SCOPE_SEPARATOR}{written}" if self.absolute else written


@dataclass(frozen=True, slots=True)
class SourceUnit:
    """Everything extracted from one source file."""

    path: str
    definitions: tuple[DefinitionEvent, ...] = ()
    references: tuple[ReferenceEvent, ...] = ()


@dataclass(frozen=True, slots=True, order=True)
class SyntaxFailure:
    """A file excluded from analysis because it could not be parsed or read."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"skipped {self.path}: {self.reason}"


@dataclass(frozen=True, slots=True, order=True)
class ConfigError:
    """A package configuration that was rejected.

    The directory does not become a package; its files fall back to the
    nearest ancestor package.
    """

    path: str
    reason: str

    def __str__(self) -> str:
        return f"invalid box {self.path}: {self.reason}"


@dataclass(frozen=True, slots=True)
class ResolvedReference:
    """A reference paired with the canonical name it denotes, if any."""

    reference: ReferenceEvent
    canonical_name: str | None

    @property
    def is_resolved(self) -> bool:
        return self.canonical_name is not None


@dataclass(frozen=True, slots=True)
class Violation:
    """A cross-package reference not covered by the allow-lists."""

    kind: ViolationKind
    name: str
    referencing_package: str
    defining_package: str
    location: SourceLocation

    @property
    def label(self) -> str:
        return _VIOLATION_LABELS[self.kind]

    def sort_key(self) -> tuple[str, int, str, str]:
        return (self.location.file, self.location.line, self.kind, self.name)

    def __str__(self) -> str:
        return (
            f"{self.label} reference {self.name} found in "
            f"{self.location.file} on line {self.location.line}"
        )


@dataclass(frozen=True, slots=True)
class DefinitionConflict:
    """The same canonical name defined under more than one package.

    ``package``/``location`` is the definition used for resolution;
    ``others`` holds the first location seen in each other package.
    """

    name: str
    package: str
    location: SourceLocation
    others: tuple[tuple[str, SourceLocation], ...] = field(default=())

    def __str__(self) -> str:
        rest = " and ".join(f"{pkg} ({loc})" for pkg, loc in self.others)
        return (
            f"definition conflict {self.name} defined in "
            f"{self.package} ({self.location}) and {rest}"
        )
