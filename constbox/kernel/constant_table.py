"""Global index from canonical name to defining package.

Built once per run from every extracted file, read-only afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from constbox.kernel.logging import get_logger
from constbox.kernel.models import (
    DefinitionConflict,
    DefinitionEvent,
    DefinitionKind,
    SourceLocation,
    SourceUnit,
    join_name,
    split_name,
)

if TYPE_CHECKING:
    from constbox.kernel.packages import PackageTree

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ConstantEntry:
    """Where a canonical name is first defined."""

    name: str
    package: str
    location: SourceLocation
    kind: DefinitionKind


class ConstantTable:
    """Exact-match mapping of canonical names to their first definition.

    "First" is the smallest (file, line) location, which makes the table
    independent of the order in which files were extracted. A namespace
    reopened within one package is not an error; a name defined under two
    packages is recorded as a ``DefinitionConflict`` and resolves to the
    first definition.
    """

    def __init__(
        self,
        entries: Mapping[str, ConstantEntry],
        conflicts: Iterable[DefinitionConflict] = (),
    ) -> None:
        self._entries = dict(entries)
        self._conflicts = tuple(sorted(conflicts, key=lambda c: c.name))
        # Enclosing names of compact declarations (class A::B) that are never defined themselves
        self._implied = frozenset(
            join_name(*segments[:i])
            for segments in (split_name(n) for n in self._entries)
            for i in range(1, len(segments))
        ) - self._entries.keys()

    @classmethod
    def build(cls, units: Iterable[SourceUnit], tree: PackageTree) -> ConstantTable:
        """Fold the definitions of all units into a table."""
        definitions: list[DefinitionEvent] = [d for unit in units for d in unit.definitions]
        definitions.sort(key=lambda d: (d.location, d.canonical_name))

        entries: dict[str, ConstantEntry] = {}
        # name -> package -> first location in that package, for non-winning packages
        foreign: dict[str, dict[str, SourceLocation]] = {}

        for definition in definitions:
            name = definition.canonical_name
            package = tree.owner(definition.location.file).root
            entry = entries.get(name)
            if entry is None:
                entries[name] = ConstantEntry(
                    name=name,
                    package=package,
                    location=definition.location,
                    kind=definition.kind,
                )
            elif entry.package != package:
                foreign.setdefault(name, {}).setdefault(package, definition.location)

        conflicts = [
            DefinitionConflict(
                name=name,
                package=entries[name].package,
                location=entries[name].location,
                others=tuple(sorted(others.items())),
            )
            for name, others in foreign.items()
        ]
        for conflict in conflicts:
            logger.info("Definition conflict: {conflict}", conflict=str(conflict))

        logger.debug(
            "Constant table holds {count} names from {definitions} definitions",
            count=len(entries),
            definitions=len(definitions),
        )
        return cls(entries, conflicts)

    @property
    def conflicts(self) -> tuple[DefinitionConflict, ...]:
        return self._conflicts

    def lookup(self, name: str) -> ConstantEntry | None:
        return self._entries.get(name)

    def knows(self, name: str) -> bool:
        """True if ``name`` is defined or encloses a defined name."""
        return name in self._entries or name in self._implied

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._entries))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConstantTable):
            return NotImplemented
        return self._entries == other._entries and self._conflicts == other._conflicts

    __hash__ = None  # type: ignore[assignment]

