"""Reference resolution by lexical nesting.

A reference ``R0::R1::...::Rm`` written inside the nesting
``[F0, F1, ..., Fk]`` (each frame a fully qualified namespace) resolves as:

1. Root-anchored references (``::R0``) try only the empty prefix.
2. Otherwise try ``Fk::R0``, ``Fk-1::R0``, ..., ``F0::R0``, then ``R0``;
   the first name the constant table knows is the base.
3. Each remaining segment must extend a known name.
4. The final name must have a definition (and therefore an owning package).

Ancestors (superclasses, included modules) are not consulted. Anything that
fails these steps is unresolved and never attributed to a package.
"""

from __future__ import annotations

from collections.abc import Iterable

from constbox.kernel.constant_table import ConstantTable
from constbox.kernel.models import ReferenceEvent, ResolvedReference, ScopeFrame, join_name


def candidate_prefixes(reference: ReferenceEvent) -> list[ScopeFrame]:
    """Prefixes to try for the first segment, innermost first, root last."""
    if reference.absolute:
        return [()]

    prefixes: list[ScopeFrame] = []
    for frame in reversed(reference.nesting):
        if frame not in prefixes:
            prefixes.append(frame)
    prefixes.append(())
    return prefixes


def resolve(reference: ReferenceEvent, table: ConstantTable) -> ResolvedReference:
    """Resolve one reference; never raises for unknown names.

    A segment matches when the table knows the name, which includes the
    enclosing names implied by compact declarations such as ``class A::B``.
    Only the full name must have a definition of its own.
    """
    if not reference.segments:
        return ResolvedReference(reference, None)

    first, *rest = reference.segments
    name: str | None = None
    for prefix in candidate_prefixes(reference):
        candidate = join_name(*prefix, first)
        if table.knows(candidate):
            name = candidate
            break

    if name is None:
        return ResolvedReference(reference, None)

    for segment in rest:
        name = join_name(name, segment)
        if not table.knows(name):
            return ResolvedReference(reference, None)

    if table.lookup(name) is None:
        return ResolvedReference(reference, None)
    return ResolvedReference(reference, name)


def resolve_all(
    references: Iterable[ReferenceEvent], table: ConstantTable
) -> list[ResolvedReference]:
    return [resolve(reference, table) for reference in references]
