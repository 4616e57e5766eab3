"""Syntax extractor: definition and reference events from one Ruby tree.

The walk is a pure function of one tree. The lexical nesting is an immutable
tuple carried with each pending node on an explicit stack, so files can be
extracted on any thread in any order and at any depth.

Recognized nodes (tree-sitter-ruby grammar):

- ``class`` / ``module``: namespace definition, opens a nesting frame
- ``assignment`` / ``operator_assignment`` to a constant: value definition,
  including each constant target of a multiple assignment
- ``constant`` / ``scope_resolution``: reference
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from constbox.kernel.models import (
    DefinitionEvent,
    NestingPath,
    ReferenceEvent,
    SourceLocation,
    SourceUnit,
    join_name,
)
from constbox.kernel.parsing.parser_registry import ParserRegistry, get_registry
from constbox.kernel.parsing.ruby_constants import RUBY_CORE_CONSTANTS

if TYPE_CHECKING:
    from tree_sitter import Node

_NAMESPACE_NODES = frozenset({"class", "module"})
_ASSIGNMENT_NODES = frozenset({"assignment", "operator_assignment"})
_CONSTANT_PATH_NODES = frozenset({"constant", "scope_resolution"})
_METHOD_NODES = frozenset({"method", "singleton_method"})
_DESTRUCTURING_NODES = frozenset(
    {"left_assignment_list", "rest_assignment", "destructured_left_assignment"}
)

Event = DefinitionEvent | ReferenceEvent

if TYPE_CHECKING:
    Work = tuple[Node, NestingPath] | Event


def extract_source(
    path: str, source: bytes, registry: ParserRegistry | None = None
) -> SourceUnit:
    """Parse ``source`` and extract its events.

    Raises
    ------
    SourceParseError
        If the file cannot be parsed cleanly
    """
    registry = registry or get_registry()
    tree = registry.parse(path, source)
    return extract_tree(path, tree.root_node)


def extract_tree(path: str, root: Node) -> SourceUnit:
    """Extract the events of an already parsed tree, in source order."""
    definitions: list[DefinitionEvent] = []
    references: list[ReferenceEvent] = []
    for event in _walk(root, (), path):
        if isinstance(event, DefinitionEvent):
            definitions.append(event)
        else:
            references.append(event)
    return SourceUnit(path=path, definitions=tuple(definitions), references=tuple(references))


def _walk(root: Node, nesting: NestingPath, path: str) -> Iterator[Event]:
    # Explicit stack: long expressions nest deeper than the recursion limit
    stack: list[Work] = [(root, nesting)]
    while stack:
        item = stack.pop()
        if isinstance(item, (DefinitionEvent, ReferenceEvent)):
            yield item
            continue
        node, scope = item
        stack.extend(reversed(_expand(node, scope, path)))


def _expand(node: Node, nesting: NestingPath, path: str) -> list[Work]:
    """Events and child visits of one node, in source order."""
    kind = node.type

    if kind in _NAMESPACE_NODES:
        return _expand_namespace(node, nesting, path)
    if kind in _ASSIGNMENT_NODES:
        return _expand_assignment(node, nesting, path)
    if kind in _CONSTANT_PATH_NODES:
        return _expand_reference(node, nesting, path)
    if kind in _METHOD_NODES:
        name = node.child_by_field_name("name")
        return [(child, nesting) for child in node.named_children if not _same_node(child, name)]
    if kind == "call":
        # A constant in method position (Foo::Bar()) is a method name
        method = node.child_by_field_name("method")
        return [
            (child, nesting)
            for child in node.named_children
            if not (_same_node(child, method) and child.type == "constant")
        ]
    return [(child, nesting) for child in node.named_children]


def _expand_namespace(node: Node, nesting: NestingPath, path: str) -> list[Work]:
    name_node = node.child_by_field_name("name")
    superclass = node.child_by_field_name("superclass")
    declared = _constant_path(name_node) if name_node is not None else None

    # Superclass is evaluated outside the class being declared
    work: list[Work] = [(superclass, nesting)] if superclass is not None else []
    body = [
        child
        for child in node.named_children
        if not _same_node(child, name_node) and not _same_node(child, superclass)
    ]

    if declared is None:
        # Dynamic name, nothing to define; still look inside
        work.extend((child, nesting) for child in body)
        return work

    segments, absolute = declared
    outer = () if absolute else nesting
    work.append(
        DefinitionEvent(
            segments=segments,
            nesting=outer,
            location=_location(path, node),
            kind="namespace",
        )
    )

    enclosing = outer[-1] if outer else ()
    inner = (*nesting, (*enclosing, *segments))
    work.extend((child, inner) for child in body)
    return work


def _expand_assignment(node: Node, nesting: NestingPath, path: str) -> list[Work]:
    left = node.child_by_field_name("left")
    work: list[Work] = []
    if left is not None:
        if left.type in _DESTRUCTURING_NODES:
            work.extend(_assignment_targets(left, nesting, path))
        else:
            work.append(_assignment_target(left, nesting, path))
    work.extend((child, nesting) for child in node.named_children if not _same_node(child, left))
    return work


def _assignment_targets(node: Node, nesting: NestingPath, path: str) -> list[Work]:
    """Targets of ``X, (Y, *Z) = ...`` in source order."""
    work: list[Work] = []
    for target in node.named_children:
        if target.type in _DESTRUCTURING_NODES:
            work.extend(_assignment_targets(target, nesting, path))
        else:
            work.append(_assignment_target(target, nesting, path))
    return work


def _assignment_target(target: Node, nesting: NestingPath, path: str) -> Work:
    written = _constant_path(target)
    if written is None:
        # Variables, attribute writers and element writers
        return (target, nesting)
    segments, absolute = written
    return DefinitionEvent(
        segments=segments,
        nesting=() if absolute else nesting,
        location=_location(path, target),
        kind="value",
    )


def _expand_reference(node: Node, nesting: NestingPath, path: str) -> list[Work]:
    written = _constant_path(node)
    if written is None:
        # obj::Foo or self.class::Foo; only the receiver can hold references
        scope = node.child_by_field_name("scope")
        return [(scope, nesting)] if scope is not None else []

    segments, absolute = written
    if join_name(*segments) in RUBY_CORE_CONSTANTS:
        return []
    return [
        ReferenceEvent(
            segments=segments,
            nesting=nesting,
            location=_location(path, node),
            absolute=absolute,
        )
    ]


def _constant_path(node: Node) -> tuple[tuple[str, ...], bool] | None:
    """Segments and root marker of a static constant path, or None if dynamic."""
    segments: list[str] = []
    while node.type == "scope_resolution":
        name = node.child_by_field_name("name")
        if name is None or name.type != "constant":
            return None
        segments.append(_text(name))
        scope = node.child_by_field_name("scope")
        if scope is None:
            return tuple(reversed(segments)), True
        node = scope

    if node.type != "constant":
        return None
    segments.append(_text(node))
    return tuple(reversed(segments)), False


def _text(node: Node) -> str:
    return (node.text or b"").decode("utf-8", errors="replace")


def _location(path: str, node: Node) -> SourceLocation:
    # tree-sitter rows are 0-based
    return SourceLocation(file=path, line=node.start_point[0] + 1)


def _same_node(a: Node | None, b: Node | None) -> bool:
    if a is None or b is None:
        return False
    return a.start_byte == b.start_byte and a.end_byte == b.end_byte and a.type == b.type
