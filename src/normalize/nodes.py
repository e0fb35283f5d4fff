"""Tree-walking helpers shared by every normalizer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from parse.syntax import SyntaxNode


@dataclass
class NormalizationContext:
    """Mutable state for one normalization call.

    Created per call and dropped when the call returns, so a normalizer
    instance can be shared between threads.
    """

    file_path: str
    processed: set[int] = field(default_factory=set)
    fallbacks: int = 0
    nodes_visited: int = 0


def position(node: SyntaxNode) -> tuple[int, int]:
    """1-based (line, column) of a node's start."""
    row, col = node.start_point
    return row + 1, col + 1


def end_position(node: SyntaxNode) -> tuple[int, int]:
    row, col = node.end_point
    return row + 1, col + 1


def iter_preorder(
    root: SyntaxNode, context: NormalizationContext | None = None
) -> Iterator[SyntaxNode]:
    """Yield ``root`` and its descendants in source pre-order.

    Uses an explicit stack so deeply nested trees cannot exhaust the
    interpreter's recursion limit.
    """
    stack: list[SyntaxNode] = [root]
    while stack:
        node = stack.pop()
        if context is not None:
            context.nodes_visited += 1
        yield node
        children = node.children
        stack.extend(reversed(children))


def child_text(node: SyntaxNode, field_name: str) -> str | None:
    child = node.child_by_field_name(field_name)
    if child is None:
        return None
    return child.text


def has_child_type(node: SyntaxNode, types: Iterable[str]) -> bool:
    wanted = frozenset(types)
    return any(child.type in wanted for child in node.children)


def first_child_of_type(node: SyntaxNode, types: Iterable[str]) -> SyntaxNode | None:
    wanted = frozenset(types)
    for child in node.children:
        if child.type in wanted:
            return child
    return None


def collect_decorators(
    node: SyntaxNode,
    decorator_types: frozenset[str],
    comment_types: frozenset[str],
) -> list[str]:
    """Collect attribute/decorator siblings written directly above ``node``.

    Comments between them are skipped; any other sibling ends the run.
    Returned in source order.
    """
    collected: list[str] = []
    sibling = node.prev_sibling
    while sibling is not None:
        if sibling.type in decorator_types:
            collected.append(sibling.text)
        elif sibling.type not in comment_types:
            break
        sibling = sibling.prev_sibling
    collected.reverse()
    return collected


def build_qualified_name(
    module_name: str, owners: Iterable[str], name: str, separator: str = "."
) -> str:
    """Build a fully qualified name for a declaration."""
    parts = [part for part in (module_name, *owners, name) if part]
    return separator.join(parts)


def strip_type_annotation(text: str | None) -> str | None:
    """Drop a leading ``:`` or ``->`` from an annotation node's text."""
    if text is None:
        return None
    stripped = text.strip()
    for prefix in ("->", ":"):
        if stripped.startswith(prefix):
            stripped = stripped[len(prefix) :].strip()
            break
    return stripped or None


__all__ = [
    "NormalizationContext",
    "build_qualified_name",
    "child_text",
    "collect_decorators",
    "end_position",
    "first_child_of_type",
    "has_child_type",
    "iter_preorder",
    "position",
    "strip_type_annotation",
]
