"""Syntax tree adapter consumed by the normalizers.

Normalizers never touch ``tree_sitter`` objects directly. They read nodes
through the ``SyntaxNode`` protocol so any parser (or a hand-built fake in
tests) can feed them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tree_sitter import Node


class SyntaxNode(Protocol):
    """Minimal read-only view of a concrete syntax tree node."""

    @property
    def id(self) -> int: ...

    @property
    def type(self) -> str: ...

    @property
    def text(self) -> str: ...

    @property
    def start_point(self) -> tuple[int, int]: ...

    @property
    def end_point(self) -> tuple[int, int]: ...

    @property
    def is_named(self) -> bool: ...

    @property
    def children(self) -> Sequence[SyntaxNode]: ...

    @property
    def named_children(self) -> Sequence[SyntaxNode]: ...

    @property
    def parent(self) -> SyntaxNode | None: ...

    @property
    def prev_sibling(self) -> SyntaxNode | None: ...

    @property
    def next_sibling(self) -> SyntaxNode | None: ...

    def child_by_field_name(self, name: str) -> SyntaxNode | None: ...


def _wrap(node: Node | None) -> TreeSitterNode | None:
    if node is None:
        return None
    return TreeSitterNode(node)


class TreeSitterNode:
    """``SyntaxNode`` backed by a ``tree_sitter.Node``."""

    __slots__ = ("_node",)

    def __init__(self, node: Node) -> None:
        self._node = node

    @property
    def id(self) -> int:
        return self._node.id

    @property
    def type(self) -> str:
        return self._node.type

    @property
    def text(self) -> str:
        raw = self._node.text
        if raw is None:
            return ""
        return raw.decode("utf8", errors="ignore")

    @property
    def start_point(self) -> tuple[int, int]:
        point = self._node.start_point
        return (point[0], point[1])

    @property
    def end_point(self) -> tuple[int, int]:
        point = self._node.end_point
        return (point[0], point[1])

    @property
    def is_named(self) -> bool:
        return self._node.is_named

    @property
    def has_error(self) -> bool:
        return self._node.has_error

    @property
    def children(self) -> list[TreeSitterNode]:
        return [TreeSitterNode(child) for child in self._node.children]

    @property
    def named_children(self) -> list[TreeSitterNode]:
        return [TreeSitterNode(child) for child in self._node.named_children]

    @property
    def parent(self) -> TreeSitterNode | None:
        return _wrap(self._node.parent)

    @property
    def prev_sibling(self) -> TreeSitterNode | None:
        return _wrap(self._node.prev_sibling)

    @property
    def next_sibling(self) -> TreeSitterNode | None:
        return _wrap(self._node.next_sibling)

    def child_by_field_name(self, name: str) -> TreeSitterNode | None:
        return _wrap(self._node.child_by_field_name(name))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TreeSitterNode):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        row, col = self.start_point
        return f"<TreeSitterNode {self.type} @{row + 1}:{col + 1}>"


__all__ = ["SyntaxNode", "TreeSitterNode"]
