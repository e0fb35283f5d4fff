"""Per-language node-kind vocabularies.

The chain walker and the argument normalizer are written once. What differs
between languages is how a node type maps onto a small closed set of kinds
and which field names lead from a node to its parts. A ``LanguageVocabulary``
is that mapping table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from parse.languages import UnifiedLanguage
    from parse.syntax import SyntaxNode


class ChainStep(str, Enum):
    """What a node contributes while walking a chain right-to-left."""

    METHOD_CALL = "method_call"
    CALL = "call"
    FIELD = "field"
    AWAIT = "await"
    TRY = "try"
    TRANSPARENT = "transparent"
    IDENTIFIER = "identifier"
    PATH = "path"
    OTHER = "other"


class ArgShape(str, Enum):
    """How an argument node is normalized."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    IDENTIFIER = "identifier"
    NULL = "null"
    OBJECT = "object"
    ARRAY = "array"
    KEYWORD = "keyword"
    CALL = "call"
    CLOSURE = "closure"
    EXPRESSION = "expression"
    UNSUPPORTED = "unsupported"


# Steps that can open a top-level chain. A chain is only emitted when at
# least one of its segments is a call.
CHAIN_START_STEPS = frozenset(
    {
        ChainStep.CALL,
        ChainStep.METHOD_CALL,
        ChainStep.FIELD,
        ChainStep.AWAIT,
        ChainStep.TRY,
    }
)

# Steps the walker descends through.
CHAIN_LINK_STEPS = frozenset(
    {
        ChainStep.CALL,
        ChainStep.METHOD_CALL,
        ChainStep.FIELD,
        ChainStep.AWAIT,
        ChainStep.TRY,
        ChainStep.TRANSPARENT,
    }
)


@dataclass(frozen=True)
class LanguageVocabulary:
    """Node-type tables and field names for one language's grammar."""

    language: UnifiedLanguage
    chain_steps: Mapping[str, ChainStep]
    arg_shapes: Mapping[str, ArgShape]
    member_object_field: str
    member_property_field: str
    call_function_field: str = "function"
    call_arguments_field: str = "arguments"
    method_name_field: str = "name"
    method_receiver_field: str = "value"
    method_arguments_field: str = "arguments"
    path_prefix_field: str = "path"
    path_name_field: str = "name"
    path_separator: str = "."
    # Node type -> field holding the wrapped expression. Types missing here
    # fall back to their first named child.
    operand_fields: Mapping[str, str] = field(default_factory=dict)
    # Callee wrappers such as Rust's ``generic_function`` -> inner field.
    callee_wrappers: Mapping[str, str] = field(default_factory=dict)
    # Identifier spellings that mean "no value".
    null_identifiers: frozenset[str] = frozenset()
    boolean_identifiers: frozenset[str] = frozenset()
    # Function-like nodes; chains inside them are never folded into an
    # enclosing call's arguments.
    scope_boundaries: frozenset[str] = frozenset()
    comment_types: frozenset[str] = frozenset({"comment"})
    # Named nodes inside an argument list that are not arguments.
    non_argument_types: frozenset[str] = frozenset()

    def step_for(self, node: SyntaxNode) -> ChainStep:
        return self.chain_steps.get(node.type, ChainStep.OTHER)

    def shape_for(self, node: SyntaxNode) -> ArgShape:
        shape = self.arg_shapes.get(node.type, ArgShape.UNSUPPORTED)
        if shape is ArgShape.IDENTIFIER:
            if node.text in self.null_identifiers:
                return ArgShape.NULL
            if node.text in self.boolean_identifiers:
                return ArgShape.BOOLEAN
        return shape

    def operand_of(self, node: SyntaxNode) -> SyntaxNode | None:
        field_name = self.operand_fields.get(node.type)
        if field_name is not None:
            inner = node.child_by_field_name(field_name)
            if inner is not None:
                return inner
        for child in node.named_children:
            if child.type not in self.comment_types:
                return child
        return None


__all__ = [
    "CHAIN_LINK_STEPS",
    "CHAIN_START_STEPS",
    "ArgShape",
    "ChainStep",
    "LanguageVocabulary",
]
