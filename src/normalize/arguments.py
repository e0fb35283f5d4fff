"""Argument normalization shared by every language."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from artifacts.models.ir.arguments import NormalizedArg
from normalize.nodes import NormalizationContext, position
from normalize.vocabulary import ArgShape

if TYPE_CHECKING:
    from artifacts.models.ir.arguments import PropertyItems, UnknownLabel
    from normalize.vocabulary import LanguageVocabulary
    from parse.syntax import SyntaxNode

DEFAULT_MAX_ARG_DEPTH = 32

_INT_SUFFIX = re.compile(r"[iu](?:8|16|32|64|128|size)$")
_NUMBER_SUFFIX = re.compile(r"(?:[iu](?:8|16|32|64|128|size)|f32|f64|n)$")

_UNKNOWN_LABELS: dict[ArgShape, UnknownLabel] = {
    ArgShape.NULL: "null",
    ArgShape.CALL: "call",
    ArgShape.CLOSURE: "closure",
    ArgShape.EXPRESSION: "expression",
}


def parse_number(text: str) -> float | None:
    """Parse a numeric literal as written in any supported language.

    Handles digit separators, radix prefixes and Rust/JS type suffixes.
    Returns None for literals without a real value (e.g. Python ``1j``).

    Examples:
        >>> parse_number("1_000u32")
        1000.0
        >>> parse_number("0xFF")
        255.0
        >>> parse_number("2.5e3")
        2500.0
    """
    cleaned = text.strip().replace("_", "").lower()
    if cleaned.startswith(("0x", "0o", "0b")):
        cleaned = _INT_SUFFIX.sub("", cleaned).removesuffix("n")
        try:
            return float(int(cleaned, 0))
        except ValueError:
            return None
    cleaned = _NUMBER_SUFFIX.sub("", cleaned)
    try:
        return float(cleaned)
    except ValueError:
        return None


class ArgumentNormalizer:
    """Turns argument syntax nodes into ``NormalizedArg`` values.

    Dispatch is on the vocabulary's ``ArgShape`` for the node type. Anything
    the vocabulary does not know becomes an ``unknown`` argument carrying the
    node text; this class never raises for an unexpected node.

    Subclasses supply the language-specific parts: how a string literal is
    unquoted and how object/struct/dict literals break into properties.
    """

    def __init__(
        self,
        vocabulary: LanguageVocabulary,
        *,
        max_depth: int = DEFAULT_MAX_ARG_DEPTH,
    ) -> None:
        self.vocabulary = vocabulary
        self.max_depth = max_depth

    def normalize_arguments(
        self,
        args_node: SyntaxNode,
        context: NormalizationContext | None = None,
    ) -> list[NormalizedArg]:
        """Normalize every argument of an argument-list node, in source order."""
        if context is None:
            context = NormalizationContext(file_path="")
        return [
            self.normalize_argument(child, context)
            for child in self.argument_nodes(args_node)
        ]

    def argument_nodes(self, args_node: SyntaxNode) -> list[SyntaxNode]:
        skipped = self.vocabulary.comment_types | self.vocabulary.non_argument_types
        return [child for child in args_node.named_children if child.type not in skipped]

    def normalize_argument(
        self,
        node: SyntaxNode,
        context: NormalizationContext | None = None,
        depth: int = 0,
    ) -> NormalizedArg:
        if context is None:
            context = NormalizationContext(file_path="")
        if depth > self.max_depth:
            return self.unknown(node, "depth")

        shape = self.vocabulary.shape_for(node)
        line, column = position(node)
        text = node.text

        if shape is ArgShape.STRING:
            return NormalizedArg(
                type="string",
                value=text,
                string_value=self.string_value(node),
                line=line,
                column=column,
            )
        if shape is ArgShape.NUMBER:
            return NormalizedArg(
                type="number",
                value=text,
                number_value=parse_number(text),
                line=line,
                column=column,
            )
        if shape is ArgShape.BOOLEAN:
            return NormalizedArg(
                type="boolean",
                value=text,
                boolean_value=text.strip() in ("true", "True"),
                line=line,
                column=column,
            )
        if shape is ArgShape.IDENTIFIER:
            return self.identifier(text, line, column)
        if shape is ArgShape.OBJECT:
            return NormalizedArg(
                type="object",
                value=text,
                properties=self.object_properties(node, context, depth + 1),
                line=line,
                column=column,
            )
        if shape is ArgShape.ARRAY:
            return NormalizedArg(
                type="array",
                value=text,
                elements=tuple(
                    self.normalize_argument(child, context, depth + 1)
                    for child in self.array_elements(node)
                ),
                line=line,
                column=column,
            )
        if shape is ArgShape.KEYWORD:
            return self.keyword_argument(node, context, depth)
        if shape in _UNKNOWN_LABELS:
            return self.unknown(node, _UNKNOWN_LABELS[shape])

        context.fallbacks += 1
        return self.unknown(node, "unsupported")

    # -- builders ---------------------------------------------------------

    def identifier(self, name: str, line: int, column: int) -> NormalizedArg:
        return NormalizedArg(type="identifier", value=name, line=line, column=column)

    def unknown(self, node: SyntaxNode, label: UnknownLabel) -> NormalizedArg:
        line, column = position(node)
        return NormalizedArg(
            type="unknown", value=node.text, label=label, line=line, column=column
        )

    # -- language hooks ---------------------------------------------------

    def string_value(self, node: SyntaxNode) -> str:
        text = node.text
        if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"`":
            return text[1:-1]
        return text

    def object_properties(
        self,
        node: SyntaxNode,
        context: NormalizationContext,
        depth: int,
    ) -> PropertyItems:
        return ()

    def array_elements(self, node: SyntaxNode) -> list[SyntaxNode]:
        return [
            child
            for child in node.named_children
            if child.type not in self.vocabulary.comment_types
        ]

    def keyword_argument(
        self,
        node: SyntaxNode,
        context: NormalizationContext,
        depth: int,
    ) -> NormalizedArg:
        context.fallbacks += 1
        return self.unknown(node, "unsupported")


__all__ = ["DEFAULT_MAX_ARG_DEPTH", "ArgumentNormalizer", "parse_number"]
