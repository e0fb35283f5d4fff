"""Tree-sitter parser loading for the supported grammars."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import tree_sitter_javascript
import tree_sitter_python
import tree_sitter_rust
import tree_sitter_typescript
from tree_sitter import Language, Parser, Tree

from parse.languages import detect_language
from parse.syntax import TreeSitterNode

if TYPE_CHECKING:
    from collections.abc import Callable

    from parse.languages import UnifiedLanguage

GrammarName = str

_GRAMMAR_LOADERS: dict[GrammarName, Callable[[], object]] = {
    "rust": tree_sitter_rust.language,
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
    "javascript": tree_sitter_javascript.language,
    "python": tree_sitter_python.language,
}

_PARSERS: dict[GrammarName, Parser] = {}
# Parsers are shared, parse calls are not.
_PARSE_LOCK = threading.Lock()


def grammar_for(language: UnifiedLanguage, file_path: str | None = None) -> GrammarName:
    """Pick the grammar for a language; ``.tsx`` files use the TSX grammar."""
    if language == "typescript" and file_path and file_path.lower().endswith(".tsx"):
        return "tsx"
    return language


def _get_parser(grammar: GrammarName) -> Parser:
    """Initialize and return the Tree-sitter parser for a grammar."""
    parser = _PARSERS.get(grammar)
    if parser is None:
        lang = Language(_GRAMMAR_LOADERS[grammar]())
        parser = Parser(lang)
        _PARSERS[grammar] = parser
    return parser


def parse_tree(
    source: str | bytes,
    language: UnifiedLanguage,
    file_path: str | None = None,
) -> Tree:
    source_bytes = source.encode("utf8") if isinstance(source, str) else source
    with _PARSE_LOCK:
        return _get_parser(grammar_for(language, file_path)).parse(source_bytes)


def parse_source(
    source: str | bytes,
    language: UnifiedLanguage | None = None,
    file_path: str | None = None,
) -> TreeSitterNode:
    """Parse source text and return the adapted root node.

    Args:
        source: Source text or UTF-8 bytes.
        language: Language to parse as; detected from ``file_path`` when omitted.
        file_path: Optional path used for language/grammar selection.
    """
    if language is None:
        if file_path is None:
            msg = "parse_source needs a language or a file_path"
            raise ValueError(msg)
        language = detect_language(file_path)
    tree = parse_tree(source, language, file_path)
    return TreeSitterNode(tree.root_node)


__all__ = ["grammar_for", "parse_source", "parse_tree"]
