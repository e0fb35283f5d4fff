"""Parsing utilities for drift-unified.

Grammar bindings load on first import of ``parse.treesitter``; the rest of
the package only describes languages and syntax nodes.
"""

from parse.languages import (
    SUPPORTED_LANGUAGES,
    UnifiedLanguage,
    UnsupportedLanguageError,
    detect_language,
)
from parse.syntax import SyntaxNode, TreeSitterNode

__all__ = [
    "SUPPORTED_LANGUAGES",
    "SyntaxNode",
    "TreeSitterNode",
    "UnifiedLanguage",
    "UnsupportedLanguageError",
    "detect_language",
]
