"""Language detection for source files."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Literal, get_args

UnifiedLanguage = Literal["rust", "typescript", "javascript", "python"]

SUPPORTED_LANGUAGES: tuple[UnifiedLanguage, ...] = get_args(UnifiedLanguage)

LANGUAGE_EXTENSIONS: dict[UnifiedLanguage, tuple[str, ...]] = {
    "rust": (".rs",),
    "typescript": (".ts", ".tsx", ".mts", ".cts"),
    "javascript": (".js", ".jsx", ".mjs", ".cjs"),
    "python": (".py", ".pyi"),
}

_EXTENSION_TO_LANGUAGE: dict[str, UnifiedLanguage] = {
    extension: language
    for language, extensions in LANGUAGE_EXTENSIONS.items()
    for extension in extensions
}


class UnsupportedLanguageError(ValueError):
    """Raised when no normalizer handles a file's extension."""


def detect_language(file_path: str) -> UnifiedLanguage:
    """Return the language for a file path based on its extension.

    Raises:
        UnsupportedLanguageError: If the extension is not handled.
    """
    suffix = PurePosixPath(file_path.replace("\\", "/")).suffix.lower()
    language = _EXTENSION_TO_LANGUAGE.get(suffix)
    if language is None:
        msg = f"No normalizer for '{file_path}' (extension '{suffix or '<none>'}')"
        raise UnsupportedLanguageError(msg)
    return language


def extensions_for(languages: tuple[str, ...] | list[str]) -> tuple[str, ...]:
    """Return the file extensions handled by the given languages."""
    out: list[str] = []
    for language in languages:
        out.extend(LANGUAGE_EXTENSIONS.get(language, ()))  # type: ignore[call-overload]
    return tuple(sorted(set(out)))


__all__ = [
    "LANGUAGE_EXTENSIONS",
    "SUPPORTED_LANGUAGES",
    "UnifiedLanguage",
    "UnsupportedLanguageError",
    "detect_language",
    "extensions_for",
]
