"""Language -> normalizer lookup."""

from __future__ import annotations

from typing import TYPE_CHECKING

from normalize.python import PythonNormalizer
from normalize.rust import RustNormalizer
from normalize.typescript import JavaScriptNormalizer, TypeScriptNormalizer
from parse.languages import UnsupportedLanguageError

if TYPE_CHECKING:
    from normalize.base import BaseNormalizer
    from parse.languages import UnifiedLanguage

NORMALIZERS: dict[str, type[BaseNormalizer]] = {
    "rust": RustNormalizer,
    "typescript": TypeScriptNormalizer,
    "javascript": JavaScriptNormalizer,
    "python": PythonNormalizer,
}


def get_normalizer(
    language: UnifiedLanguage | str,
    *,
    max_chain_depth: int | None = None,
    max_arg_depth: int | None = None,
) -> BaseNormalizer:
    """Build a normalizer for ``language``.

    Raises:
        UnsupportedLanguageError: If no normalizer handles ``language``.
    """
    normalizer_class = NORMALIZERS.get(language)
    if normalizer_class is None:
        msg = f"No normalizer for language '{language}'"
        raise UnsupportedLanguageError(msg)

    limits: dict[str, int] = {}
    if max_chain_depth is not None:
        limits["max_chain_depth"] = max_chain_depth
    if max_arg_depth is not None:
        limits["max_arg_depth"] = max_arg_depth
    return normalizer_class(**limits)


__all__ = ["NORMALIZERS", "get_normalizer"]
