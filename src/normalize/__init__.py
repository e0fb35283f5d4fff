"""Per-language normalizers producing the unified call-chain IR."""

from normalize.arguments import ArgumentNormalizer
from normalize.base import BaseNormalizer, NormalizedFile
from normalize.chains import CallChainWalker
from normalize.nodes import NormalizationContext
from normalize.python import PythonNormalizer
from normalize.registry import get_normalizer
from normalize.rust import RustNormalizer
from normalize.typescript import JavaScriptNormalizer, TypeScriptNormalizer

__all__ = [
    "ArgumentNormalizer",
    "BaseNormalizer",
    "CallChainWalker",
    "JavaScriptNormalizer",
    "NormalizationContext",
    "NormalizedFile",
    "PythonNormalizer",
    "RustNormalizer",
    "TypeScriptNormalizer",
    "get_normalizer",
]
