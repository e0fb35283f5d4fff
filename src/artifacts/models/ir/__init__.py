"""Unified IR: the language-agnostic output of every normalizer."""

from artifacts.models.ir.arguments import (
    ArgType,
    NormalizedArg,
    PropertyItems,
    UnknownLabel,
)
from artifacts.models.ir.chains import CallChainSegment, UnifiedCallChain
from artifacts.models.ir.declarations import (
    ClassKind,
    UnifiedClass,
    UnifiedFunction,
    UnifiedParameter,
)
from artifacts.models.ir.modules import (
    UnifiedExport,
    UnifiedImport,
    UnifiedImportedName,
)
from artifacts.models.ir.results import ExtractionStats, UnifiedExtractionResult

__all__ = [
    "ArgType",
    "CallChainSegment",
    "ClassKind",
    "ExtractionStats",
    "NormalizedArg",
    "PropertyItems",
    "UnifiedCallChain",
    "UnifiedClass",
    "UnifiedExport",
    "UnifiedExtractionResult",
    "UnifiedFunction",
    "UnifiedImport",
    "UnifiedImportedName",
    "UnifiedParameter",
    "UnknownLabel",
]
