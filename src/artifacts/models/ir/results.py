"""Per-file extraction result models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from artifacts.models.ir.chains import UnifiedCallChain  # noqa: TC001
from artifacts.models.ir.declarations import (  # noqa: TC001
    UnifiedClass,
    UnifiedFunction,
)
from artifacts.models.ir.modules import UnifiedExport, UnifiedImport  # noqa: TC001
from parse.languages import UnifiedLanguage  # noqa: TC001


class ExtractionStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    parse_time_ms: float = 0.0
    normalize_time_ms: float = 0.0
    total_time_ms: float = 0.0
    nodes_visited: int = 0
    call_chains_extracted: int = 0
    fallback_count: int = Field(
        default=0, description="Arguments that hit the unsupported-shape fallback"
    )


class UnifiedExtractionResult(BaseModel):
    """Everything normalized out of one source file."""

    model_config = ConfigDict(frozen=True)

    file: str
    language: UnifiedLanguage
    content_hash: str = ""
    functions: tuple[UnifiedFunction, ...] = ()
    call_chains: tuple[UnifiedCallChain, ...] = ()
    classes: tuple[UnifiedClass, ...] = ()
    imports: tuple[UnifiedImport, ...] = ()
    exports: tuple[UnifiedExport, ...] = ()
    errors: tuple[str, ...] = ()
    stats: ExtractionStats = Field(default_factory=ExtractionStats)


__all__ = ["ExtractionStats", "UnifiedExtractionResult"]
