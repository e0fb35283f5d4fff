"""Extraction summary generator."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any

from artifacts.models.artifacts.extraction_summary import ExtractionSummary, FileErrors
from artifacts.utils import _write_json
from contract.artifacts import EXTRACTION_SUMMARY_JSON

if TYPE_CHECKING:
    from pathlib import Path

    from artifacts.models.ir import UnifiedExtractionResult


class SummaryGenerator:
    """Generates extraction_summary.json from extraction results."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "extraction_summary"

    def generate(
        self,
        results: list[UnifiedExtractionResult],
        out_dir: Path,
    ) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Generate extraction_summary artifact."""
        out_dir.mkdir(parents=True, exist_ok=True)

        languages = Counter(result.language for result in results)
        summary = ExtractionSummary(
            file_count=len(results),
            files_by_language=dict(sorted(languages.items())),
            call_chain_count=sum(len(result.call_chains) for result in results),
            function_count=sum(len(result.functions) for result in results),
            class_count=sum(len(result.classes) for result in results),
            import_count=sum(len(result.imports) for result in results),
            export_count=sum(len(result.exports) for result in results),
            nodes_visited=sum(result.stats.nodes_visited for result in results),
            fallback_count=sum(result.stats.fallback_count for result in results),
            files_with_errors=[
                FileErrors(file=result.file, errors=list(result.errors))
                for result in sorted(results, key=lambda result: result.file)
                if result.errors
            ],
        )

        _write_json(out_dir / EXTRACTION_SUMMARY_JSON, summary)

        return [], summary.model_dump()


__all__ = ["EXTRACTION_SUMMARY_JSON", "SummaryGenerator"]
