"""Function artifact generator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from artifacts.models.artifacts.functions import FunctionRecord
from artifacts.utils import _write_jsonl
from contract.artifacts import FUNCTIONS_JSONL, build_record_id

if TYPE_CHECKING:
    from pathlib import Path

    from artifacts.models.ir import UnifiedExtractionResult


class FunctionsGenerator:
    """Generates functions.jsonl from extraction results."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "functions"

    def generate(
        self,
        results: list[UnifiedExtractionResult],
        out_dir: Path,
    ) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Generate functions artifact."""
        out_dir.mkdir(parents=True, exist_ok=True)

        records = [
            FunctionRecord(
                **function.model_dump(),
                function_id=build_record_id(
                    "fn",
                    function.file,
                    function.start_line,
                    function.start_column,
                    function.qualified_name,
                ),
            )
            for result in results
            for function in result.functions
        ]
        records.sort(
            key=lambda record: (
                record.file,
                record.start_line,
                record.start_column,
                record.qualified_name,
            )
        )

        _write_jsonl(out_dir / FUNCTIONS_JSONL, records)

        record_dicts = [record.model_dump() for record in records]
        return record_dicts, {"count": len(records)}


__all__ = ["FUNCTIONS_JSONL", "FunctionsGenerator"]
