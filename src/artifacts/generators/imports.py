"""Import and export artifact generators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from artifacts.models.artifacts.imports import ExportRecord, ImportRecord
from artifacts.utils import _write_jsonl
from contract.artifacts import EXPORTS_JSONL, IMPORTS_JSONL, build_record_id

if TYPE_CHECKING:
    from pathlib import Path

    from artifacts.models.ir import UnifiedExtractionResult


def _bound_names(names: tuple) -> str:
    return ",".join(binding.local for binding in names)


class ImportsGenerator:
    """Generates imports.jsonl from extraction results."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "imports"

    def generate(
        self,
        results: list[UnifiedExtractionResult],
        out_dir: Path,
    ) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Generate imports artifact."""
        out_dir.mkdir(parents=True, exist_ok=True)

        records: list[ImportRecord] = []
        for result in results:
            for index, imported in enumerate(result.imports):
                # Several imports can share a line; the index keeps ids unique.
                records.append(
                    ImportRecord(
                        **imported.model_dump(),
                        file=result.file,
                        import_id=build_record_id(
                            "import",
                            result.file,
                            imported.line,
                            index + 1,
                            f"{imported.source}:{_bound_names(imported.names)}",
                        ),
                    )
                )
        records.sort(key=lambda record: (record.file, record.line, record.import_id))

        _write_jsonl(out_dir / IMPORTS_JSONL, records)

        record_dicts = [record.model_dump() for record in records]
        return record_dicts, {"count": len(records)}


class ExportsGenerator:
    """Generates exports.jsonl from extraction results."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "exports"

    def generate(
        self,
        results: list[UnifiedExtractionResult],
        out_dir: Path,
    ) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Generate exports artifact."""
        out_dir.mkdir(parents=True, exist_ok=True)

        records: list[ExportRecord] = []
        for result in results:
            for index, exported in enumerate(result.exports):
                records.append(
                    ExportRecord(
                        **exported.model_dump(),
                        file=result.file,
                        export_id=build_record_id(
                            "export", result.file, exported.line, index + 1, exported.name
                        ),
                    )
                )
        records.sort(key=lambda record: (record.file, record.line, record.export_id))

        _write_jsonl(out_dir / EXPORTS_JSONL, records)

        record_dicts = [record.model_dump() for record in records]
        return record_dicts, {"count": len(records)}


__all__ = ["EXPORTS_JSONL", "IMPORTS_JSONL", "ExportsGenerator", "ImportsGenerator"]
