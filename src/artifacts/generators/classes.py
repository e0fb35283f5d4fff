"""Class artifact generator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from artifacts.models.artifacts.classes import ClassRecord
from artifacts.utils import _write_jsonl
from contract.artifacts import CLASSES_JSONL, build_record_id

if TYPE_CHECKING:
    from pathlib import Path

    from artifacts.models.ir import UnifiedExtractionResult


class ClassesGenerator:
    """Generates classes.jsonl from extraction results."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "classes"

    def generate(
        self,
        results: list[UnifiedExtractionResult],
        out_dir: Path,
    ) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Generate classes artifact."""
        out_dir.mkdir(parents=True, exist_ok=True)

        records = [
            ClassRecord(
                **declared.model_dump(),
                class_id=build_record_id(
                    "class", declared.file, declared.start_line, 1, declared.name
                ),
            )
            for result in results
            for declared in result.classes
        ]
        records.sort(key=lambda record: (record.file, record.start_line, record.name))

        _write_jsonl(out_dir / CLASSES_JSONL, records)

        record_dicts = [record.model_dump() for record in records]
        return record_dicts, {"count": len(records)}


__all__ = ["CLASSES_JSONL", "ClassesGenerator"]
