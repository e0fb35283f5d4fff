"""Import and export records for imports.jsonl and exports.jsonl."""

from __future__ import annotations

from pydantic import Field

from artifacts.models.ir.modules import UnifiedExport, UnifiedImport
from contract.artifacts import ARTIFACT_SCHEMA_VERSION


class ImportRecord(UnifiedImport):
    """Schema for imports.jsonl records."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    import_id: str
    file: str


class ExportRecord(UnifiedExport):
    """Schema for exports.jsonl records."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    export_id: str
    file: str


__all__ = ["ExportRecord", "ImportRecord"]
