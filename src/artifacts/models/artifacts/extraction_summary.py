"""Summary model for extraction_summary.json."""

from __future__ import annotations

from pydantic import BaseModel, Field

from contract.artifacts import ARTIFACT_SCHEMA_VERSION


class FileErrors(BaseModel):
    """Errors recorded for one file."""

    file: str
    errors: list[str]


class ExtractionSummary(BaseModel):
    """Project-level counts for one extraction run.

    Timings are left out so the summary is byte-stable across runs.
    """

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    file_count: int
    files_by_language: dict[str, int] = Field(default_factory=dict)
    call_chain_count: int = 0
    function_count: int = 0
    class_count: int = 0
    import_count: int = 0
    export_count: int = 0
    nodes_visited: int = 0
    fallback_count: int = 0
    files_with_errors: list[FileErrors] = Field(default_factory=list)


__all__ = ["ExtractionSummary", "FileErrors"]
