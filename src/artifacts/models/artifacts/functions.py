"""Function records for functions.jsonl."""

from __future__ import annotations

from pydantic import Field

from artifacts.models.ir.declarations import UnifiedFunction
from contract.artifacts import ARTIFACT_SCHEMA_VERSION


class FunctionRecord(UnifiedFunction):
    """Schema for functions.jsonl records."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    function_id: str


__all__ = ["FunctionRecord"]
