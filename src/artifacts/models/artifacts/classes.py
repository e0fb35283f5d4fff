"""Class records for classes.jsonl."""

from __future__ import annotations

from pydantic import Field

from artifacts.models.ir.declarations import UnifiedClass
from contract.artifacts import ARTIFACT_SCHEMA_VERSION


class ClassRecord(UnifiedClass):
    """Schema for classes.jsonl records."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    class_id: str


__all__ = ["ClassRecord"]
