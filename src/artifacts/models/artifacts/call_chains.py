"""Call-chain records for call_chains.jsonl."""

from __future__ import annotations

from pydantic import Field

from artifacts.models.ir.chains import UnifiedCallChain
from contract.artifacts import ARTIFACT_SCHEMA_VERSION


class CallChainRecord(UnifiedCallChain):
    """Schema for call_chains.jsonl records."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    chain_id: str


__all__ = ["CallChainRecord"]
