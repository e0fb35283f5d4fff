"""Call-chain artifact generator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from artifacts.models.artifacts.call_chains import CallChainRecord
from artifacts.utils import _write_jsonl
from contract.artifacts import CALL_CHAINS_JSONL, build_record_id

if TYPE_CHECKING:
    from pathlib import Path

    from artifacts.models.ir import UnifiedExtractionResult


class CallChainsGenerator:
    """Generates call_chains.jsonl from extraction results."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "call_chains"

    def generate(
        self,
        results: list[UnifiedExtractionResult],
        out_dir: Path,
    ) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Generate call_chains artifact."""
        out_dir.mkdir(parents=True, exist_ok=True)

        records = [
            CallChainRecord(
                **chain.model_dump(),
                chain_id=build_record_id(
                    "chain", chain.file, chain.line, chain.column, chain.full_expression
                ),
            )
            for result in results
            for chain in result.call_chains
        ]
        records.sort(key=lambda record: (record.file, record.line, record.column))

        _write_jsonl(out_dir / CALL_CHAINS_JSONL, records)

        record_dicts = [record.model_dump() for record in records]
        return record_dicts, {"count": len(records)}


__all__ = ["CALL_CHAINS_JSONL", "CallChainsGenerator"]
