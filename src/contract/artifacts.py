"""Artifact contract definitions.

Filenames, formats and record id rules for everything written under the
output directory. Consumers depend on these names, not on generator code.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# Schema version stamped on every artifact record.
ARTIFACT_SCHEMA_VERSION = 1

# Artifact filename constants (stable contract identifiers).
CALL_CHAINS_JSONL = "call_chains.jsonl"
FUNCTIONS_JSONL = "functions.jsonl"
CLASSES_JSONL = "classes.jsonl"
IMPORTS_JSONL = "imports.jsonl"
EXPORTS_JSONL = "exports.jsonl"
EXTRACTION_SUMMARY_JSON = "extraction_summary.json"


@dataclass(frozen=True)
class ArtifactSpec:
    """Specification for one contract artifact."""

    filename: str
    format: str
    required_fields_note: str


# ---------------------------------------------------------------------------
# Deterministic record ids
# ---------------------------------------------------------------------------
# Canonical id format: {kind}:{path}@L{line}:C{col}:{name}
# - kind: chain, fn, class, import, export
# - path: POSIX relative path (forward slashes, no ./ prefix)
# - line/col: 1-based integers
# - name: normalized expression or declaration name (see normalize_expr)

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_expr(raw_expr: str) -> str:
    """Normalize an expression string for embedding in a record id.

    Rules:
    - Strip leading/trailing whitespace.
    - Collapse internal whitespace runs (including newlines) to a single space.
    - Preserve dotted and ``::`` paths.
    """
    return _WHITESPACE_RUN.sub(" ", raw_expr.strip())


def build_record_id(kind: str, path: str, line: int, column: int, name: str) -> str:
    """Build a deterministic record id following the contract format.

    Format: ``{kind}:{path}@L{line}:C{col}:{normalized_name}``
    """
    return f"{kind}:{path}@L{line}:C{column}:{normalize_expr(name)}"


ARTIFACT_SPECS: dict[str, ArtifactSpec] = {
    "call_chains": ArtifactSpec(
        filename=CALL_CHAINS_JSONL,
        format="jsonl",
        required_fields_note="CallChainRecord fields required by contract.",
    ),
    "functions": ArtifactSpec(
        filename=FUNCTIONS_JSONL,
        format="jsonl",
        required_fields_note="FunctionRecord fields required by contract.",
    ),
    "classes": ArtifactSpec(
        filename=CLASSES_JSONL,
        format="jsonl",
        required_fields_note="ClassRecord fields required by contract.",
    ),
    "imports": ArtifactSpec(
        filename=IMPORTS_JSONL,
        format="jsonl",
        required_fields_note="ImportRecord fields required by contract.",
    ),
    "exports": ArtifactSpec(
        filename=EXPORTS_JSONL,
        format="jsonl",
        required_fields_note="ExportRecord fields required by contract.",
    ),
    "extraction_summary": ArtifactSpec(
        filename=EXTRACTION_SUMMARY_JSON,
        format="json",
        required_fields_note="ExtractionSummary fields required by contract.",
    ),
}
