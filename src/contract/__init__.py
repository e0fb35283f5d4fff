"""Stable contract surface for drift-unified artifacts.

Filenames, schema version and record models that consumers of the output
directory depend on.
"""

from contract.artifacts import (
    ARTIFACT_SCHEMA_VERSION,
    ARTIFACT_SPECS,
    CALL_CHAINS_JSONL,
    CLASSES_JSONL,
    EXPORTS_JSONL,
    EXTRACTION_SUMMARY_JSON,
    FUNCTIONS_JSONL,
    IMPORTS_JSONL,
    ArtifactSpec,
)

_MODEL_NAMES = frozenset(
    {
        "CallChainRecord",
        "ClassRecord",
        "ExportRecord",
        "ExtractionSummary",
        "FunctionRecord",
        "ImportRecord",
    }
)


def __getattr__(name: str) -> object:
    if name in _MODEL_NAMES:
        from contract import models

        return getattr(models, name)

    if name in {"ValidationMessage", "ValidationResult", "validate_artifacts"}:
        from contract.validation import (
            ValidationMessage,
            ValidationResult,
            validate_artifacts,
        )

        return {
            "ValidationMessage": ValidationMessage,
            "ValidationResult": ValidationResult,
            "validate_artifacts": validate_artifacts,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "ARTIFACT_SCHEMA_VERSION",
    "ARTIFACT_SPECS",
    "CALL_CHAINS_JSONL",
    "CLASSES_JSONL",
    "EXPORTS_JSONL",
    "EXTRACTION_SUMMARY_JSON",
    "FUNCTIONS_JSONL",
    "IMPORTS_JSONL",
    "ArtifactSpec",
    "CallChainRecord",
    "ClassRecord",
    "ExportRecord",
    "ExtractionSummary",
    "FunctionRecord",
    "ImportRecord",
    "ValidationMessage",
    "ValidationResult",
    "validate_artifacts",
]
