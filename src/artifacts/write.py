from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from artifacts.generators import (
    CallChainsGenerator,
    ClassesGenerator,
    ExportsGenerator,
    FunctionsGenerator,
    ImportsGenerator,
    SummaryGenerator,
)
from artifacts.utils import _get_output_dir_name
from contract.artifacts import (
    CALL_CHAINS_JSONL,
    CLASSES_JSONL,
    EXPORTS_JSONL,
    EXTRACTION_SUMMARY_JSON,
    FUNCTIONS_JSONL,
    IMPORTS_JSONL,
)
from provider.unified import UnifiedProvider
from rules.config import load_config, resolve_output_dir

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import DriftConfig

logger = logging.getLogger(__name__)


def generate_all_artifacts(
    *,
    root: Path,
    out_dir: Path | None = None,
    config: DriftConfig | None = None,
) -> dict[str, object]:
    """Generate deterministic IR artifacts for a project.

    Args:
        root: Root directory of the project to analyze
        out_dir: Optional output directory for generated artifacts
        config: Optional configuration; loaded from drift.toml when omitted

    Returns:
        Dictionary with counts and list of generated artifact paths.
    """
    if config is None:
        config = load_config(root)

    if out_dir is None:
        out_dir = resolve_output_dir(root, config.output_dir)

    provider = UnifiedProvider.from_config(config)
    results = provider.extract_project(
        root,
        output_dir=_get_output_dir_name(out_dir, root),
        include_patterns=config.include,
        exclude_patterns=config.exclude,
        nested_gitignore=config.nested_gitignore,
    )

    counts: dict[str, int] = {}
    for generator in (
        CallChainsGenerator(),
        FunctionsGenerator(),
        ClassesGenerator(),
        ImportsGenerator(),
        ExportsGenerator(),
    ):
        _, meta = generator.generate(results, out_dir)
        counts[generator.name] = int(meta["count"])
        logger.debug("Wrote %d %s record(s)", counts[generator.name], generator.name)

    _, summary = SummaryGenerator().generate(results, out_dir)

    artifacts_list = [
        CALL_CHAINS_JSONL,
        FUNCTIONS_JSONL,
        CLASSES_JSONL,
        IMPORTS_JSONL,
        EXPORTS_JSONL,
        EXTRACTION_SUMMARY_JSON,
    ]

    return {
        "file_count": len(results),
        "call_chain_count": counts["call_chains"],
        "function_count": counts["functions"],
        "class_count": counts["classes"],
        "import_count": counts["imports"],
        "export_count": counts["exports"],
        "fallback_count": summary["fallback_count"],
        "files_with_errors": len(summary["files_with_errors"]),
        "artifacts": [str(out_dir / name) for name in artifacts_list],
    }
