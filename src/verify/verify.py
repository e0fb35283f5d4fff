"""Determinism verification for drift-unified artifacts."""

from __future__ import annotations

import filecmp
import tempfile
from dataclasses import dataclass, field
from itertools import zip_longest
from pathlib import Path

from artifacts.write import generate_all_artifacts


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    mismatches: tuple[str, ...] = field(default_factory=tuple)
    missing: tuple[str, ...] = field(default_factory=tuple)
    extra: tuple[str, ...] = field(default_factory=tuple)
    # "path:line" of the first differing line of each mismatched file.
    first_differences: tuple[str, ...] = field(default_factory=tuple)


def _list_relative_files(root: Path) -> set[Path]:
    return {path.relative_to(root) for path in root.rglob("*") if path.is_file()}


def _first_differing_line(original: Path, regenerated: Path) -> int:
    with original.open("rb") as left, regenerated.open("rb") as right:
        for line_number, (a, b) in enumerate(zip_longest(left, right), 1):
            if a != b:
                return line_number
    return 0


def verify_determinism(*, root: Path, artifacts_dir: Path) -> DeterminismResult:
    """Verify that extraction artifacts are deterministic.

    Re-runs extraction into a temporary directory and compares the output
    byte-for-byte against the existing artifacts directory, which checks that
    normalizing an unchanged project twice yields identical IR. File set
    comparisons are performed on relative paths to avoid root-dependent
    mismatches.

    Args:
        root: Project root to analyze.
        artifacts_dir: Directory containing existing artifacts to verify.

    Returns:
        DeterminismResult with ok status, the missing, extra and mismatched
        relative paths, and the first differing line of each mismatch.

    Raises:
        FileNotFoundError: If artifacts_dir does not exist.
        NotADirectoryError: If artifacts_dir is not a directory.
    """
    if not artifacts_dir.exists():
        msg = f"Artifacts directory does not exist: {artifacts_dir}"
        raise FileNotFoundError(msg)
    if not artifacts_dir.is_dir():
        msg = f"Artifacts path is not a directory: {artifacts_dir}"
        raise NotADirectoryError(msg)

    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir)
        generate_all_artifacts(root=root, out_dir=temp_path)

        original_files = _list_relative_files(artifacts_dir)
        regenerated_files = _list_relative_files(temp_path)

        missing = sorted(str(path) for path in original_files - regenerated_files)
        extra = sorted(str(path) for path in regenerated_files - original_files)

        mismatches: list[str] = []
        first_differences: list[str] = []
        for path in sorted(original_files & regenerated_files):
            regenerated_path = temp_path / path
            original_path = artifacts_dir / path
            if not filecmp.cmp(original_path, regenerated_path, shallow=False):
                mismatches.append(str(path))
                line = _first_differing_line(original_path, regenerated_path)
                first_differences.append(f"{path}:{line}")

    ok = not missing and not extra and not mismatches
    return DeterminismResult(
        ok=ok,
        mismatches=tuple(mismatches),
        missing=tuple(missing),
        extra=tuple(extra),
        first_differences=tuple(first_differences),
    )
