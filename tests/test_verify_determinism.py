from __future__ import annotations

import shutil
from pathlib import Path

import pytest
from artifacts.write import generate_all_artifacts
from verify.verify import DeterminismResult, verify_determinism

_FIXTURE_ROOT = Path(__file__).parent / "fixtures" / "mini_repo"


def _write_minimal_repo(root: Path) -> None:
    (root / "pkg").mkdir(parents=True, exist_ok=True)
    (root / "pkg" / "__init__.py").write_text("", encoding="utf-8")
    (root / "pkg" / "module.py").write_text(
        "import os\n\nos.path.join('a', 'b')\n",
        encoding="utf-8",
    )


def test_verify_determinism_requires_artifacts_dir(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_minimal_repo(repo_root)

    missing_dir = tmp_path / "missing"
    with pytest.raises(FileNotFoundError, match="Artifacts directory does not exist"):
        verify_determinism(root=repo_root, artifacts_dir=missing_dir)


def test_verify_determinism_relative_paths_and_first_difference(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_minimal_repo(repo_root)

    artifacts_dir = tmp_path / "artifacts"
    artifacts_dir.mkdir()

    for rel_path, content in (
        ("b.jsonl", "same\nb-original\n"),
        ("a.jsonl", "a-original\n"),
        ("stale.jsonl", "old\n"),
    ):
        path = artifacts_dir / rel_path
        path.write_text(content, encoding="utf-8")

    def _fake_generate_all_artifacts(*, root: Path, out_dir: Path) -> dict[str, object]:
        (out_dir / "a.jsonl").write_text("a-original\n", encoding="utf-8")
        (out_dir / "b.jsonl").write_text("same\nb-regenerated\n", encoding="utf-8")
        (out_dir / "new.jsonl").write_text("", encoding="utf-8")
        return {"artifacts": []}

    monkeypatch.setattr(
        "verify.verify.generate_all_artifacts",
        _fake_generate_all_artifacts,
    )

    result = verify_determinism(root=repo_root, artifacts_dir=artifacts_dir)

    assert result == DeterminismResult(
        ok=False,
        mismatches=("b.jsonl",),
        missing=("stale.jsonl",),
        extra=("new.jsonl",),
        first_differences=("b.jsonl:2",),
    )


def test_verify_determinism_passes_for_fresh_artifacts(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    shutil.copytree(_FIXTURE_ROOT, repo_root)
    artifacts_dir = tmp_path / "artifacts"

    generate_all_artifacts(root=repo_root, out_dir=artifacts_dir)
    result = verify_determinism(root=repo_root, artifacts_dir=artifacts_dir)

    assert result == DeterminismResult(ok=True)


def test_verify_determinism_detects_source_change(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_minimal_repo(repo_root)
    artifacts_dir = tmp_path / "artifacts"
    generate_all_artifacts(root=repo_root, out_dir=artifacts_dir)

    (repo_root / "pkg" / "module.py").write_text(
        "import os\n\nos.path.join('a', 'c')\n", encoding="utf-8"
    )
    result = verify_determinism(root=repo_root, artifacts_dir=artifacts_dir)

    assert result.ok is False
    assert "call_chains.jsonl" in result.mismatches
    assert "call_chains.jsonl:1" in result.first_differences
