from __future__ import annotations

import json
from pathlib import Path

import pytest

from artifacts.write import generate_all_artifacts
from contract.artifacts import (
    CALL_CHAINS_JSONL,
    EXPORTS_JSONL,
    EXTRACTION_SUMMARY_JSON,
    FUNCTIONS_JSONL,
    IMPORTS_JSONL,
)
from rules.config import DriftConfig


def _write_repo_fixture(repo_root: Path) -> None:
    repo_root.mkdir()
    (repo_root / "nested").mkdir()
    (repo_root / "pkg").mkdir()
    (repo_root / "web").mkdir()
    (repo_root / "pkg" / "keep.py").write_text(
        "import os\n\ndef keep():\n    print('keep'.upper())\n", encoding="utf-8"
    )
    (repo_root / "nested" / "skip.py").write_text(
        "import sys\n\ndef skip():\n    print('skip'.upper())\n", encoding="utf-8"
    )
    (repo_root / "nested" / ".gitignore").write_text("skip.py\n", encoding="utf-8")
    (repo_root / "web" / "app.ts").write_text(
        'import { x } from "./x";\nexport function app() { x.run(); }\n',
        encoding="utf-8",
    )


def _files_in(path: Path) -> set[str]:
    return {
        json.loads(line)["file"]
        for line in path.read_text(encoding="utf-8").splitlines()
        if line.strip()
    }


@pytest.mark.parametrize("nested_gitignore", [False, True])
def test_artifacts_share_one_file_list(tmp_path: Path, nested_gitignore: bool) -> None:
    repo_root = tmp_path / "repo"
    _write_repo_fixture(repo_root)
    out_dir = tmp_path / "artifacts"

    generate_all_artifacts(
        root=repo_root,
        out_dir=out_dir,
        config=DriftConfig(nested_gitignore=nested_gitignore),
    )

    observed = [
        _files_in(out_dir / name)
        for name in (CALL_CHAINS_JSONL, FUNCTIONS_JSONL, IMPORTS_JSONL)
    ]
    assert observed[0] == observed[1] == observed[2]

    summary = json.loads((out_dir / EXTRACTION_SUMMARY_JSON).read_text(encoding="utf-8"))
    if nested_gitignore:
        assert observed[0] == {"pkg/keep.py", "web/app.ts"}
        assert summary["file_count"] == 2
    else:
        assert observed[0] == {"nested/skip.py", "pkg/keep.py", "web/app.ts"}
        assert summary["file_count"] == 3


def test_language_selection_limits_every_artifact(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write_repo_fixture(repo_root)
    out_dir = tmp_path / "artifacts"

    generate_all_artifacts(
        root=repo_root,
        out_dir=out_dir,
        config=DriftConfig(languages=["typescript"]),
    )

    for name in (CALL_CHAINS_JSONL, FUNCTIONS_JSONL, IMPORTS_JSONL, EXPORTS_JSONL):
        assert _files_in(out_dir / name) == {"web/app.ts"}, name


def test_output_dir_inside_root_is_not_scanned(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write_repo_fixture(repo_root)
    out_dir = repo_root / "generated"
    out_dir.mkdir()
    (out_dir / "stale.py").write_text("stale.call()\n", encoding="utf-8")

    generate_all_artifacts(root=repo_root, out_dir=out_dir)

    assert "generated/stale.py" not in _files_in(out_dir / CALL_CHAINS_JSONL)


def test_exclude_patterns_apply_to_every_artifact(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write_repo_fixture(repo_root)
    out_dir = tmp_path / "artifacts"

    generate_all_artifacts(
        root=repo_root,
        out_dir=out_dir,
        config=DriftConfig(exclude=["pkg/*"]),
    )

    for name in (CALL_CHAINS_JSONL, FUNCTIONS_JSONL, IMPORTS_JSONL):
        assert "pkg/keep.py" not in _files_in(out_dir / name), name
