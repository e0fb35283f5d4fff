from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from cli import main
from rules.config import ConfigError, load_config, resolve_output_dir


def _write_minimal_repo(root: Path) -> None:
    (root / "pkg").mkdir(parents=True, exist_ok=True)
    (root / "pkg" / "__init__.py").write_text("", encoding="utf-8")
    (root / "pkg" / "module.py").write_text(
        '"""Minimal module."""\n\nprint("hi".upper())\n',
        encoding="utf-8",
    )


def _copy_mini_repo_fixture(root: Path) -> None:
    fixture_repo = Path(__file__).parent / "fixtures" / "mini_repo"
    shutil.copytree(fixture_repo, root)


def test_cli_generate_smoke(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_minimal_repo(repo_root)

    out_dir = tmp_path / "artifacts"
    exit_code = main(["generate", str(repo_root), "--out-dir", str(out_dir)])

    assert exit_code == 0
    assert out_dir.exists()
    assert any(out_dir.iterdir())


def test_readme_generate_default_output_dir_from_fixture(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_repo_fixture(repo_root)

    assert not (repo_root / ".drift").exists(), "output dir must not pre-exist"
    exit_code = main(["generate", str(repo_root)])

    default_out_dir = repo_root / ".drift"
    assert exit_code == 0
    assert default_out_dir.exists()
    assert any(default_out_dir.iterdir())


def test_readme_generate_out_dir_flag_from_fixture(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_repo_fixture(repo_root)

    custom_out_dir = tmp_path / "custom-artifacts"
    assert not custom_out_dir.exists(), "custom output dir must not pre-exist"
    exit_code = main(["generate", str(repo_root), "--out-dir", str(custom_out_dir)])

    assert exit_code == 0
    assert custom_out_dir.exists()
    assert any(custom_out_dir.iterdir())


def test_generate_then_validate_and_verify(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_repo_fixture(repo_root)

    assert main(["generate", str(repo_root)]) == 0
    assert main(["validate", str(repo_root)]) == 0
    assert main(["verify", str(repo_root)]) == 0


def test_generate_strict_mode_fails_on_fallbacks(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    (repo_root / "drift.toml").write_text(
        "[normalization]\nstrict = true\n", encoding="utf-8"
    )
    (repo_root / "main.py").write_text("f(...)\n", encoding="utf-8")

    exit_code = main(["generate", str(repo_root)])

    assert exit_code == 1
    assert "1 argument(s) fell back to unknown" in capsys.readouterr().err
    assert (repo_root / ".drift" / "call_chains.jsonl").exists()


def test_generate_invalid_config_exits_2(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    (repo_root / "drift.toml").write_text("languages = ['cobol']\n", encoding="utf-8")

    exit_code = main(["generate", str(repo_root)])

    assert exit_code == 2
    assert "config:" in capsys.readouterr().err


def test_cli_validate_default_artifacts_dir_reports_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_minimal_repo(repo_root)
    default_artifacts_dir = (repo_root / load_config(repo_root).output_dir).resolve()

    monkeypatch.chdir(repo_root)
    exit_code = main(["validate"])

    assert exit_code == 1
    captured = capsys.readouterr()
    assert f"{default_artifacts_dir}:" in captured.err
    assert "Artifacts directory does not exist." in captured.err


def test_cli_validate_includes_path_and_message(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    artifacts_dir = tmp_path / "missing-artifacts"

    exit_code = main(["validate", str(tmp_path), "--artifacts-dir", str(artifacts_dir)])

    assert exit_code == 1
    captured = capsys.readouterr()
    assert f"{artifacts_dir}:" in captured.err
    assert "Artifacts directory does not exist." in captured.err


def test_cli_verify_default_artifacts_dir_reports_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_minimal_repo(repo_root)
    default_artifacts_dir = (repo_root / load_config(repo_root).output_dir).resolve()

    monkeypatch.chdir(repo_root)
    exit_code = main(["verify"])

    assert exit_code == 2
    captured = capsys.readouterr()
    assert f"artifacts-dir: {default_artifacts_dir}" in captured.err
    assert "Artifacts directory does not exist" in captured.err


def test_cli_verify_missing_artifacts_dir_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_minimal_repo(repo_root)

    artifacts_dir = tmp_path / "missing-artifacts"
    exit_code = main(["verify", str(repo_root), "--artifacts-dir", str(artifacts_dir)])

    assert exit_code == 2
    captured = capsys.readouterr()
    assert f"artifacts-dir: {artifacts_dir}" in captured.err
    assert "Artifacts directory does not exist" in captured.err


def test_cli_verify_reports_changed_artifact(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_minimal_repo(repo_root)
    assert main(["generate", str(repo_root)]) == 0

    (repo_root / "pkg" / "module.py").write_text("x.y()\n", encoding="utf-8")
    exit_code = main(["verify", str(repo_root)])

    assert exit_code == 1
    assert "mismatches: call_chains.jsonl:1" in capsys.readouterr().err


def test_cli_inspect_prints_ir(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "lib.rs"
    source.write_text("fn main() { v.iter().count(); }\n", encoding="utf-8")

    exit_code = main(["inspect", str(source)])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["language"] == "rust"
    assert "stats" not in payload
    assert [s["name"] for s in payload["call_chains"][0]["segments"]] == ["iter", "count"]
    assert payload["functions"][0]["name"] == "main"


def test_cli_inspect_language_override(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = tmp_path / "script"
    source.write_text("a.b()\n", encoding="utf-8")

    exit_code = main(["inspect", str(source), "--language", "python"])

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out)["language"] == "python"


def test_cli_inspect_unsupported_extension(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = tmp_path / "main.go"
    source.write_text("package main\n", encoding="utf-8")

    exit_code = main(["inspect", str(source)])

    assert exit_code == 2
    assert "main.go" in capsys.readouterr().err


def test_resolve_output_dir_rejects_escape(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    with pytest.raises(ConfigError, match="escapes the project root"):
        resolve_output_dir(repo_root, "../outside")
