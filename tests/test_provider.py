from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from parse.languages import UnsupportedLanguageError
from provider.unified import UnifiedProvider, content_hash
from rules.config import DriftConfig, NormalizationConfig

_FIXTURE_ROOT = Path(__file__).parent / "fixtures" / "mini_repo"


def test_extract_source_reports_every_declaration_kind() -> None:
    source = (
        'import { db } from "./db";\n'
        "export class Repo {\n"
        "  find(id: number) {\n"
        '    return db.from("users").eq("id", id);\n'
        "  }\n"
        "}\n"
    )

    result = UnifiedProvider().extract_source(source, "src/repo.ts")

    assert result.language == "typescript"
    assert result.errors == ()
    assert [f.name for f in result.functions] == ["find"]
    assert [c.name for c in result.classes] == ["Repo"]
    assert [i.source for i in result.imports] == ["./db"]
    assert [e.name for e in result.exports] == ["Repo"]
    assert [c.receiver for c in result.call_chains] == ["db"]
    assert result.stats.call_chains_extracted == 1
    assert result.stats.nodes_visited > 0


def test_syntax_errors_yield_partial_result_with_error_entry() -> None:
    source = "const ok = a.b();\nfunction broken( {\n"

    result = UnifiedProvider().extract_source(source, "src/broken.ts")

    assert result.errors == ("syntax errors present; extraction may be partial",)
    assert any(chain.full_expression == "a.b()" for chain in result.call_chains)


def test_unsupported_extension_raises() -> None:
    with pytest.raises(UnsupportedLanguageError, match=".go"):
        UnifiedProvider().extract_source("package main\n", "main.go")


def test_explicit_language_overrides_extension() -> None:
    result = UnifiedProvider().extract_source("x.y()\n", "script", language="python")

    assert result.language == "python"
    assert [c.receiver for c in result.call_chains] == ["x"]


def test_strict_mode_reports_fallbacks() -> None:
    source = "f(...)\n"

    relaxed = UnifiedProvider().extract_source(source, "a.py")
    strict = UnifiedProvider(strict=True).extract_source(source, "a.py")

    assert relaxed.errors == ()
    assert relaxed.stats.fallback_count == 1
    assert strict.errors == ("strict: 1 argument(s) fell back to unknown",)
    assert strict.call_chains == relaxed.call_chains


def test_normalizer_failure_becomes_error_entry(monkeypatch: pytest.MonkeyPatch) -> None:
    provider = UnifiedProvider()

    def _explode(*_args: object, **_kwargs: object) -> None:
        msg = "boom"
        raise RuntimeError(msg)

    monkeypatch.setattr(provider.normalizer_for("python"), "normalize", _explode)

    result = provider.extract_source("x.y()\n", "a.py")

    assert result.errors == ("normalization failed: boom",)
    assert result.call_chains == ()
    assert result.content_hash == content_hash(b"x.y()\n")


def test_content_hash_is_stable_and_content_sensitive() -> None:
    provider = UnifiedProvider()

    first = provider.extract_source("a.b()\n", "a.py")
    second = provider.extract_source(b"a.b()\n", "other.py")
    changed = provider.extract_source("a.c()\n", "a.py")

    assert first.content_hash == second.content_hash
    assert first.content_hash != changed.content_hash
    assert len(first.content_hash) == 32


def test_extract_project_walks_fixture_in_path_order(tmp_path: Path) -> None:
    root = tmp_path / "repo"
    shutil.copytree(_FIXTURE_ROOT, root)

    results = UnifiedProvider().extract_project(root)

    files = [result.file for result in results]
    assert files == sorted(files)
    assert "ignored/skip.py" not in files
    assert {
        "crates/store/src/lib.rs",
        "pkg_a/core.py",
        "pkg_a/use_core.py",
        "web/api.ts",
        "web/types.ts",
    } <= set(files)
    assert all(result.errors == () for result in results)


def test_extract_project_respects_language_selection(tmp_path: Path) -> None:
    root = tmp_path / "repo"
    shutil.copytree(_FIXTURE_ROOT, root)

    results = UnifiedProvider(languages=["rust"]).extract_project(root)

    assert [result.file for result in results] == ["crates/store/src/lib.rs"]
    assert {result.language for result in results} == {"rust"}


def test_extract_file_reports_read_failure(tmp_path: Path) -> None:
    result = UnifiedProvider().extract_file(tmp_path / "missing.py", tmp_path)

    assert result.file == "missing.py"
    assert result.errors[0].startswith("read failed:")


def test_from_config_applies_normalization_limits() -> None:
    config = DriftConfig(
        languages=["python"],
        normalization=NormalizationConfig(max_chain_depth=3, max_arg_depth=2, strict=True),
    )

    provider = UnifiedProvider.from_config(config)

    assert provider.languages == ("python",)
    assert provider.strict is True
    assert provider.normalizer_for("python").walker.max_depth == 3
    assert provider.normalizer_for("python").arguments.max_depth == 2
