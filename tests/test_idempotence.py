from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from normalize.registry import get_normalizer
from parse.languages import detect_language
from parse.treesitter import parse_source

_FIXTURE_ROOT = Path(__file__).parent / "fixtures" / "mini_repo"
_FIXTURE_FILES = [
    "crates/store/src/lib.rs",
    "pkg_a/core.py",
    "pkg_a/use_core.py",
    "web/api.ts",
]


def _normalize(rel_path: str):
    source = (_FIXTURE_ROOT / rel_path).read_text(encoding="utf-8")
    language = detect_language(rel_path)
    root = parse_source(source, language, rel_path)
    return get_normalizer(language).normalize(root, source, rel_path)


@pytest.mark.parametrize("rel_path", _FIXTURE_FILES)
def test_same_tree_twice_yields_identical_ir(rel_path: str) -> None:
    source = (_FIXTURE_ROOT / rel_path).read_text(encoding="utf-8")
    language = detect_language(rel_path)
    root = parse_source(source, language, rel_path)
    normalizer = get_normalizer(language)

    first = normalizer.normalize(root, source, rel_path)
    second = normalizer.normalize(root, source, rel_path)

    assert first == second
    assert first.call_chains


def test_shared_normalizer_is_reentrant_across_threads() -> None:
    expected = {rel_path: _normalize(rel_path) for rel_path in _FIXTURE_FILES}

    with ThreadPoolExecutor(max_workers=4) as pool:
        actual = list(pool.map(_normalize, _FIXTURE_FILES * 4))

    for rel_path, normalized in zip(_FIXTURE_FILES * 4, actual):
        assert normalized == expected[rel_path]


def test_chains_from_one_file_do_not_leak_into_another() -> None:
    normalizer = get_normalizer("python")
    first_source = "a.b()\n"
    second_source = "c.d()\n"

    first = normalizer.normalize(parse_source(first_source, "python"), first_source, "a.py")
    second = normalizer.normalize(
        parse_source(second_source, "python"), second_source, "b.py"
    )

    assert [chain.receiver for chain in first.call_chains] == ["a"]
    assert [chain.receiver for chain in second.call_chains] == ["c"]
    assert {chain.file for chain in second.call_chains} == {"b.py"}
