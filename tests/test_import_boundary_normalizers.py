from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

_SRC = Path(__file__).parent.parent / "src"


def _loaded_after_import(module: str) -> set[str]:
    env = {**os.environ, "PYTHONPATH": str(_SRC)}
    completed = subprocess.run(
        [
            sys.executable,
            "-c",
            f"import sys, {module}; print('\\n'.join(sorted(sys.modules)))",
        ],
        capture_output=True,
        check=True,
        env=env,
        text=True,
    )
    return set(completed.stdout.split())


def test_normalizers_do_not_load_grammar_bindings() -> None:
    loaded = _loaded_after_import("normalize")

    assert "normalize.registry" in loaded
    assert not any(
        name == "tree_sitter" or name.startswith("tree_sitter") for name in loaded
    )


def test_ir_models_do_not_load_normalizers() -> None:
    loaded = _loaded_after_import("artifacts.models.ir")

    assert not any(name.startswith("normalize") for name in loaded)
    assert "parse.treesitter" not in loaded
