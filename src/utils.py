"""Shared utilities for drift-unified."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

_PYTHON_SUFFIXES = (".py", ".pyi")


def path_to_module(file_path: str | Path) -> str:
    """Convert a file path to a Python module name.

    Args:
        file_path: Relative file path (e.g., "src/drift_app/cli.py" or Path object)

    Returns:
        Module name (e.g., "drift_app.cli")

    Raises:
        ValueError: If the path does not name a non-empty module.

    Examples:
        >>> path_to_module("src/drift_app/cli.py")
        'drift_app.cli'
        >>> path_to_module("src/drift_app/__init__.py")
        'drift_app'
        >>> path_to_module(Path("foo/bar.py"))
        'foo.bar'
    """
    path_str = file_path.as_posix() if isinstance(file_path, Path) else str(file_path)
    normalized_parts = [part for part in path_str.replace("\\", "/").split("/") if part]

    # Source under src/<package>/... maps to <package>.<submodules>.
    module_parts = (
        normalized_parts[1:]
        if len(normalized_parts) >= 2 and normalized_parts[0] == "src"
        else normalized_parts
    )

    if module_parts:
        for suffix in _PYTHON_SUFFIXES:
            if module_parts[-1].endswith(suffix):
                module_parts[-1] = module_parts[-1][: -len(suffix)]
                break

    if module_parts and module_parts[-1] == "__init__":
        module_parts = module_parts[:-1]

    if not module_parts:
        msg = f"Module name for '{path_str}' must be non-empty"
        raise ValueError(msg)

    return ".".join(module_parts)


def module_name_for(file_path: str, language: str) -> str:
    """Module component used as the prefix of qualified names.

    Python files use their dotted module path; other languages use the file
    stem (``src/db/client.rs`` -> ``client``). Returns "" when no name can be
    derived.
    """
    if language == "python":
        try:
            return path_to_module(file_path)
        except ValueError:
            return ""
    return PurePosixPath(file_path.replace("\\", "/")).stem


__all__ = ["module_name_for", "path_to_module"]
