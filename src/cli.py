"""Command-line interface for drift-unified."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

from artifacts.write import generate_all_artifacts
from contract.validation import validate_artifacts
from parse.languages import SUPPORTED_LANGUAGES, UnsupportedLanguageError
from provider.unified import UnifiedProvider
from rules.config import ConfigError, load_config
from verify.verify import verify_determinism

logger = logging.getLogger(__name__)


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root (default: .)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="drift-unified")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser("generate", help="Generate artifacts")
    _add_common_paths(generate_parser)
    generate_parser.add_argument(
        "--out-dir",
        default=None,
        help="Output directory for generated artifacts (default: config output dir)",
    )

    validate_parser = subparsers.add_parser("validate", help="Validate artifacts")
    _add_common_paths(validate_parser)
    validate_parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Artifacts directory (default: config output dir)",
    )

    verify_parser = subparsers.add_parser(
        "verify", help="Verify determinism of artifacts"
    )
    _add_common_paths(verify_parser)
    verify_parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Artifacts directory (default: config output dir)",
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="Print the unified IR of one file as JSON"
    )
    inspect_parser.add_argument("file", help="Source file to normalize")
    inspect_parser.add_argument(
        "--language",
        choices=SUPPORTED_LANGUAGES,
        default=None,
        help="Override language detection",
    )

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _resolve_output_dir(out_dir: str | None) -> Path | None:
    if out_dir is None:
        return None
    return Path(out_dir).expanduser().resolve()


def _resolve_artifacts_dir(root: Path, artifacts_dir: str | None) -> Path:
    if artifacts_dir is None:
        config = load_config(root)
        return (root / config.output_dir).resolve()
    return Path(artifacts_dir).expanduser().resolve()


def _handle_generate(root: Path, out_dir: str | None) -> int:
    config = load_config(root)
    summary = generate_all_artifacts(
        root=root, out_dir=_resolve_output_dir(out_dir), config=config
    )
    logger.info(
        "Extracted %s file(s): %s chain(s), %s function(s)",
        summary["file_count"],
        summary["call_chain_count"],
        summary["function_count"],
    )
    if config.normalization.strict and summary["fallback_count"]:
        sys.stderr.write(
            f"{root}: {summary['fallback_count']} argument(s) fell back to unknown\n"
        )
        return 1
    return 0


def _handle_validate(root: Path, artifacts_dir: str | None) -> int:
    resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    result = validate_artifacts(resolved_artifacts_dir)
    for warning in result.warnings:
        logger.warning("%s: %s", warning.location(), warning.message)
    if result.errors:
        for error in result.errors:
            sys.stderr.write(f"{error.location()}: {error.message}\n")
        return 1
    return 0


def _handle_verify(root: Path, artifacts_dir: str | None) -> int:
    resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    try:
        result = verify_determinism(root=root, artifacts_dir=resolved_artifacts_dir)
    except (FileNotFoundError, NotADirectoryError) as exc:
        sys.stderr.write(f"artifacts-dir: {resolved_artifacts_dir}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2
    if not result.ok:
        for label, paths in (
            ("missing", result.missing),
            ("extra", result.extra),
            ("mismatches", result.first_differences),
        ):
            for path in paths:
                sys.stderr.write(f"{label}: {path}\n")
        return 1
    return 0


def _handle_inspect(file: str, language: str | None) -> int:
    path = Path(file).expanduser()
    if not path.is_file():
        sys.stderr.write(f"{file}: no such file\n")
        return 2

    provider = UnifiedProvider()
    try:
        if language is None:
            result = provider.extract_file(path)
        else:
            result = provider.extract_source(
                path.read_bytes(), path.as_posix(), language  # type: ignore[arg-type]
            )
    except UnsupportedLanguageError as exc:
        sys.stderr.write(f"{file}: {exc}\n")
        return 2

    payload = result.model_dump(exclude={"stats"})
    sys.stdout.write(
        orjson.dumps(payload, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS).decode()
    )
    sys.stdout.write("\n")
    return 1 if result.errors else 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "inspect":
        return _handle_inspect(args.file, args.language)

    root = Path(args.root).expanduser().resolve()

    try:
        if args.command == "generate":
            return _handle_generate(root, args.out_dir)

        if args.command == "validate":
            return _handle_validate(root, args.artifacts_dir)

        if args.command == "verify":
            return _handle_verify(root, args.artifacts_dir)
    except ConfigError as exc:
        sys.stderr.write(f"config: {exc}\n")
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
