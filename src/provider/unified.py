"""Unified extraction across languages.

The provider is the orchestration layer around the normalizers: it picks a
language, parses, normalizes, times each phase and turns per-file failures
into error entries on the result instead of exceptions.
"""

from __future__ import annotations

import hashlib
import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING

from artifacts.models.ir import ExtractionStats, UnifiedExtractionResult
from normalize.arguments import DEFAULT_MAX_ARG_DEPTH
from normalize.chains import DEFAULT_MAX_CHAIN_DEPTH
from normalize.registry import get_normalizer
from parse.languages import SUPPORTED_LANGUAGES, detect_language, extensions_for
from parse.treesitter import parse_source
from scan.files import find_source_files

if TYPE_CHECKING:
    from collections.abc import Iterable

    from normalize.base import BaseNormalizer
    from parse.languages import UnifiedLanguage
    from rules.config import DriftConfig

logger = logging.getLogger(__name__)


def content_hash(source: bytes) -> str:
    """Stable digest of a file's bytes, for caching IR outside this package."""
    return hashlib.blake2b(source, digest_size=16).hexdigest()


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


class UnifiedProvider:
    """Extracts unified IR from source text, files or whole projects."""

    def __init__(
        self,
        *,
        languages: Iterable[UnifiedLanguage] | None = None,
        max_chain_depth: int = DEFAULT_MAX_CHAIN_DEPTH,
        max_arg_depth: int = DEFAULT_MAX_ARG_DEPTH,
        strict: bool = False,
    ) -> None:
        self.languages: tuple[UnifiedLanguage, ...] = tuple(
            languages if languages is not None else SUPPORTED_LANGUAGES
        )
        self.strict = strict
        self._normalizers: dict[str, BaseNormalizer] = {
            language: get_normalizer(
                language,
                max_chain_depth=max_chain_depth,
                max_arg_depth=max_arg_depth,
            )
            for language in SUPPORTED_LANGUAGES
        }

    @classmethod
    def from_config(cls, config: DriftConfig) -> UnifiedProvider:
        return cls(
            languages=config.languages,
            max_chain_depth=config.normalization.max_chain_depth,
            max_arg_depth=config.normalization.max_arg_depth,
            strict=config.normalization.strict,
        )

    def normalizer_for(self, language: UnifiedLanguage) -> BaseNormalizer:
        return self._normalizers[language]

    def extract_source(
        self,
        source: str | bytes,
        file_path: str,
        language: UnifiedLanguage | None = None,
    ) -> UnifiedExtractionResult:
        """Parse and normalize one file's source.

        Raises:
            UnsupportedLanguageError: If ``language`` is omitted and the file
                extension is not handled.
        """
        if language is None:
            language = detect_language(file_path)

        source_bytes = source.encode("utf8") if isinstance(source, str) else source
        source_text = source_bytes.decode("utf8", errors="replace")
        digest = content_hash(source_bytes)
        started = time.perf_counter()

        try:
            root = parse_source(source_bytes, language, file_path)
        except Exception as exc:
            logger.exception("Failed to parse %s", file_path)
            return UnifiedExtractionResult(
                file=file_path,
                language=language,
                content_hash=digest,
                errors=(f"parse failed: {exc}",),
                stats=ExtractionStats(total_time_ms=_elapsed_ms(started)),
            )
        parse_time_ms = _elapsed_ms(started)

        errors: list[str] = []
        if root.has_error:
            logger.info("%s contains syntax errors; extraction may be partial", file_path)
            errors.append("syntax errors present; extraction may be partial")

        normalize_started = time.perf_counter()
        try:
            normalized = self._normalizers[language].normalize(root, source_text, file_path)
        except Exception as exc:
            logger.exception("Normalizer failed for %s", file_path)
            return UnifiedExtractionResult(
                file=file_path,
                language=language,
                content_hash=digest,
                errors=(*errors, f"normalization failed: {exc}"),
                stats=ExtractionStats(
                    parse_time_ms=parse_time_ms,
                    total_time_ms=_elapsed_ms(started),
                ),
            )
        normalize_time_ms = _elapsed_ms(normalize_started)

        if self.strict and normalized.fallback_count:
            logger.warning(
                "%s: %d argument(s) fell back to unknown",
                file_path,
                normalized.fallback_count,
            )
            errors.append(
                f"strict: {normalized.fallback_count} argument(s) fell back to unknown"
            )

        return UnifiedExtractionResult(
            file=file_path,
            language=language,
            content_hash=digest,
            functions=tuple(normalized.functions),
            call_chains=tuple(normalized.call_chains),
            classes=tuple(normalized.classes),
            imports=tuple(normalized.imports),
            exports=tuple(normalized.exports),
            errors=tuple(errors),
            stats=ExtractionStats(
                parse_time_ms=parse_time_ms,
                normalize_time_ms=normalize_time_ms,
                total_time_ms=_elapsed_ms(started),
                nodes_visited=normalized.nodes_visited,
                call_chains_extracted=len(normalized.call_chains),
                fallback_count=normalized.fallback_count,
            ),
        )

    def extract_file(self, path: Path, root: Path | None = None) -> UnifiedExtractionResult:
        """Extract one file; ``file`` on the result is relative to ``root`` when given.

        Raises:
            UnsupportedLanguageError: If the file extension is not handled.
        """
        file_path = path.relative_to(root).as_posix() if root is not None else path.as_posix()
        language = detect_language(file_path)

        try:
            source = path.read_bytes()
        except OSError as exc:
            logger.warning("Cannot read %s: %s", file_path, exc)
            return UnifiedExtractionResult(
                file=file_path,
                language=language,
                errors=(f"read failed: {exc}",),
            )

        return self.extract_source(source, file_path, language)

    def extract_project(
        self,
        root: Path,
        *,
        output_dir: str = ".drift",
        include_patterns: list[str] | None = None,
        exclude_patterns: list[str] | None = None,
        nested_gitignore: bool = False,
    ) -> list[UnifiedExtractionResult]:
        """Extract every supported file under ``root`` in relative-path order."""
        root = Path(root)
        results = [
            self.extract_file(path, root)
            for path in find_source_files(
                root,
                extensions=extensions_for(self.languages),
                output_dir=output_dir,
                include_patterns=include_patterns,
                exclude_patterns=exclude_patterns,
                nested_gitignore=nested_gitignore,
            )
        ]
        failed = sum(1 for result in results if result.errors)
        logger.debug("Extracted %d file(s) under %s, %d with errors", len(results), root, failed)
        return results


__all__ = ["UnifiedProvider", "content_hash"]
