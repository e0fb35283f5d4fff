from __future__ import annotations

from pathlib import Path
from typing import Any

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

from normalize.arguments import DEFAULT_MAX_ARG_DEPTH
from normalize.chains import DEFAULT_MAX_CHAIN_DEPTH
from parse.languages import SUPPORTED_LANGUAGES, UnifiedLanguage

CONFIG_FILENAME = "drift.toml"
DEFAULT_OUTPUT_DIR = ".drift"


class NormalizationConfig(BaseModel):
    """Limits and reporting for the normalizers."""

    model_config = ConfigDict(extra="forbid")

    max_chain_depth: int = Field(
        default=DEFAULT_MAX_CHAIN_DEPTH,
        ge=1,
        description="Links walked before a chain is dropped",
    )
    max_arg_depth: int = Field(
        default=DEFAULT_MAX_ARG_DEPTH,
        ge=1,
        description="Nesting depth after which an argument becomes unknown",
    )
    strict: bool = Field(
        default=False,
        description="Report files with argument fallbacks as errors",
    )


class DriftConfig(BaseModel):
    """Configuration for drift-unified extraction."""

    model_config = ConfigDict(extra="forbid")

    output_dir: str = Field(
        default=DEFAULT_OUTPUT_DIR,
        description="Output directory for generated artifacts",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all supported files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to exclude",
    )
    languages: list[UnifiedLanguage] = Field(
        default_factory=lambda: list(SUPPORTED_LANGUAGES),
        description="Languages to extract",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    normalization: NormalizationConfig = Field(
        default_factory=NormalizationConfig,
        description="Normalizer limits",
    )

    @field_validator("languages", mode="before")
    @classmethod
    def validate_languages(cls, v: Any) -> Any:
        """Reject unknown language names with the list of supported ones."""
        if v is None:
            return list(SUPPORTED_LANGUAGES)

        if not isinstance(v, list):
            msg = "languages must be a list of language names"
            raise TypeError(msg)

        for language in v:
            if language not in SUPPORTED_LANGUAGES:
                msg = (
                    f"Unsupported language '{language}'. "
                    f"Supported: {', '.join(SUPPORTED_LANGUAGES)}"
                )
                raise ValueError(msg)

        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_output_dir(root: Path, output_dir: str) -> Path:
    """Resolve a config-provided output_dir safely within the project root.

    The config output_dir must be a non-empty relative path that remains
    within the project root after resolution. Absolute paths and paths
    that escape the root are rejected.
    """
    if not output_dir:
        msg = "output_dir must be a non-empty relative path"
        raise ConfigError(msg)

    if output_dir.startswith("~"):
        msg = "output_dir must be a relative path within the project root"
        raise ConfigError(msg)

    output_path = Path(output_dir)
    if output_path.is_absolute():
        msg = "output_dir must be a relative path within the project root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved_output = (resolved_root / output_path).resolve()
    except OSError as exc:
        msg = f"Failed to resolve output_dir '{output_dir}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved_output.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"output_dir '{output_dir}' escapes the project root"
        raise ConfigError(msg) from exc

    return resolved_output


def load_config(root: Path) -> DriftConfig:
    """Load configuration from drift.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return DriftConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return DriftConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
