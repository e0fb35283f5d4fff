"""Import and export models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from parse.languages import UnifiedLanguage  # noqa: TC001


class UnifiedImportedName(BaseModel):
    """One name binding of an import or export.

    A wildcard binds ``imported="*"`` with ``is_namespace=True``.
    """

    model_config = ConfigDict(frozen=True)

    imported: str
    local: str
    is_default: bool = False
    is_namespace: bool = False


class UnifiedImport(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    names: tuple[UnifiedImportedName, ...] = ()
    line: int
    is_type_only: bool = False
    language: UnifiedLanguage


class UnifiedExport(BaseModel):
    """An exported name; ``source`` is set for re-exports."""

    model_config = ConfigDict(frozen=True)

    name: str
    source: str | None = None
    names: tuple[UnifiedImportedName, ...] = ()
    is_default: bool = False
    is_re_export: bool = False
    is_type_only: bool = False
    line: int
    language: UnifiedLanguage


__all__ = ["UnifiedExport", "UnifiedImport", "UnifiedImportedName"]
