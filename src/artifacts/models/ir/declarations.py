"""Function and class declaration models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from parse.languages import UnifiedLanguage  # noqa: TC001

ClassKind = Literal["class", "struct", "enum", "trait", "interface"]


class UnifiedParameter(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: str | None = None
    has_default: bool = False
    is_rest: bool = False


class UnifiedFunction(BaseModel):
    """A function, method or method signature."""

    model_config = ConfigDict(frozen=True)

    name: str
    qualified_name: str
    file: str
    start_line: int
    end_line: int
    start_column: int
    end_column: int
    parameters: tuple[UnifiedParameter, ...] = ()
    return_type: str | None = None
    is_method: bool = False
    is_static: bool = False
    is_exported: bool = False
    is_constructor: bool = False
    is_async: bool = False
    class_name: str | None = None
    decorators: tuple[str, ...] = ()
    body_start_line: int
    body_end_line: int
    language: UnifiedLanguage


class UnifiedClass(BaseModel):
    """A class, struct, enum, trait or interface declaration."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: ClassKind = Field(description="Declaration kind as written in source")
    file: str
    start_line: int
    end_line: int
    base_classes: tuple[str, ...] = ()
    methods: tuple[str, ...] = ()
    is_exported: bool = False
    language: UnifiedLanguage


__all__ = ["ClassKind", "UnifiedClass", "UnifiedFunction", "UnifiedParameter"]
