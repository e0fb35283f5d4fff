"""Normalized call-argument model.

A ``NormalizedArg`` is the language-agnostic shape of one argument passed to a
call. Literal payloads live in the ``*_value`` fields; ``object`` and
``array`` variants recurse through ``properties`` and ``elements``.

Object properties are stored as ``(key, value)`` pairs in source order so the
whole model stays immutable and hashable. ``property_map()`` gives read-only
keyed access; serialized output still renders them as a JSON object.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializationInfo,
    field_serializer,
    field_validator,
)

ArgType = Literal[
    "string", "number", "boolean", "identifier", "object", "array", "unknown"
]

# Why an argument ended up as ``unknown``.
UnknownLabel = Literal["null", "call", "closure", "expression", "depth", "unsupported"]


class NormalizedArg(BaseModel):
    """One call argument in language-agnostic form."""

    model_config = ConfigDict(frozen=True)

    type: ArgType
    value: str = Field(description="Original source text of the argument")
    string_value: str | None = None
    number_value: float | None = None
    boolean_value: bool | None = None
    properties: tuple[tuple[str, NormalizedArg], ...] | None = Field(
        default=None, description="Object properties as (key, value) pairs"
    )
    elements: tuple[NormalizedArg, ...] | None = None
    label: UnknownLabel | None = None
    keyword: str | None = Field(
        default=None, description="Keyword name for keyword arguments"
    )
    line: int
    column: int

    @field_validator("properties", mode="before")
    @classmethod
    def _properties_from_mapping(cls, value: object) -> object:
        if isinstance(value, Mapping):
            return tuple(value.items())
        return value

    @field_serializer("properties")
    def _properties_as_object(
        self,
        value: tuple[tuple[str, NormalizedArg], ...] | None,
        info: SerializationInfo,
    ) -> dict[str, Any] | None:
        if value is None:
            return None
        return {key: arg.model_dump(mode=info.mode) for key, arg in value}

    def property_map(self) -> Mapping[str, NormalizedArg]:
        """Read-only ``key -> argument`` view of ``properties``."""
        return MappingProxyType(dict(self.properties or ()))


NormalizedArg.model_rebuild()

PropertyItems = tuple[tuple[str, NormalizedArg], ...]

__all__ = ["ArgType", "NormalizedArg", "PropertyItems", "UnknownLabel"]
