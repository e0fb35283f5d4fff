"""Call-chain models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from artifacts.models.ir.arguments import NormalizedArg  # noqa: TC001
from parse.languages import UnifiedLanguage  # noqa: TC001


class CallChainSegment(BaseModel):
    """One link of a chain: a method call or a property access.

    In ``db.from('users').select('*')`` the segments are ``from`` and
    ``select``; the receiver is ``db``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    is_call: bool
    args: tuple[NormalizedArg, ...] = ()
    line: int
    column: int


class UnifiedCallChain(BaseModel):
    """A chained expression normalized to receiver + ordered segments."""

    model_config = ConfigDict(frozen=True)

    receiver: str
    segments: tuple[CallChainSegment, ...] = Field(min_length=1)
    full_expression: str
    file: str
    line: int
    column: int
    end_line: int
    end_column: int
    language: UnifiedLanguage


__all__ = ["CallChainSegment", "UnifiedCallChain"]
