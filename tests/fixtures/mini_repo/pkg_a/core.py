"""Core symbols for the mini fixture package."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class Greeter:
    """Simple class with a documented method."""

    def greet(self, name: str) -> str:
        return "hello, {}".format(name).strip()

    @staticmethod
    def default() -> Greeter:
        return Greeter()


def compute_value(x: int, *, scale: int = 2) -> int:
    return x * scale


def _private_helper(items: Iterable[str]) -> list[str]:
    return sorted(items)
