"""Literal value types with no direct Python counterpart."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Char:
    """A character literal, kept distinct from a one-character string."""

    value: str

    def __post_init__(self) -> None:
        if len(self.value) != 1:
            raise ValueError(f"character literal must be one character, got {self.value!r}")


@dataclass(frozen=True, slots=True)
class UInt:
    """An unsigned integer literal, written in hexadecimal."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"unsigned integer cannot be negative: {self.value}")
