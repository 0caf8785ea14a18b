"""Source provenance for compile-time expressions.

A Position points at a character range in one line of an original source
file. Every Expr carries one so diagnostics can be attributed to the code
that produced them.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """File name, 1-based line and half-open character range [min, max)."""

    file: str
    line: int = 1
    min: int = 0
    max: int = 0

    def __post_init__(self):
        if not isinstance(self.file, str) or not self.file:
            raise ValueError(f"Position file must be a non-empty string, got {self.file!r}")
        if not isinstance(self.line, int) or self.line < 1:
            raise ValueError(f"Position line must be >= 1, got {self.line!r}")
        if not isinstance(self.min, int) or not isinstance(self.max, int):
            raise ValueError("Position range bounds must be integers")
        if self.min < 0 or self.max < self.min:
            raise ValueError(f"Invalid position range {self.min}-{self.max}")

    @classmethod
    def span(cls, file: str, offset: int, length: int = 0, line: int = 1) -> Position:
        return cls(file, line, offset, offset + length)

    def __str__(self) -> str:
        return f"{self.file}:{self.line}: characters {self.min}-{self.max}"
