"""Constant literal variants carried by EConst expressions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from comptime.errors import ExprTypeError


@dataclass(frozen=True)
class CInt:
    value: int

    def __post_init__(self):
        # bool is an int subclass; keep it out of integer constants
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ExprTypeError(f"CInt expects an int, got {self.value!r}")


@dataclass(frozen=True)
class CFloat:
    value: float

    def __post_init__(self):
        if not isinstance(self.value, float):
            raise ExprTypeError(f"CFloat expects a float, got {self.value!r}")


@dataclass(frozen=True)
class CString:
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise ExprTypeError(f"CString expects a str, got {self.value!r}")


@dataclass(frozen=True)
class CIdent:
    name: str

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ExprTypeError(f"CIdent expects a non-empty str, got {self.name!r}")


Constant = Union[CInt, CFloat, CString, CIdent]

CONSTANT_TYPES = (CInt, CFloat, CString, CIdent)
