"""Builders for constant and container expressions (implemented in Python).

Every builder validates its payload before constructing anything. When no
position is given, the expression is attributed to the innermost macro
invocation of the active compilation, mirroring Context.currentPos().
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from typing import Optional

from comptime import LiteralValue
from comptime.errors import MalformedLiteralError
from comptime.runtime_context import current_position
from comptime.types.constant import CFloat, CIdent, CInt, CString
from comptime.types.expr import EArrayDecl, EBlock, ECall, EConst, EMacroCall, Expr
from comptime.types.position import Position

INT_RE = re.compile(r"-?(?:0[xX][0-9A-Fa-f]+|[0-9]+)")
FLOAT_RE = re.compile(r"-?(?:[0-9]+\.[0-9]*|\.[0-9]+|[0-9]+)(?:[eE][+-]?[0-9]+)?")
IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def _pos(pos: Optional[Position]) -> Position:
    return pos if pos is not None else current_position()


def make_int(literal: str | int, pos: Optional[Position] = None) -> Expr:
    """
    Integer constant from a literal string: decimal or 0x-prefixed hex,
    with an optional leading minus sign.
    """
    if isinstance(literal, int) and not isinstance(literal, bool):
        value = literal
    elif isinstance(literal, str) and INT_RE.fullmatch(literal):
        text = literal.lower()
        negative = text.startswith("-")
        digits = text[1:] if negative else text
        try:
            value = int(digits, 16) if digits.startswith("0x") else int(digits, 10)
        except ValueError:
            # longer than the interpreter's int conversion limit
            raise MalformedLiteralError(f"Integer literal too long: {len(literal)} characters", pos) from None
        if negative:
            value = -value
    else:
        raise MalformedLiteralError(f"Invalid integer literal {literal!r}", pos)
    return Expr(EConst(CInt(value)), _pos(pos))


def make_float(literal: str | float, pos: Optional[Position] = None) -> Expr:
    if isinstance(literal, float):
        value = literal
    elif isinstance(literal, str) and FLOAT_RE.fullmatch(literal):
        value = float(literal)
    else:
        raise MalformedLiteralError(f"Invalid float literal {literal!r}", pos)
    if not math.isfinite(value):
        # 1e999 parses, but to inf
        raise MalformedLiteralError(f"Float literal {literal!r} is not finite", pos)
    return Expr(EConst(CFloat(value)), _pos(pos))


def make_string(value: str, pos: Optional[Position] = None) -> Expr:
    if not isinstance(value, str):
        raise MalformedLiteralError(f"String constant expects a str, got {value!r}", pos)
    return Expr(EConst(CString(value)), _pos(pos))


def make_ident(name: str, pos: Optional[Position] = None) -> Expr:
    if not isinstance(name, str) or not IDENT_RE.fullmatch(name):
        raise MalformedLiteralError(f"Invalid identifier {name!r}", pos)
    return Expr(EConst(CIdent(name)), _pos(pos))


def make_array(values: Iterable, pos: Optional[Position] = None) -> Expr:
    """Array declaration; plain Python literals are lifted with make_expr."""
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise MalformedLiteralError(f"Array declaration expects a sequence of values, got {values!r}", pos)
    pos = _pos(pos)
    return Expr(EArrayDecl(tuple(make_expr(v, pos) for v in values)), pos)


def make_block(exprs: Iterable[Expr], pos: Optional[Position] = None) -> Expr:
    return Expr(EBlock(tuple(exprs)), _pos(pos))


def make_call(target: Expr | str, args: Iterable = (), pos: Optional[Position] = None) -> Expr:
    pos = _pos(pos)
    if isinstance(target, str):
        target = make_ident(target, pos)
    return Expr(ECall(target, tuple(make_expr(a, pos) for a in args)), pos)


def make_macro_call(name: str, args: Iterable = (), pos: Optional[Position] = None) -> Expr:
    pos = _pos(pos)
    return Expr(EMacroCall(name, tuple(make_expr(a, pos) for a in args)), pos)


def make_expr(value: LiteralValue | Expr, pos: Optional[Position] = None) -> Expr:
    """
    Lift a Python value into an expression, as Context.makeExpr does.

    - Expr            -> unchanged
    - bool            -> identifier true / false
    - None            -> identifier null
    - int/float/str   -> constant
    - list/tuple      -> array declaration, element-wise
    """
    if isinstance(value, Expr):
        return value
    pos = _pos(pos)
    if isinstance(value, bool):
        return Expr(EConst(CIdent("true" if value else "false")), pos)
    if value is None:
        return Expr(EConst(CIdent("null")), pos)
    if isinstance(value, int):
        return make_int(value, pos)
    if isinstance(value, float):
        return make_float(value, pos)
    if isinstance(value, str):
        return make_string(value, pos)
    if isinstance(value, (list, tuple)):
        return make_array(value, pos)
    raise MalformedLiteralError(f"Cannot convert {type(value).__name__} value {value!r} to an expression", pos)
