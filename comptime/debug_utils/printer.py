"""Render expressions as Haxe-like source text for diagnostics and debugging."""

from __future__ import annotations

from comptime.errors import ExprTypeError
from comptime.types.constant import CFloat, CIdent, CInt, CString, Constant
from comptime.types.expr import EArrayDecl, EBlock, ECall, EConst, EMacroCall, Expr

_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}


def constant_to_source(const: Constant) -> str:
    match const:
        case CInt(value=value):
            return str(value)
        case CFloat(value=value):
            return repr(value)
        case CString(value=value):
            return '"' + "".join(_ESCAPES.get(ch, ch) for ch in value) + '"'
        case CIdent(name=name):
            return name
        case other:
            raise ExprTypeError(f"Unknown constant variant: {other!r}")


def to_source(expr: Expr) -> str:
    match expr.expr:
        case EConst(const=const):
            return constant_to_source(const)
        case EArrayDecl(values=values):
            return "[" + ", ".join(to_source(v) for v in values) + "]"
        case EBlock(exprs=exprs):
            if not exprs:
                return "{}"
            return "{ " + " ".join(to_source(e) + ";" for e in exprs) + " }"
        case ECall(target=target, args=args):
            return f"{to_source(target)}({', '.join(to_source(a) for a in args)})"
        case EMacroCall(name=name, args=args):
            return f"{name}!({', '.join(to_source(a) for a in args)})"
        case other:
            raise ExprTypeError(f"Unknown expression variant: {other!r}")
