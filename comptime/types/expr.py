"""Compile-time expression tree.

An Expr pairs a definition (one of the ExprDef variants below) with the
Position it came from. Nodes are frozen dataclasses; child sequences are
normalised to tuples so a constructed tree can not be mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Union

from comptime.errors import ExprTypeError
from comptime.types.constant import CONSTANT_TYPES, Constant
from comptime.types.position import Position


def _expr_tuple(owner: str, field_name: str, values) -> tuple:
    if isinstance(values, (str, bytes)) or not hasattr(values, "__iter__"):
        raise ExprTypeError(f"{owner}.{field_name} must be a sequence of Expr, got {values!r}")
    items = tuple(values)
    for item in items:
        if not isinstance(item, Expr):
            raise ExprTypeError(f"{owner}.{field_name} contains a non-Expr value: {item!r}")
    return items


@dataclass(frozen=True)
class EConst:
    const: Constant

    def __post_init__(self):
        if not isinstance(self.const, CONSTANT_TYPES):
            raise ExprTypeError(f"EConst expects a Constant, got {self.const!r}")


@dataclass(frozen=True)
class EArrayDecl:
    values: tuple[Expr, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "values", _expr_tuple("EArrayDecl", "values", self.values))


@dataclass(frozen=True)
class EBlock:
    exprs: tuple[Expr, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "exprs", _expr_tuple("EBlock", "exprs", self.exprs))


@dataclass(frozen=True)
class ECall:
    target: Expr
    args: tuple[Expr, ...] = ()

    def __post_init__(self):
        if not isinstance(self.target, Expr):
            raise ExprTypeError(f"ECall.target must be an Expr, got {self.target!r}")
        object.__setattr__(self, "args", _expr_tuple("ECall", "args", self.args))


@dataclass(frozen=True)
class EMacroCall:
    """A call site tagged as a macro invocation, replaced during expansion."""

    name: str
    args: tuple[Expr, ...] = ()

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ExprTypeError(f"EMacroCall.name must be a non-empty str, got {self.name!r}")
        object.__setattr__(self, "args", _expr_tuple("EMacroCall", "args", self.args))


ExprDef = Union[EConst, EArrayDecl, EBlock, ECall, EMacroCall]

EXPR_DEF_TYPES = (EConst, EArrayDecl, EBlock, ECall, EMacroCall)


@dataclass(frozen=True)
class Expr:
    """A definition plus the source position it is attributed to."""

    expr: ExprDef
    pos: Position

    def __post_init__(self):
        if not isinstance(self.expr, EXPR_DEF_TYPES):
            raise ExprTypeError(f"Expr.expr must be an ExprDef variant, got {self.expr!r}")
        if not isinstance(self.pos, Position):
            raise ExprTypeError(f"Expr.pos must be a Position, got {self.pos!r}")

    @classmethod
    def of(cls, defn: ExprDef, pos: Position) -> Expr:
        return cls(defn, pos)


def position_of(expression: Expr) -> Position:
    """Return the Position already stored on `expression`."""
    if not isinstance(expression, Expr):
        raise ExprTypeError(f"Expected an Expr, got {expression!r}")
    return expression.pos


def iter_children(expression: Expr) -> Iterator[Expr]:
    """Yield the direct sub-expressions of `expression`, left to right."""
    match expression.expr:
        case EConst():
            return
        case EArrayDecl(values=values):
            yield from values
        case EBlock(exprs=exprs):
            yield from exprs
        case ECall(target=target, args=args):
            yield target
            yield from args
        case EMacroCall(args=args):
            yield from args
        case other:
            raise ExprTypeError(f"Unknown expression variant: {other!r}")


def map_children(fn: Callable[[Expr], Expr], expression: Expr) -> Expr:
    """
    Rebuild `expression` with every direct child replaced by fn(child).

    The node's position is kept. When fn returns every child unchanged (by
    identity) the original node is returned.
    """
    defn = expression.expr
    match defn:
        case EConst():
            return expression
        case EArrayDecl(values=values):
            new_values = tuple(fn(v) for v in values)
            if _same(values, new_values):
                return expression
            new_defn = EArrayDecl(new_values)
        case EBlock(exprs=exprs):
            new_exprs = tuple(fn(e) for e in exprs)
            if _same(exprs, new_exprs):
                return expression
            new_defn = EBlock(new_exprs)
        case ECall(target=target, args=args):
            new_target = fn(target)
            new_args = tuple(fn(a) for a in args)
            if new_target is target and _same(args, new_args):
                return expression
            new_defn = ECall(new_target, new_args)
        case EMacroCall(name=name, args=args):
            new_args = tuple(fn(a) for a in args)
            if _same(args, new_args):
                return expression
            new_defn = EMacroCall(name, new_args)
        case other:
            raise ExprTypeError(f"Unknown expression variant: {other!r}")
    return Expr(new_defn, expression.pos)


def _same(old: tuple, new: tuple) -> bool:
    return all(a is b for a, b in zip(old, new))
