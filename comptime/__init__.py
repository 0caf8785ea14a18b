# Core type aliases for the comptime data model.
# Expressions are frozen dataclasses (see comptime.types.expr); macros are plain
# callables taking Expr positional arguments and returning a single Expr.
#
# Naming guidance:
# - MacroFn:      the implementation bound to a macro name in a MacroRegistry.
# - LiteralValue: Python values that builders can lift into constant expressions.

from typing import Any, Callable, Union

# Macro implementation: (*args: Expr) -> Expr
MacroFn = Callable[..., Any]

LiteralValue = Union[int, float, str, bool, None, list, tuple]
