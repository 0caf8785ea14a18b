from __future__ import annotations

import inspect
import logging
from contextlib import nullcontext
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from comptime import MacroFn
from comptime.errors import ArityError, DuplicateMacroError, ExprTypeError, UnknownMacroError
from comptime.runtime_context import CompilationContext, get_current_context
from comptime.types.expr import Expr
from comptime.types.position import Position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MacroDefinition:
    """A named macro implementation plus the arity read from its signature."""

    name: str
    fn: MacroFn
    min_args: int
    max_args: Optional[int]  # None when the implementation takes *args

    @classmethod
    def from_callable(cls, name: str, fn: MacroFn) -> MacroDefinition:
        if not callable(fn):
            raise TypeError(f"Macro {name!r} implementation must be callable, got {fn!r}")
        # no per-instance state: only functions, builtins and classmethods are macros
        if inspect.ismethod(fn):
            if not inspect.isclass(fn.__self__):
                raise TypeError(f"Macro {name!r} must be a plain function, not a bound method")
        elif not (inspect.isfunction(fn) or inspect.isbuiltin(fn)):
            raise TypeError(f"Macro {name!r} must be a plain function, got {type(fn).__name__}")

        min_args, max_args = 0, 0
        for param in inspect.signature(fn).parameters.values():
            if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
                max_args += 1
                if param.default is param.empty:
                    min_args += 1
            elif param.kind is param.VAR_POSITIONAL:
                max_args = None
            elif param.kind is param.KEYWORD_ONLY and param.default is param.empty:
                raise ExprTypeError(
                    f"Macro {name!r} has a required keyword-only parameter {param.name!r}; "
                    "macros are invoked with positional arguments only"
                )
        return cls(name, fn, min_args, max_args)

    def describe_arity(self) -> str:
        if self.max_args is None:
            return f"at least {self.min_args}"
        if self.min_args == self.max_args:
            return str(self.min_args)
        return f"{self.min_args} to {self.max_args}"

    def accepts(self, count: int) -> bool:
        if count < self.min_args:
            return False
        return self.max_args is None or count <= self.max_args


class MacroRegistry:
    """
    Mapping from macro names to their implementations.

    Registration is first-come: a name can be bound once per registry.
    Invocation validates the call before running the implementation, then
    runs it with the call-site position pushed on the compilation context.
    """

    def __init__(self):
        self.macros: dict[str, MacroDefinition] = {}

    def register(self, name: str, implementation: MacroFn) -> MacroDefinition:
        if not isinstance(name, str) or not name:
            raise TypeError(f"Macro name must be a non-empty str, got {name!r}")
        if name in self.macros:
            raise DuplicateMacroError(f"Macro {name!r} is already registered")
        definition = MacroDefinition.from_callable(name, implementation)
        self.macros[name] = definition
        logger.debug("Registered macro %s (arity %s)", name, definition.describe_arity())
        return definition

    def macro(self, name: Optional[str] = None) -> Callable[[MacroFn], MacroFn]:
        """
        Decorator form of register::

            @registry.macro("makeConst")
            def make_const():
                return make_int("1")
        """
        def decorator(fn: MacroFn) -> MacroFn:
            self.register(name or fn.__name__, fn)
            return fn
        return decorator

    def is_macro(self, name: str) -> bool:
        return name in self.macros

    def lookup(self, name: str, pos: Optional[Position] = None) -> MacroDefinition:
        try:
            return self.macros[name]
        except KeyError:
            raise UnknownMacroError(f"Unknown macro {name!r}", pos) from None

    def names(self) -> list[str]:
        return sorted(self.macros)

    def __contains__(self, name: str) -> bool:
        return name in self.macros

    def __len__(self) -> int:
        return len(self.macros)

    def invoke(
        self,
        name: str,
        args: Iterable[Expr],
        call_site_pos: Position,
        context: Optional[CompilationContext] = None,
    ) -> Expr:
        """Run macro `name` on `args` and return the Expr to substitute for the call site."""
        if not isinstance(call_site_pos, Position):
            raise ExprTypeError(f"Call site of macro {name!r} must be a Position, got {call_site_pos!r}")
        definition = self.lookup(name, call_site_pos)
        args = tuple(args)
        if not definition.accepts(len(args)):
            raise ArityError(
                f"Macro {name!r} expects {definition.describe_arity()} argument(s), got {len(args)}",
                call_site_pos,
            )
        for arg in args:
            if not isinstance(arg, Expr):
                raise ExprTypeError(f"Macro {name!r} argument is not an Expr: {arg!r}", call_site_pos)

        active = get_current_context()
        ctx = context if context is not None else (active or CompilationContext())
        activation = nullcontext() if ctx is active else ctx.activate()

        with activation, ctx.invocation(call_site_pos):
            logger.debug("Invoking macro %s at %s (depth %d)", name, call_site_pos, ctx.depth)
            result = definition.fn(*args)

        if not isinstance(result, Expr):
            raise ExprTypeError(f"Macro {name!r} must return an Expr, got {result!r}", call_site_pos)
        return result
