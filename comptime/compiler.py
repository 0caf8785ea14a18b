"""Host-side driver: one compilation pass over a list of expressions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from comptime.errors import ComptimeError
from comptime.expander import MacroExpander
from comptime.runtime_context import CompilationContext, Diagnostic
from comptime.types.expr import Expr
from comptime.types.macro_registry import MacroRegistry

logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    exprs: list[Expr] = field(default_factory=list)
    warnings: list[Diagnostic] = field(default_factory=list)


class Compiler:
    """
    Expands macro call sites in the expressions of one compilation unit.

    Each call to compile() is an independent pass with its own
    CompilationContext, which is discarded afterwards. Errors are fatal to
    the pass and propagate to the caller.
    """

    def __init__(self, registry: Optional[MacroRegistry] = None, max_depth: Optional[int] = None):
        self.registry = registry if registry is not None else MacroRegistry()
        self.max_depth = max_depth

    def compile(self, exprs: Iterable[Expr]) -> CompileResult:
        context = CompilationContext(self.max_depth)
        expander = MacroExpander(self.registry, context)
        result = CompileResult()
        try:
            with context.activate():
                for expr in exprs:
                    result.exprs.append(expander.expand(expr))
        except ComptimeError as exc:
            logger.error("Compilation failed: %s", exc)
            raise
        else:
            result.warnings = list(context.warnings)
        finally:
            context.reset()
        return result

    def compile_expr(self, expr: Expr) -> Expr:
        return self.compile([expr]).exprs[0]
