"""Macro expansion over expression trees.

expand_once: substitute a macro call at the head position only.
expand:      fully expand a tree, depth-first and left to right. Arguments of
             a macro call are expanded before the call itself, and whatever a
             macro returns is expanded again, since it may contain further
             macro calls.

The walk keeps its own stack of frames, so tree depth is bounded by memory
rather than by the interpreter's recursion limit.
"""

from __future__ import annotations

import logging

from comptime.debug_utils.printer import to_source
from comptime.errors import RecursionLimitError
from comptime.runtime_context import CompilationContext
from comptime.types.expr import EMacroCall, Expr, iter_children, map_children
from comptime.types.macro_registry import MacroRegistry

logger = logging.getLogger(__name__)


class _Frame:
    __slots__ = ("expr", "chain", "pending", "done")

    def __init__(self, expr: Expr, chain: int):
        self.expr = expr
        # chain counts how many substitutions produced this node
        self.chain = chain
        self.pending: list[Expr] = list(iter_children(expr))
        self.done: list[Expr] = []


class MacroExpander:
    def __init__(self, registry: MacroRegistry, context: CompilationContext):
        self.registry = registry
        self.context = context

    def expand_once(self, expr: Expr) -> Expr:
        defn = expr.expr
        if isinstance(defn, EMacroCall):
            return self.registry.invoke(defn.name, defn.args, expr.pos, self.context)
        return expr  # Not a macro call, unchanged

    def expand(self, expr: Expr) -> Expr:
        stack = [self._frame(expr, 0)]
        while True:
            frame = stack[-1]
            if len(frame.done) < len(frame.pending):
                stack.append(self._frame(frame.pending[len(frame.done)], frame.chain))
                continue

            stack.pop()
            expanded = iter(frame.done)
            node = map_children(lambda _: next(expanded), frame.expr)
            if isinstance(node.expr, EMacroCall):
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug("Expanding %s at %s", to_source(node), node.pos)
                # the substitution takes this frame's slot in its parent
                stack.append(self._frame(self.expand_once(node), frame.chain + 1))
                continue

            if not stack:
                return node
            stack[-1].done.append(node)

    def _frame(self, expr: Expr, chain: int) -> _Frame:
        if chain > self.context.max_depth:
            raise RecursionLimitError(
                f"Macro expansion did not terminate within {self.context.max_depth} steps", expr.pos
            )
        return _Frame(expr, chain)
