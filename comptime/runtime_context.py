"""Compilation context: the ambient state macros can query while they run.

A CompilationContext lives for one compilation pass. It keeps the stack of
call-site positions for the macro invocations currently in progress (so
nested invocations attribute positions correctly) and the warnings raised
during the pass.

The active context is tracked in a ContextVar rather than a module global so
that independent passes, e.g. in tests, never see each other's state.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator, Optional

from comptime.config import get_max_macro_depth
from comptime.errors import MacroError, NoActiveCompilationError, RecursionLimitError
from comptime.types.position import Position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    message: str
    pos: Position

    def __str__(self) -> str:
        return f"{self.pos}: {self.message}"


class CompilationContext:
    """Per-pass position stack, recursion limit and collected warnings."""

    __slots__ = ("max_depth", "_positions", "warnings")

    def __init__(self, max_depth: Optional[int] = None):
        self.max_depth: int = get_max_macro_depth(max_depth)
        self._positions: list[Position] = []
        self.warnings: list[Diagnostic] = []

    @property
    def depth(self) -> int:
        return len(self._positions)

    def current_position(self) -> Position:
        if not self._positions:
            raise NoActiveCompilationError("currentPosition() called outside of a macro invocation")
        return self._positions[-1]

    @contextmanager
    def invocation(self, pos: Position) -> Iterator[Position]:
        """Push `pos` for the duration of one macro invocation."""
        if len(self._positions) >= self.max_depth:
            raise RecursionLimitError(
                f"Macro invocation depth exceeded the limit of {self.max_depth}", pos
            )
        self._positions.append(pos)
        try:
            yield pos
        finally:
            self._positions.pop()

    @contextmanager
    def activate(self) -> Iterator[CompilationContext]:
        """Make this the active context for the enclosed block."""
        token = _active_context.set(self)
        try:
            yield self
        finally:
            _active_context.reset(token)

    # --- Diagnostics ---
    def warning(self, message: str, pos: Optional[Position] = None) -> Diagnostic:
        diag = Diagnostic(message, pos if pos is not None else self.current_position())
        self.warnings.append(diag)
        logger.warning("%s", diag)
        return diag

    def error(self, message: str, pos: Optional[Position] = None):
        raise MacroError(message, pos if pos is not None else self.current_position())

    def reset(self) -> None:
        self._positions.clear()
        self.warnings.clear()


_active_context: ContextVar[Optional[CompilationContext]] = ContextVar(
    "comptime_active_context", default=None
)


def get_current_context() -> Optional[CompilationContext]:
    return _active_context.get()


def require_current_context() -> CompilationContext:
    ctx = _active_context.get()
    if ctx is None:
        raise NoActiveCompilationError("No compilation is active")
    return ctx


def current_position() -> Position:
    """Position of the innermost macro invocation of the active compilation."""
    return require_current_context().current_position()
