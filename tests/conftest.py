import pytest

from comptime.runtime_context import CompilationContext
from comptime.types.macro_registry import MacroRegistry
from comptime.types.position import Position


# Shared fixtures. Every test gets a fresh registry and context so that
# registrations and position stacks never leak between tests.


@pytest.fixture
def pos():
    return Position("Main.hx", 3, 10, 24)


@pytest.fixture
def other_pos():
    return Position("Main.hx", 7, 2, 9)


@pytest.fixture
def registry():
    return MacroRegistry()


@pytest.fixture
def context():
    return CompilationContext(max_depth=16)


@pytest.fixture
def in_macro(context, pos):
    """Active context with `pos` as the current invocation site."""
    with context.activate(), context.invocation(pos):
        yield context
