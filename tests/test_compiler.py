import logging

import pytest

from comptime.builtin.expr_builtin import make_array, make_int, make_macro_call
from comptime.compiler import Compiler
from comptime.errors import MacroError, RecursionLimitError, UnknownMacroError
from comptime.runtime_context import get_current_context, require_current_context
from comptime.types.constant import CInt
from comptime.types.expr import EConst
from comptime.types.macro_registry import MacroRegistry


def test_compile_pass(registry, pos):
    registry.register("makeConst", lambda: make_int("1"))
    compiler = Compiler(registry)

    result = compiler.compile([make_macro_call("makeConst", [], pos), make_int(5, pos)])

    assert [e.expr for e in result.exprs] == [EConst(CInt(1)), EConst(CInt(5))]
    assert result.warnings == []
    assert get_current_context() is None


def test_warnings_are_collected_per_pass(registry, pos):
    def noisy():
        require_current_context().warning("noisy macro")
        return make_int("0")

    registry.register("noisy", noisy)
    compiler = Compiler(registry)

    first = compiler.compile([make_macro_call("noisy", [], pos)])
    second = compiler.compile([make_int(1, pos)])

    assert [w.message for w in first.warnings] == ["noisy macro"]
    assert first.warnings[0].pos == pos
    assert second.warnings == []


def test_errors_are_fatal(registry, pos, caplog):
    def reject(x):
        require_current_context().error("rejected")

    registry.register("reject", reject)
    compiler = Compiler(registry)

    with caplog.at_level(logging.ERROR, logger="comptime.compiler"):
        with pytest.raises(MacroError) as exc_info:
            compiler.compile([make_array([make_macro_call("reject", [1], pos)], pos)])
    assert exc_info.value.pos == pos
    assert "rejected" in caplog.text
    assert get_current_context() is None


def test_max_depth_override(pos):
    registry = MacroRegistry()
    registry.register("again", lambda: make_macro_call("again", []))
    with pytest.raises(RecursionLimitError):
        Compiler(registry, max_depth=4).compile_expr(make_macro_call("again", [], pos))


def test_compile_expr(pos):
    compiler = Compiler()
    assert compiler.compile_expr(make_int(3, pos)) == make_int(3, pos)


def test_unknown_macro_reports_call_site(registry, pos, caplog):
    compiler = Compiler(registry)
    with caplog.at_level(logging.ERROR, logger="comptime.compiler"):
        with pytest.raises(UnknownMacroError) as exc_info:
            compiler.compile_expr(make_macro_call("nope", [], pos))
    assert exc_info.value.pos == pos
    assert str(pos) in caplog.text


def test_deep_tree_compiles(pos):
    tree = make_int(0, pos)
    for _ in range(2000):
        tree = make_array([tree], pos)
    assert Compiler().compile_expr(tree) is tree
