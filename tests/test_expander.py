import pytest

from comptime.builtin.expr_builtin import make_array, make_block, make_int, make_macro_call
from comptime.errors import ArityError, RecursionLimitError, UnknownMacroError
from comptime.expander import MacroExpander
from comptime.runtime_context import CompilationContext, current_position
from comptime.types.constant import CInt
from comptime.types.expr import EArrayDecl, EConst, EMacroCall
from comptime.types.position import Position


@pytest.fixture
def expander(registry, context):
    return MacroExpander(registry, context)


def test_non_macro_tree_is_unchanged(expander, pos):
    tree = make_block([make_int(1, pos), make_array([2, 3], pos)], pos)
    assert expander.expand(tree) is tree


def test_call_site_is_substituted(registry, expander, pos):
    registry.register("makeConst", lambda: make_int("1"))
    site = Position("Main.hx", 4, 8, 19)
    tree = make_array([make_macro_call("makeConst", [], site), 2], pos)

    out = expander.expand(tree)

    assert out.pos == pos
    first, second = out.expr.values
    assert first.expr == EConst(CInt(1))
    assert first.pos == site
    assert second.expr == EConst(CInt(2))


def test_expand_once_only_touches_head(registry, expander, pos):
    registry.register("wrap", lambda x: make_array([x]))
    inner = make_macro_call("wrap", [1], pos)
    outer = make_macro_call("wrap", [inner], pos)

    once = expander.expand_once(outer)
    assert isinstance(once.expr, EArrayDecl)
    assert once.expr.values[0] is inner
    assert expander.expand_once(make_int(1, pos)).expr == EConst(CInt(1))


def test_arguments_are_expanded_first(registry, expander, pos):
    seen = []

    def double(x):
        seen.append(x.expr)
        return make_int(x.expr.const.value * 2)

    registry.register("double", double)
    tree = make_macro_call("double", [make_macro_call("double", [3], pos)], pos)

    out = expander.expand(tree)

    assert out.expr == EConst(CInt(12))
    # the outer call only ever sees an already expanded argument
    assert seen == [EConst(CInt(3)), EConst(CInt(6))]


def test_results_are_expanded_again(registry, expander, pos):
    registry.register("two", lambda: make_int("2"))
    registry.register("indirect", lambda: make_macro_call("two", []))

    out = expander.expand(make_macro_call("indirect", [], pos))
    assert out.expr == EConst(CInt(2))
    assert out.pos == pos


def test_runaway_expansion_hits_limit(registry, pos):
    registry.register("again", lambda: make_macro_call("again", []))
    expander = MacroExpander(registry, CompilationContext(max_depth=5))
    with pytest.raises(RecursionLimitError):
        expander.expand(make_macro_call("again", [], pos))


def test_errors_propagate(registry, expander, pos):
    registry.register("one", lambda x: x)
    with pytest.raises(UnknownMacroError):
        expander.expand(make_array([make_macro_call("nope", [], pos)], pos))
    with pytest.raises(ArityError):
        expander.expand(make_macro_call("one", [], pos))


def test_macro_sees_its_own_call_site(registry, expander):
    sites = [Position("Main.hx", n, 0, 5) for n in (1, 2)]
    seen = []

    def here():
        seen.append(current_position())
        return make_int("0")

    registry.register("here", here)
    expander.expand(make_array([make_macro_call("here", [], p) for p in sites], sites[0]))
    assert seen == sites


# -------------------------
# Deep trees
# -------------------------

def _nest(leaf, depth, pos):
    tree = leaf
    for _ in range(depth):
        tree = make_array([tree], pos)
    return tree


def test_deep_tree_without_macros(expander, pos):
    tree = _nest(make_int(0, pos), 5000, pos)
    assert expander.expand(tree) is tree


def test_deep_tree_with_macro_at_the_bottom(registry, expander, pos):
    registry.register("makeConst", lambda: make_int("1"))
    tree = _nest(make_macro_call("makeConst", [], pos), 5000, pos)

    out = expander.expand(tree)

    depth = 0
    while isinstance(out.expr, EArrayDecl):
        (out,) = out.expr.values
        depth += 1
    assert depth == 5000
    assert out.expr == EConst(CInt(1))
