"""
Name allocation and choice hoisting tests.
"""

import pytest

from astgen.errors import NameCollision
from astgen.grammar.ast import Repeat, Choice, Seq, PrecLeft, Symbol, String, Pattern, is_flat
from astgen.grammar.names import NameGen
from astgen.grammar.transform import hoist_subexprs, flatten_rule, map_subexprs


# ==============================================================================
# NameGen
# ==============================================================================


def test_namegen_counter_is_shared_across_prefixes():
    names = NameGen()
    assert names.next("expr") == "expr_0"
    assert names.next("expr") == "expr_1"
    assert names.next("stmt") == "stmt_2"
    assert names.issued_count == 3
    assert names.is_synthetic("stmt_2")
    assert not names.is_synthetic("stmt")


def test_namegen_collision_with_reserved_name():
    names = NameGen(reserved=["expr_0"])
    with pytest.raises(NameCollision) as exc:
        names.next("expr")
    assert exc.value.name == "expr_0"


def test_namegen_reserve_after_issue_collides():
    names = NameGen()
    names.next("rule")
    with pytest.raises(NameCollision):
        names.reserve("rule_0")


def test_namegen_instances_are_independent():
    assert NameGen().next("a") == "a_0"
    assert NameGen().next("a") == "a_0"


# ==============================================================================
# hoisting
# ==============================================================================


def test_map_subexprs_leaves_terminals_untouched():
    body, side = map_subexprs(Symbol("a"), lambda k: (k, ["seen"]))
    assert body == Symbol("a")
    assert side == []


def test_hoist_choice_under_repeat():
    names = NameGen()
    body, subs = hoist_subexprs("list_rule", Repeat(Choice([Symbol("a"), Symbol("b")])), names)
    assert body == Repeat(Symbol("list_rule_0"))
    assert subs == [("list_rule_0", Choice([Symbol("a"), Symbol("b")]))]


def test_top_level_choice_is_not_hoisted():
    names = NameGen()
    original = Choice([Symbol("num"), Seq([Symbol("expr"), String("+"), Symbol("expr")])])
    body, subs = hoist_subexprs("expr", original, names)
    assert body == original
    assert subs == []
    assert names.issued_count == 0


def test_choice_member_of_choice_is_hoisted():
    names = NameGen()
    inner = Choice([String("+"), String("-")])
    body, subs = hoist_subexprs("op", Choice([inner, String("*")]), names)
    assert body == Choice([Symbol("op_0"), String("*")])
    assert subs == [("op_0", inner)]


def test_choice_nested_below_sequence_in_choice_is_hoisted():
    names = NameGen()
    inner = Choice([Symbol("a"), Symbol("b")])
    body, subs = hoist_subexprs("r", Choice([Seq([String("("), inner, String(")")]), Symbol("c")]), names)
    assert body == Choice([Seq([String("("), Symbol("r_0"), String(")")]), Symbol("c")])
    assert subs == [("r_0", inner)]
    assert is_flat(body)


def test_precedence_is_erased():
    names = NameGen()
    body, subs = hoist_subexprs("binary", PrecLeft(Seq([Symbol("e"), PrecLeft(String("+"), 2), Symbol("e")]), 1), names)
    assert body == Seq([Symbol("e"), String("+"), Symbol("e")])
    assert subs == []


def test_precedence_wrapped_choice_is_hoisted():
    names = NameGen()
    body, subs = hoist_subexprs("r", Seq([PrecLeft(Choice([Symbol("a"), Symbol("b")]))]), names)
    assert body == Seq([Symbol("r_0")])
    assert subs == [("r_0", Choice([Symbol("a"), Symbol("b")]))]


def test_flatten_rule_is_breadth_first_and_prefixed_by_owner():
    names = NameGen()
    deep = Choice([Symbol("a"), Symbol("b")])
    body = Seq([Choice([deep, Symbol("c")]), Choice([Symbol("d"), Symbol("e")])])
    out = flatten_rule("r", body, names)
    assert out == [
        ("r", Seq([Symbol("r_0"), Symbol("r_1")])),
        ("r_0", Choice([Symbol("r_2"), Symbol("c")])),
        ("r_1", Choice([Symbol("d"), Symbol("e")])),
        ("r_2", deep),
    ]
    assert all(is_flat(b) for _, b in out)


def test_flatten_terminal_rule():
    out = flatten_rule("num", Pattern("[0-9]+"), NameGen())
    assert out == [("num", Pattern("[0-9]+"))]
