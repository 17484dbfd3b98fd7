"""
RuleSet orchestration tests: ordering, extras, references, cycles.
"""

import pytest

from astgen.errors import CyclicDependency, DanglingReference, NameCollision
from astgen.grammar.ast import Choice, Repeat, Seq, Symbol, String, Pattern, Rule, is_flat
from astgen.order.rules import RuleSet, GenOptions, generate

from conftest import make_grammar


def _expr_grammar():
    return make_grammar({
        "expr": Choice([Symbol("num"), Seq([Symbol("expr"), String("+"), Symbol("expr")])]),
        "num": Pattern("[0-9]+"),
    })


def _statement_grammar():
    return make_grammar({
        "stmt": Choice([Symbol("block"), String(";")]),
        "block": Seq([String("{"), Repeat(Symbol("stmt")), String("}")]),
    })


# ==============================================================================
# Ordering
# ==============================================================================


def test_dependencies_are_emitted_first():
    types = generate(_expr_grammar())
    assert [t.name for t in types] == ["num", "expr"]
    assert str(types[0]) == "num = string"
    assert str(types[1]) == "expr =\n | EXPR_CTOR_0 (num)\n | EXPR_CTOR_1 ((expr, string, expr))"


def test_self_reference_adds_no_edge():
    rs = RuleSet.from_grammar(_expr_grammar())
    g = rs.graph
    assert [g.name_of(v) for v in g.out_edges(g.id_of("expr"))] == ["num"]
    assert g.vertex(g.id_of("num")).terminal
    assert not g.vertex(g.id_of("expr")).terminal


def test_hoisted_choice_is_ordered_before_its_owner():
    g = make_grammar({
        "list_rule": Repeat(Choice([Symbol("a"), Symbol("b")])),
        "a": String("a"),
        "b": Pattern("b+"),
    })
    rs = RuleSet.from_grammar(g)
    assert rs.rules["list_rule"] == Repeat(Symbol("list_rule_0"))
    assert rs.rules["list_rule_0"] == Choice([Symbol("a"), Symbol("b")])
    assert rs.order() == ["a", "b", "list_rule_0", "list_rule"]
    types = {t.name: str(t) for t in rs.gen()}
    assert types["list_rule"] == "list_rule = list(list_rule_0)"


def test_hoisted_rule_referring_to_owner_adds_no_cycle():
    g = make_grammar({"items": Repeat(Choice([Symbol("items"), String("x")]))})
    rs = RuleSet.from_grammar(g, GenOptions(mutual_recursion=False))
    assert rs.order() == ["items_0", "items"]


def test_every_edge_is_respected_and_every_rule_emitted_once():
    g = make_grammar({
        "program": Repeat(Symbol("stmt")),
        "stmt": Choice([Seq([Symbol("ident"), String("="), Symbol("value")]), Symbol("value")]),
        "value": Choice([Symbol("ident"), Symbol("number"), Seq([String("["), Choice([Symbol("number"), Symbol("ident")]), String("]")])]),
        "ident": Pattern("[a-z]+"),
        "number": Pattern("[0-9]+"),
    })
    rs = RuleSet.from_grammar(g)
    order = rs.order()
    assert sorted(order) == sorted(rs.rules)
    assert len(order) == len(set(order))
    pos = {n: i for i, n in enumerate(order)}
    for u, v in rs.graph.edges():
        assert pos[rs.graph.name_of(v)] <= pos[rs.graph.name_of(u)]
    assert all(is_flat(b) for b in rs.rules.values())


def test_generation_is_deterministic():
    first = [str(t) for t in generate(_statement_grammar())]
    second = [str(t) for t in generate(_statement_grammar())]
    assert first == second


# ==============================================================================
# Extras
# ==============================================================================


def test_extras_follow_ordered_rules_in_original_order():
    g = make_grammar(
        {
            "comment": Pattern("#.*"),
            "expr": Seq([Symbol("num"), String("+"), Symbol("num")]),
            "ws": Repeat(Choice([String(" "), String("\n")])),
            "num": Pattern("[0-9]+"),
        },
        extras=["comment", "ws"],
    )
    rs = RuleSet.from_grammar(g)
    assert rs.order() == ["num", "expr", "comment", "ws", "ws_0"]
    assert not rs.graph.has_vertex("comment")
    assert not rs.graph.has_vertex("ws_0")


def test_extra_referenced_by_ordinary_rule_is_emitted_once():
    g = make_grammar(
        {"doc": Seq([Symbol("word"), Symbol("comment")]), "word": Pattern("\\w+"), "comment": Pattern("#.*")},
        extras=["comment"],
    )
    rs = RuleSet.from_grammar(g)
    assert rs.order() == ["word", "doc", "comment"]
    assert not rs.graph.has_vertex("comment")
    assert rs.graph.edge_count == 1


# ==============================================================================
# Errors
# ==============================================================================


def test_dangling_reference():
    g = make_grammar({"expr": Seq([Symbol("num"), Symbol("missing")]), "num": Pattern("[0-9]+")})
    with pytest.raises(DanglingReference) as exc:
        generate(g)
    assert exc.value.name == "missing"
    assert exc.value.referrers == ["expr"]


def test_dangling_reference_from_extra():
    g = make_grammar({"ws": Seq([Symbol("space")])}, extras=["ws"])
    with pytest.raises(DanglingReference) as exc:
        generate(g)
    assert exc.value.name == "space"


def test_synthetic_name_collides_with_grammar_rule():
    g = make_grammar({
        "list_rule": Repeat(Choice([Symbol("a"), Symbol("b")])),
        "list_rule_0": String("x"),
        "a": String("a"),
        "b": String("b"),
    })
    with pytest.raises(NameCollision):
        RuleSet.from_grammar(g)


def test_rule_added_after_synthetic_name_collides():
    rs = RuleSet()
    rs.add_rule(Rule("r", Repeat(Choice([String("a"), String("b")]))))
    with pytest.raises(NameCollision):
        rs.add_rule(Rule("r_0", String("c")))


def test_alias_cycle_is_rejected():
    g = make_grammar({"a": Symbol("b"), "b": Symbol("a")})
    with pytest.raises(CyclicDependency) as exc:
        generate(g)
    assert exc.value.cycles == [["a", "b"]]


def test_alias_cycle_is_rejected_in_strict_mode():
    g = make_grammar({"a": Symbol("b"), "b": Symbol("a")})
    with pytest.raises(CyclicDependency):
        generate(g, GenOptions(mutual_recursion=False))


def test_mutual_recursion_through_sum_type_is_accepted():
    types = generate(_statement_grammar())
    assert [t.name for t in types] == ["stmt", "block"]
    assert str(types[1]) == "block = (string, list(stmt), string)"


def test_alias_cycle_beside_sum_type_is_rejected():
    g = make_grammar({
        "a": Symbol("b"),
        "b": Seq([Symbol("a"), Symbol("c")]),
        "c": Choice([Symbol("a"), String("z")]),
    })
    with pytest.raises(CyclicDependency) as exc:
        generate(g)
    assert exc.value.cycles == [["a", "b"]]


def test_cycles_each_passing_through_sum_type_are_accepted():
    g = make_grammar({
        "a": Seq([Symbol("c"), String(";")]),
        "b": Repeat(Symbol("c")),
        "c": Choice([Symbol("a"), Symbol("b"), String("z")]),
    })
    assert [t.name for t in generate(g)] == ["a", "c", "b"]


def test_mutual_recursion_is_rejected_in_strict_mode():
    with pytest.raises(CyclicDependency) as exc:
        generate(_statement_grammar(), GenOptions(mutual_recursion=False))
    assert exc.value.cycles == [["stmt", "block"]]


def test_stats():
    rs = RuleSet.from_grammar(make_grammar({"r": Repeat(Choice([Symbol("a"), Symbol("b")])), "a": String("a"), "b": String("b")}))
    st = rs.stats()
    assert (st.rules, st.synthetic, st.extras, st.vertices, st.edges) == (4, 1, 0, 4, 3)
