# astgen/grammar/__init__.py
from .ast import (
    Repeat, Choice, Seq, PrecLeft, PrecRight, Symbol, String, Pattern,
    RuleBody, Rule, Grammar,
    is_terminal, get_nonterminals,
)
from .names import NameGen
from .transform import hoist_subexprs, flatten_rule
