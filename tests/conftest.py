"""
Shared fixtures for astgen tests.
"""

from pathlib import Path

import pytest

from astgen.grammar.ast import Grammar, Rule

GRAMMAR_DIR = Path(__file__).parent / "grammar_test"


def make_grammar(rules, extras=(), name="test"):
    """Build a Grammar from an ordered {name: body} dict."""
    extras = set(extras)
    return Grammar(
        name=name,
        rules=[Rule(n, b, is_extra=n in extras) for n, b in rules.items()],
    )


@pytest.fixture
def grammar_dir():
    return GRAMMAR_DIR
