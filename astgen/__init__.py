# astgen/__init__.py
"""astgen: grammar.json → 대수적 AST 타입 정의

파이프라인
- grammar : RuleBody IR, 합성 이름 생성기, CHOICE hoisting, JSON 로더
- order   : 의존 그래프/위상 정렬, 규칙 집합 조립기(RuleSet)
- codegen : AstType 합성과 `type ... and ... ;` 블록 방출
"""

from .errors import (
    GrammarError, MalformedGrammar, DanglingReference, NameCollision, CyclicDependency,
)
from .grammar.loader import load_grammar, parse_grammar_json
from .order.rules import RuleSet, GenOptions, generate
from .codegen.emit_ml import emit_ml_to_string
