# astgen/grammar/ast.py
"""Grammar IR
- RuleBody: 규칙 본문 하나를 표현하는 태그드 트리
    Repeat / Choice / Seq / PrecLeft / PrecRight / Symbol / String / Pattern
- Rule / Grammar: 로더가 만들어 코어(order/codegen)에 넘겨주는 값
- 술어/헬퍼: is_terminal, get_nonterminals, children, with_children, strip_prec, is_flat

Symbol/String/Pattern은 hoisting 입장에서 단말(leaf)입니다.
Symbol은 추가로 다른 규칙에 대한 참조를 갖습니다.
"""

from __future__     import annotations
from dataclasses    import dataclass, field
from typing         import Iterator, List, Optional, Union


# ---- RuleBody 노드 ----

@dataclass(frozen=True)
class Repeat:
    content: "RuleBody"

@dataclass(frozen=True)
class Choice:
    members: List["RuleBody"]

@dataclass(frozen=True)
class Seq:
    members: List["RuleBody"]

@dataclass(frozen=True)
class PrecLeft:
    content: "RuleBody"
    value: Union[int, str] = 0      # 우선순위 값(정수 또는 이름). 보관만 하고 해석하지 않음

@dataclass(frozen=True)
class PrecRight:
    content: "RuleBody"
    value: Union[int, str] = 0

@dataclass(frozen=True)
class Symbol:
    name: str

@dataclass(frozen=True)
class String:
    value: str

@dataclass(frozen=True)
class Pattern:
    value: str      # 원본 정규식 문자열


RuleBody = Union[Repeat, Choice, Seq, PrecLeft, PrecRight, Symbol, String, Pattern]

_TERMINALS = (Symbol, String, Pattern)
_PRECS = (PrecLeft, PrecRight)


@dataclass
class Rule:
    name: str
    body: RuleBody
    is_extra: bool = False      # trivia/skip 규칙(공백, 주석 등)


@dataclass
class Grammar:
    name: str
    rules: List[Rule] = field(default_factory=list)

    def rule_names(self) -> List[str]:
        return [r.name for r in self.rules]

    def extras(self) -> List[Rule]:
        return [r for r in self.rules if r.is_extra]

    def get_rule(self, name: str) -> Optional[Rule]:
        for r in self.rules:
            if r.name == name:
                return r
        return None


# ---- 술어 / 헬퍼 ----

def is_terminal(body: RuleBody) -> bool:
    return isinstance(body, _TERMINALS)


def is_choice(body: RuleBody) -> bool:
    return isinstance(body, Choice)


def strip_prec(body: RuleBody) -> RuleBody:
    """PREC_LEFT/PREC_RIGHT 래퍼를 모두 벗겨낸다. (우선순위는 타입 정보가 없음)"""
    while isinstance(body, _PRECS):
        body = body.content
    return body


def children(body: RuleBody) -> List[RuleBody]:
    """직계 자식 목록. 단말은 빈 리스트."""
    if isinstance(body, (Repeat, PrecLeft, PrecRight)):
        return [body.content]
    if isinstance(body, (Choice, Seq)):
        return list(body.members)
    return []


def with_children(body: RuleBody, kids: List[RuleBody]) -> RuleBody:
    """같은 종류의 노드를 새 자식들로 다시 만든다."""
    if isinstance(body, Repeat):
        return Repeat(kids[0])
    if isinstance(body, PrecLeft):
        return PrecLeft(kids[0], body.value)
    if isinstance(body, PrecRight):
        return PrecRight(kids[0], body.value)
    if isinstance(body, Choice):
        return Choice(list(kids))
    if isinstance(body, Seq):
        return Seq(list(kids))
    if kids:
        raise TypeError(f"terminal node {type(body).__name__} has no children")
    return body


def _iter_symbols(body: RuleBody) -> Iterator[str]:
    if isinstance(body, Symbol):
        yield body.name
        return
    for k in children(body):
        yield from _iter_symbols(k)


def get_nonterminals(body: RuleBody, deep: bool = False) -> List[str]:
    """
    본문이 참조하는 비단말(규칙 이름) 목록을 등장 순서대로 돌려줍니다.

    - deep=False: 직계 자식으로 등장하는 Symbol만 본다.
        Repeat/PrecLeft/PrecRight 의 content, Choice/Seq 의 members.
        중첩된 합성 노드 안쪽으로는 내려가지 않는다.
    - deep=True : 본문 전체를 훑는다. (hoisting 후에도 Seq/Repeat 중첩은 남아 있으므로
        의존 그래프 간선은 이쪽을 사용)

    본문 자체가 Symbol인 경우(별칭 규칙), deep=False에서는 빈 리스트, deep=True에서는
    [그 이름] 입니다.
    """
    if deep:
        return list(_iter_symbols(body))
    return [k.name for k in children(body) if isinstance(k, Symbol)]


def is_flat(body: RuleBody) -> bool:
    """hoisting 불변식: Choice는 규칙 본문 최상위에만 올 수 있다."""
    top = strip_prec(body)
    for k in children(top):
        if _contains_choice(k):
            return False
    return True


def _contains_choice(body: RuleBody) -> bool:
    if isinstance(body, Choice):
        return True
    return any(_contains_choice(k) for k in children(body))


def format_body(body: RuleBody) -> str:
    """디버그 출력용 한 줄 표현. 예) SEQ(expr, "+", expr)"""
    if isinstance(body, Symbol):
        return body.name
    if isinstance(body, String):
        return '"' + body.value.replace('"', '\\"') + '"'
    if isinstance(body, Pattern):
        return f"/{body.value}/"
    if isinstance(body, Repeat):
        return f"REPEAT({format_body(body.content)})"
    if isinstance(body, PrecLeft):
        return f"PREC_LEFT[{body.value}]({format_body(body.content)})"
    if isinstance(body, PrecRight):
        return f"PREC_RIGHT[{body.value}]({format_body(body.content)})"
    kind = "CHOICE" if isinstance(body, Choice) else "SEQ"
    return f"{kind}(" + ", ".join(format_body(m) for m in body.members) + ")"
