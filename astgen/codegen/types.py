# astgen/codegen/types.py
"""
AST 타입 표현
=============

평탄화된 규칙 본문을 대수적 타입 기술(AstTypeRepr)로 바꾼다.

    REPEAT(c)        → Ctor("list", [c'])
    CHOICE(m0..mn)   → Sum([("NAME_CTOR_0", m0'), ...])
    SEQ(m0..mn)      → Product([(None, m0'), ...])
    PREC_*(c)        → c'              (우선순위는 지움)
    SYMBOL(n)        → Name(n)
    STRING/PATTERN   → Name("string")  (어휘 내용은 모두 string)

렌더링(`str()`)은 emit_ml 이 쓰는 정규 문법 그대로입니다.
"""

from __future__     import annotations
from dataclasses    import dataclass, field
from typing         import List, Optional, Tuple, Union

from ..grammar.ast  import (
    RuleBody, Repeat, Choice, Seq, PrecLeft, PrecRight, Symbol, String, Pattern,
)

STRING_TYPE = "string"
LIST_CTOR = "list"


@dataclass(frozen=True)
class Sum:
    alts: List[Tuple[str, "AstTypeRepr"]] = field(default_factory=list)

    def __str__(self) -> str:
        return "".join(f"\n | {tag} ({repr_})" for tag, repr_ in self.alts)

@dataclass(frozen=True)
class Product:
    fields: List[Tuple[Optional[str], "AstTypeRepr"]] = field(default_factory=list)

    def __str__(self) -> str:
        parts = [f"{n}: {t}" if n else str(t) for n, t in self.fields]
        return "(" + ", ".join(parts) + ")"

@dataclass(frozen=True)
class Ctor:
    name: str
    args: List["AstTypeRepr"] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.name}(" + ", ".join(str(a) for a in self.args) + ")"

@dataclass(frozen=True)
class Name:
    ident: str

    def __str__(self) -> str:
        return self.ident


AstTypeRepr = Union[Sum, Product, Ctor, Name]


@dataclass(frozen=True)
class AstType:
    name: str
    repr: AstTypeRepr

    def __str__(self) -> str:
        # 합 타입은 다음 줄부터 대안들이 이어진다
        if isinstance(self.repr, Sum):
            return f"{self.name} ={self.repr}"
        return f"{self.name} = {self.repr}"


def ctor_tag(name: str, index: int) -> str:
    return f"{name.upper()}_CTOR_{index}"


def synthesize(name: str, body: RuleBody) -> AstTypeRepr:
    if isinstance(body, Repeat):
        return Ctor(LIST_CTOR, [synthesize(name, body.content)])
    if isinstance(body, Choice):
        return Sum([(ctor_tag(name, i), synthesize(name, m)) for i, m in enumerate(body.members)])
    if isinstance(body, Seq):
        return Product([(None, synthesize(name, m)) for m in body.members])
    if isinstance(body, (PrecLeft, PrecRight)):
        return synthesize(name, body.content)
    if isinstance(body, Symbol):
        return Name(body.name)
    if isinstance(body, (String, Pattern)):
        return Name(STRING_TYPE)
    raise TypeError(f"unknown rule body: {body!r}")


def from_rule(name: str, body: RuleBody) -> AstType:
    return AstType(name, synthesize(name, body))
