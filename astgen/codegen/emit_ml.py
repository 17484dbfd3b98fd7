# astgen/codegen/emit_ml.py
"""AstType 목록 → 상호 재귀 타입 블록 텍스트

    type num = string
    and expr =
     | EXPR_CTOR_0 (num)
     | EXPR_CTOR_1 ((expr, string, expr))
    ;

첫 타입은 `type`, 나머지는 `and` 로 시작하고 블록은 `;` 로 끝난다.
하위 코드 생성기는 이 텍스트 형식에 의존하므로 바꾸지 말 것.
"""

from __future__ import annotations
from typing     import List, Sequence

from .types     import AstType


def emit_lines(types: Sequence[AstType]) -> List[str]:
    if not types:
        return []
    lines = [f"type {types[0]}"]
    for t in types[1:]:
        lines.append(f"and {t}")
    lines.append(";")
    return lines


def emit_ml_to_string(types: Sequence[AstType]) -> str:
    """빈 목록이면 빈 문자열."""
    lines = emit_lines(types)
    return "\n".join(lines) + "\n" if lines else ""
