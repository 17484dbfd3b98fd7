# astgen/errors.py
"""astgen 오류 종류

모든 오류는 문법 문제이므로 `SyntaxError` 계열로 올립니다. (CLI는 SyntaxError만 잡아
친절한 메시지를 출력합니다)

- MalformedGrammar  : 입력 구조 자체가 잘못됨 (로더 단계)
- DanglingReference : 규칙 본문이 정의되지 않은 비단말을 참조
- NameCollision     : 새로 만든 합성 규칙 이름이 사용자 규칙 이름과 충돌
- CyclicDependency  : 의존 그래프에 선형화할 수 없는 순환이 있음
"""

from __future__ import annotations
from typing     import List, Optional, Sequence


class GrammarError(SyntaxError):
    """astgen 코어 오류의 공통 부모."""


class MalformedGrammar(GrammarError):
    def __init__(self, msg: str, path: Optional[str] = None):
        self.path = path
        super().__init__(f"{path}: {msg}" if path else msg)


class DanglingReference(GrammarError):
    def __init__(self, name: str, referrers: Sequence[str] = ()):
        self.name = name
        self.referrers: List[str] = list(referrers)
        where = f" (referenced from {', '.join(self.referrers)})" if self.referrers else ""
        super().__init__(f"undefined rule '{name}'{where}")


class NameCollision(GrammarError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"synthetic rule name '{name}' collides with a grammar rule")


class CyclicDependency(GrammarError):
    """
    순환 의존.
    - cycles : 순환을 이루는 규칙 이름 묶음(강연결요소)들
    - blocked: 순환 자체는 아니지만 순환 뒤에 막혀 방출되지 못한 규칙들
    """
    def __init__(self, cycles: Sequence[Sequence[str]], blocked: Sequence[str] = ()):
        self.cycles: List[List[str]] = [list(c) for c in cycles]
        self.blocked: List[str] = list(blocked)
        parts = [" -> ".join(list(c) + [c[0]]) for c in self.cycles if c]
        msg = "cyclic dependency between rules: " + "; ".join(parts)
        if self.blocked:
            msg += f" (blocked: {', '.join(self.blocked)})"
        super().__init__(msg)
