# astgen/grammar/names.py
"""합성 규칙 이름 생성기 (생성 실행 1회당 하나)"""

from __future__ import annotations
from typing     import Iterable, Set

from ..errors   import NameCollision


class NameGen:
    """
    NameGen
    =======
    `next(prefix)` → "{prefix}_{n}" (n은 0부터 엄격히 증가, 접두사와 무관하게 공유 카운터)

    - reserved: 사용자 문법의 규칙 이름들. 생성한 이름이 여기에 있으면 NameCollision.
    - 전역 카운터를 두지 않습니다. 실행마다 새 인스턴스를 만들어 넘겨 주세요.
    """

    def __init__(self, reserved: Iterable[str] = ()):
        self._idx = 0
        self._reserved: Set[str] = set(reserved)
        self._issued: Set[str] = set()

    def reserve(self, name: str) -> None:
        """사용자 규칙 이름을 예약한다. 이미 합성 이름으로 나간 이름이면 충돌."""
        if name in self._issued:
            raise NameCollision(name)
        self._reserved.add(name)

    def next(self, prefix: str) -> str:
        name = f"{prefix}_{self._idx}"
        self._idx += 1
        if name in self._reserved:
            raise NameCollision(name)
        self._issued.add(name)
        return name

    @property
    def issued_count(self) -> int:
        return len(self._issued)

    def is_synthetic(self, name: str) -> bool:
        return name in self._issued
