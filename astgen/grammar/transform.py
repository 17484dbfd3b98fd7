# astgen/grammar/transform.py
"""중첩된 CHOICE 부분식을 새 규칙으로 끌어올리는(hoisting) 변환

대상 타입 시스템은 규칙 하나당 합(sum) 타입 하나만 표현할 수 있으므로,
규칙 본문 안쪽에 박힌 CHOICE는 이름을 가진 별도 규칙이 되어야 합니다.

    list_rule: REPEAT(CHOICE(a, b))
      ↓
    list_rule  : REPEAT(list_rule_0)
    list_rule_0: CHOICE(a, b)
"""

from __future__     import annotations
from collections    import deque
from typing         import Callable, Deque, List, Optional, Tuple, TypeVar

from .ast           import RuleBody, Symbol, PrecLeft, PrecRight, children, with_children, strip_prec, is_choice
from .names         import NameGen

T = TypeVar("T")

Pending = Tuple[str, RuleBody]      # (새 규칙 이름, 끌어올린 본문)


def map_subexprs(
    body: RuleBody,
    fn: Callable[[RuleBody], Tuple[RuleBody, List[T]]],
) -> Tuple[RuleBody, List[T]]:
    """
    직계 자식마다 fn을 적용해 (새 노드, 부산물 목록)을 돌려준다.

    - Repeat(자식 1개), Choice/Seq(자식 리스트)를 같은 방식으로 처리
    - PrecLeft/PrecRight는 투명: 래퍼를 벗기고 안쪽 노드에 그대로 적용한다
      (결과 본문에서 우선순위 노드는 사라짐)
    - 단말은 그대로, 부산물 없음
    """
    if isinstance(body, (PrecLeft, PrecRight)):
        return map_subexprs(body.content, fn)
    kids = children(body)
    if not kids:
        return body, []
    new_kids: List[RuleBody] = []
    side: List[T] = []
    for k in kids:
        nk, extra = fn(k)
        new_kids.append(nk)
        side.extend(extra)
    return with_children(body, new_kids), side


def hoist_subexprs(
    owner: str,
    body: RuleBody,
    names: NameGen,
    pred: Callable[[RuleBody], bool] = is_choice,
) -> Tuple[RuleBody, List[Pending]]:
    """
    body 안에서 pred를 만족하는 부분식을 Symbol(새 이름) 참조로 바꾼다.

    - 본문 최상위 노드 자체는 대상이 아니다 (규칙 전체가 CHOICE면 그대로 둠)
    - pred를 만족하지 않는 합성 자식은 안쪽으로 내려가며 계속 찾는다
    - 새 이름의 접두사는 owner(원래 규칙 이름)
    """
    def visit(child: RuleBody) -> Tuple[RuleBody, List[Pending]]:
        child = strip_prec(child)
        if pred(child):
            fresh = names.next(owner)
            return Symbol(fresh), [(fresh, child)]
        return map_subexprs(child, visit)

    return map_subexprs(body, visit)


def flatten_rule(
    name: str,
    body: RuleBody,
    names: NameGen,
    pred: Optional[Callable[[RuleBody], bool]] = None,
) -> List[Pending]:
    """
    규칙 하나를 BFS 작업 큐로 평탄화한다.

    큐는 (name, body)로 시작하고, 꺼낸 항목마다 한 번 hoist_subexprs를 적용한다.
    끌어올려진 부분식은 다시 큐에 들어가 자기 차례에 같은 처리를 받는다.
    반환: [(규칙 이름, 재작성된 본문)] — 원래 규칙이 첫 번째, 이후 합성 규칙들이 큐 순서대로.
    """
    pred = pred or is_choice
    queue: Deque[Pending] = deque([(name, body)])
    out: List[Pending] = []
    while queue:
        cur, cur_body = queue.popleft()
        new_body, subs = hoist_subexprs(name, cur_body, names, pred)
        queue.extend(subs)
        out.append((cur, new_body))
    return out
