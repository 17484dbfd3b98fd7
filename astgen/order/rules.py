# astgen/order/rules.py
"""규칙 집합 조립기: hoisting → 의존 그래프 → 방출 순서 → AstType 목록"""

from __future__         import annotations
from dataclasses        import dataclass
from typing             import Dict, List, Optional, Set, Tuple

from ..errors           import CyclicDependency, DanglingReference
from ..grammar.ast      import Grammar, Rule, RuleBody, Choice, is_terminal, get_nonterminals
from ..grammar.names    import NameGen
from ..grammar.transform import flatten_rule
from ..codegen.types    import AstType, from_rule
from .graph             import Graph, topo_sort, topo_sort_groups, strongly_connected_components


@dataclass
class GenOptions:
    """
    생성 옵션
    - mutual_recursion: 규칙 간 순환을 상호 재귀 타입 묶음으로 허용할지.
        허용하더라도 CHOICE(합 타입) 규칙을 거치지 않는 순환이 남으면
        별칭만으로 이루어진 순환이라 선언할 수 없으므로 CyclicDependency.
    """
    mutual_recursion: bool = True


@dataclass
class RuleSetStats:
    rules: int
    synthetic: int
    extras: int
    vertices: int
    edges: int


class RuleSet:
    """
    RuleSet
    =======
    실행 1회 동안 NameGen / Graph / 규칙 표를 단독 소유합니다. 재사용하지 말고 매번 새로 만드세요.

    - add_rule(rule): 본문을 평탄화하고, 나온 (이름, 본문)마다
        * extra 규칙이면 extras 목록에만 추가 (그래프에 참여하지 않음)
        * 아니면 정점 등록 + 참조하는 비단말마다 간선 name → ref (자기 참조, extra 참조 제외)
        * 재작성된 본문을 rules[name]에 저장
    - gen(): 방출 순서대로 AstType 목록
    """

    def __init__(self, options: Optional[GenOptions] = None, reserved: Tuple[str, ...] = (),
                 extra_names: Tuple[str, ...] = ()):
        self.options = options or GenOptions()
        self.graph = Graph()
        self.rules: Dict[str, RuleBody] = {}
        self.extras: List[Tuple[str, RuleBody]] = []
        self.names = NameGen(reserved)
        self._extra_names: Set[str] = set(extra_names)

    @classmethod
    def from_grammar(cls, g: Grammar, options: Optional[GenOptions] = None) -> "RuleSet":
        """사용자 규칙 이름을 모두 예약하고 extra 이름을 미리 알린 뒤 문법 순서대로 add_rule."""
        rs = cls(options, reserved=tuple(g.rule_names()),
                 extra_names=tuple(r.name for r in g.extras()))
        for r in g.rules:
            rs.add_rule(r)
        return rs

    def add_rule(self, rule: Rule) -> None:
        self.names.reserve(rule.name)
        for name, body in flatten_rule(rule.name, rule.body, self.names):
            if rule.is_extra:
                self.extras.append((name, body))
                self._extra_names.add(name)
            else:
                uid = self.graph.add_vertex(name, terminal=is_terminal(body))
                for ref in get_nonterminals(body, deep=True):
                    # 자기 참조(자기 자신 또는 자신을 낳은 원래 규칙)는 간선을 만들지 않음
                    if ref == name or ref == rule.name:
                        continue
                    # extra 규칙은 그래프에 참여하지 않음 (맨 뒤에 따로 방출)
                    if ref in self._extra_names:
                        continue
                    self.graph.add_edge(uid, self.graph.add_vertex(ref))
            self.rules[name] = body

    # ----- 검사 -----
    def _check_references(self) -> None:
        for vx in self.graph.vertices():
            if vx.name not in self.rules:
                referrers = [self.graph.name_of(u) for u in self.graph.in_edges(vx.id)]
                raise DanglingReference(vx.name, referrers)
        for name, body in self.extras:
            for ref in get_nonterminals(body, deep=True):
                if ref not in self.rules:
                    raise DanglingReference(ref, [name])

    def _check_group(self, group: List[str]) -> None:
        """
        순환 묶음 검사. CHOICE(합 타입) 규칙에서 나가는 간선을 지운 뒤에도
        남는 순환은 별칭/튜플/리스트만으로 이루어진 순환이므로 선언할 수 없다.
        """
        if len(group) < 2:
            return
        members = set(group)
        sub = Graph()
        for n in group:
            sub.add_vertex(n)
        for n in group:
            if isinstance(self.rules[n], Choice):
                continue
            for v in self.graph.out_edges(self.graph.id_of(n)):
                ref = self.graph.name_of(v)
                if ref in members:
                    sub.add_edge(sub.id_of(n), sub.id_of(ref))
        cycles = [[sub.name_of(v) for v in comp]
                  for comp in strongly_connected_components(sub) if len(comp) > 1]
        if cycles:
            raise CyclicDependency(cycles)

    # ----- 순서 / 생성 -----
    def order(self) -> List[str]:
        """
        방출 순서.
        1) 참조 검사 (DanglingReference)
        2) 간선을 뒤집은 그래프를 정렬 → 의존 대상이 먼저
        3) extra 이름은 정렬 결과에서 빼고, extras 목록(원래 순서)을 맨 뒤에 붙임
        """
        self._check_references()
        deps = self.graph.reversed()
        if self.options.mutual_recursion:
            names: List[str] = []
            for group in topo_sort_groups(deps):
                self._check_group(group)
                names.extend(group)
        else:
            names = topo_sort(deps)
        # add_rule만 직접 쓰면 extra가 나중에 등록될 수 있어 정점으로 남을 수 있음
        ordered = [n for n in names if n not in self._extra_names]
        return ordered + [n for n, _ in self.extras]

    def gen(self) -> List[AstType]:
        return [from_rule(n, self.rules[n]) for n in self.order()]

    def stats(self) -> RuleSetStats:
        return RuleSetStats(
            rules=len(self.rules),
            synthetic=self.names.issued_count,
            extras=len(self.extras),
            vertices=self.graph.vertex_count,
            edges=self.graph.edge_count,
        )


def generate(g: Grammar, options: Optional[GenOptions] = None) -> List[AstType]:
    """Grammar → 방출 순서의 AstType 목록. 실행마다 새 RuleSet을 만든다."""
    return RuleSet.from_grammar(g, options).gen()
