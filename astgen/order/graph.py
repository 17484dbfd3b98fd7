# astgen/order/graph.py
"""규칙 의존 그래프와 위상 정렬

구조(arena + index)
------------------
- 정점은 리스트(_vertices)에 삽입 순서대로 쌓이고, 정수 ID = 리스트 인덱스
- 간선은 정점별 인접 리스트(_adj)에 ID로 저장
- 이름 → ID 매핑(_index)이 정체성을 판별하는 유일한 곳

위상 정렬 규약
-------------
- 간선 u → v 이면 출력에서 u가 v보다 앞에 온다.
- 동시에 준비된 정점들 사이의 순서는 **FIFO(정점 삽입 순서)** 로 고정한다.
- 방문하지 못한 정점이 남으면(순환) 조용히 빼지 않고 CyclicDependency를 올린다.
"""

from __future__     import annotations
from collections    import deque
from dataclasses    import dataclass
from typing         import Dict, Iterator, List, Optional, Set, Tuple

from ..errors       import CyclicDependency

VertexId = int


@dataclass
class Vertex:
    id: VertexId
    name: str
    terminal: bool = False      # 본문이 단말(Symbol/String/Pattern)인지


class Graph:
    def __init__(self) -> None:
        self._vertices: List[Vertex] = []
        self._adj: List[List[VertexId]] = []
        self._index: Dict[str, VertexId] = {}

    # ----- 정점 / 간선 -----
    def add_vertex(self, name: str, terminal: Optional[bool] = None) -> VertexId:
        """이름으로 정점을 찾거나 새로 만든다. terminal이 주어지면 플래그를 갱신."""
        vid = self._index.get(name)
        if vid is None:
            vid = len(self._vertices)
            self._vertices.append(Vertex(vid, name, bool(terminal)))
            self._adj.append([])
            self._index[name] = vid
        elif terminal is not None:
            self._vertices[vid].terminal = terminal
        return vid

    def add_edge(self, u: VertexId, v: VertexId) -> None:
        """u → v. 같은 간선을 두 번 넣어도 하나만 남는다."""
        if v not in self._adj[u]:
            self._adj[u].append(v)

    def out_edges(self, u: VertexId) -> List[VertexId]:
        return list(self._adj[u])

    def in_edges(self, v: VertexId) -> List[VertexId]:
        return [u for u in range(len(self._adj)) if v in self._adj[u]]

    # ----- 조회 -----
    @property
    def vertex_count(self) -> int:
        return len(self._vertices)

    @property
    def edge_count(self) -> int:
        return sum(len(a) for a in self._adj)

    def has_vertex(self, name: str) -> bool:
        return name in self._index

    def id_of(self, name: str) -> VertexId:
        """존재하지 않으면 KeyError."""
        return self._index[name]

    def name_of(self, vid: VertexId) -> str:
        return self._vertices[vid].name

    def vertex(self, vid: VertexId) -> Vertex:
        return self._vertices[vid]

    def vertices(self) -> Iterator[Vertex]:
        """삽입 순서대로."""
        return iter(list(self._vertices))

    def edges(self) -> Iterator[Tuple[VertexId, VertexId]]:
        for u, succ in enumerate(self._adj):
            for v in succ:
                yield u, v

    def reversed(self) -> "Graph":
        """간선 방향을 뒤집은 새 그래프. 정점 ID/순서는 그대로."""
        g = Graph()
        for vx in self._vertices:
            g.add_vertex(vx.name, vx.terminal)
        for u, v in self.edges():
            g.add_edge(v, u)
        return g

    def __repr__(self) -> str:
        lines = []
        for vx in self._vertices:
            succ = ", ".join(self.name_of(v) for v in self._adj[vx.id])
            lines.append(f"{vx.name} -> [{succ}]")
        return "Graph(" + "; ".join(lines) + ")"


def strongly_connected_components(g: Graph) -> List[List[VertexId]]:
    """
    Tarjan 강연결요소 (재귀 없이 명시적 스택으로).
    각 요소는 ID 오름차순(=삽입 순서), 요소들은 발견 순서대로.
    """
    index_of: Dict[VertexId, int] = {}
    low: Dict[VertexId, int] = {}
    on_stack: Set[VertexId] = set()
    stack: List[VertexId] = []
    comps: List[List[VertexId]] = []
    counter = 0

    for root in range(g.vertex_count):
        if root in index_of:
            continue
        work: List[Tuple[VertexId, int]] = [(root, 0)]
        while work:
            v, i = work[-1]
            if i == 0:
                index_of[v] = low[v] = counter
                counter += 1
                stack.append(v)
                on_stack.add(v)
            succ = g.out_edges(v)
            if i < len(succ):
                work[-1] = (v, i + 1)
                w = succ[i]
                if w not in index_of:
                    work.append((w, 0))
                elif w in on_stack:
                    low[v] = min(low[v], index_of[w])
                continue
            work.pop()
            if work:
                parent = work[-1][0]
                low[parent] = min(low[parent], low[v])
            if low[v] == index_of[v]:
                comp: List[VertexId] = []
                while True:
                    w = stack.pop()
                    on_stack.discard(w)
                    comp.append(w)
                    if w == v:
                        break
                comps.append(sorted(comp))
    return comps


def _is_cycle(g: Graph, comp: List[VertexId]) -> bool:
    # 크기 1이라도 자기 간선이 있으면 순환
    return len(comp) > 1 or comp[0] in g.out_edges(comp[0])


def _cycle_error(g: Graph, remaining: List[VertexId]) -> CyclicDependency:
    left = set(remaining)
    cycles: List[List[str]] = []
    in_cycle: Set[VertexId] = set()
    for comp in strongly_connected_components(g):
        if comp[0] in left and _is_cycle(g, comp):
            cycles.append([g.name_of(v) for v in comp])
            in_cycle.update(comp)
    blocked = [g.name_of(v) for v in remaining if v not in in_cycle]
    return CyclicDependency(cycles, blocked)


def topo_sort(g: Graph) -> List[str]:
    """
    Kahn 알고리즘.
    1) 모든 간선으로 진입차수 계산
    2) 진입차수 0인 정점을 삽입 순서대로 준비 큐에 넣음
    3) 큐 앞에서 꺼내 출력, 후속 정점의 진입차수 감소, 0이 되면 큐 뒤에 추가
    4) 출력 수 < 정점 수 → 순환. 남은 정점으로 CyclicDependency
    """
    n = g.vertex_count
    in_degree = [0] * n
    for _, v in g.edges():
        in_degree[v] += 1

    ready = deque(v for v in range(n) if in_degree[v] == 0)
    order: List[VertexId] = []
    while ready:
        u = ready.popleft()
        order.append(u)
        for v in g.out_edges(u):
            in_degree[v] -= 1
            if in_degree[v] == 0:
                ready.append(v)

    if len(order) < n:
        seen = set(order)
        raise _cycle_error(g, [v for v in range(n) if v not in seen])
    return [g.name_of(v) for v in order]


def topo_sort_groups(g: Graph) -> List[List[str]]:
    """
    강연결요소로 축약한 그래프(condensation) 위에서 Kahn 정렬.
    - 반환: 정점 이름 묶음의 리스트. 순환이 없으면 모든 묶음은 크기 1이며 topo_sort와 같은 순서.
    - 묶음 간 동률은 topo_sort와 같은 FIFO 규칙(묶음의 가장 이른 정점 기준)
    - 묶음 안의 순서는 삽입 순서
    """
    comps = strongly_connected_components(g)
    comps.sort(key=lambda c: c[0])
    comp_of: Dict[VertexId, int] = {}
    for ci, comp in enumerate(comps):
        for v in comp:
            comp_of[v] = ci

    succ: List[List[int]] = [[] for _ in comps]
    in_degree = [0] * len(comps)
    for ci, comp in enumerate(comps):
        for u in comp:
            for v in g.out_edges(u):
                cj = comp_of[v]
                if cj != ci and cj not in succ[ci]:
                    succ[ci].append(cj)
                    in_degree[cj] += 1

    ready = deque(ci for ci in range(len(comps)) if in_degree[ci] == 0)
    out: List[List[str]] = []
    while ready:
        ci = ready.popleft()
        out.append([g.name_of(v) for v in comps[ci]])
        for cj in succ[ci]:
            in_degree[cj] -= 1
            if in_degree[cj] == 0:
                ready.append(cj)
    return out
