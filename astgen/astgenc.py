# astgen/astgenc.py
"""astgenc – astgen CLI

사용 예)
    $ python -m astgen.astgenc check tests/grammar_test/arithmetic.json -D
    $ python -m astgen.astgenc gen tests/grammar_test/arithmetic.json -o tests/tmp/arithmetic.ml
    $ python -m astgen.astgenc gen tests/grammar_test/statements.json --strict-cycles

기능
----
- check : 문법을 읽어 파이프라인(로드→hoisting→의존 그래프→정렬) 검증 및 요약 출력
- gen   : 문법을 읽어 AST 타입 블록(type ... and ... ;)을 방출

디버그 모드(-D/--debug)를 켜면 평탄화된 규칙과 의존 그래프 요약을 stderr로 출력합니다.
"""

from __future__ import annotations
import argparse
import pathlib
import sys
from typing import Optional

# ------------------------------
# 헬퍼
# ------------------------------

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)

# ------------------------------
# 파이프라인 로딩
# ------------------------------

def _load_pipeline(grammar_path: str, debug: bool, strict_cycles: bool):
    """
    grammar.json을 읽어 Grammar → RuleSet(평탄화/그래프) → 방출 순서의 AstType 목록까지 생성.
    """
    from .grammar.loader import load_grammar
    from .order.rules import RuleSet, GenOptions

    g = load_grammar(grammar_path)
    if debug: _eprint("[DEBUG] Grammar ready | name=%s rules=%d extras=%d" %
                      (g.name, len(g.rules), len(g.extras())))

    opts = GenOptions(mutual_recursion=not strict_cycles)
    rs = RuleSet.from_grammar(g, opts)
    st = rs.stats()
    if debug: _eprint("[DEBUG] Rules flattened | rules=%d synthetic=%d extras=%d" %
                      (st.rules, st.synthetic, st.extras))
    if debug: _eprint("[DEBUG] Dependency graph built | vertices=%d edges=%d" %
                      (st.vertices, st.edges))

    types = rs.gen()
    if debug: _eprint("[DEBUG] Types synthesized | types=%d mutual_recursion=%s" %
                      (len(types), opts.mutual_recursion))
    return g, rs, types

# ------------------------------
# 디버그 출력 헬퍼
# ------------------------------

def _print_rules(rs) -> None:
    from .grammar.ast import format_body
    _eprint("\n[Rules]")
    for name, body in rs.rules.items():
        mark = " (synthetic)" if rs.names.is_synthetic(name) else ""
        _eprint(f"  {name}{mark} : {format_body(body)}")


def _print_graph(rs) -> None:
    g = rs.graph
    _eprint("\n[Dependencies]")
    for vx in g.vertices():
        succ = ", ".join(g.name_of(v) for v in g.out_edges(vx.id))
        _eprint(f"  {vx.name:>12} -> {succ or '-'}")
    if rs.extras:
        _eprint("\n[Extras]")
        _eprint("  " + ", ".join(n for n, _ in rs.extras))

# ------------------------------
# 커맨드 구현
# ------------------------------

def _run(args):
    try:
        return _load_pipeline(args.file, debug=args.debug, strict_cycles=args.strict_cycles)
    except SyntaxError as e:
        _eprint(f"[{type(e).__name__}]")
        _eprint(str(e))
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
    return None


def cmd_check(args) -> int:
    res = _run(args)
    if res is None:
        return 2
    g, rs, types = res

    if args.debug:
        _print_rules(rs)
        _print_graph(rs)

    st = rs.stats()
    print(f"[CHECK OK] grammar={g.name} types={len(types)} synthetic={st.synthetic} "
          f"extras={st.extras} edges={st.edges}")
    return 0


def cmd_gen(args) -> int:
    res = _run(args)
    if res is None:
        return 2
    g, rs, types = res

    if args.debug:
        _print_rules(rs)
        _print_graph(rs)

    from .codegen.emit_ml import emit_ml_to_string
    src = emit_ml_to_string(types)

    if not args.output:
        sys.stdout.write(src)
        return 0

    out_path = pathlib.Path(args.output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(src, encoding="utf-8")
    print(f"[EMIT] grammar={g.name} types={len(types)} -> {out_path}")
    if args.debug:
        _eprint(f"[DEBUG] bytes={len(src)}")
    return 0

# ------------------------------
# 엔트리포인트
# ------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="astgenc", description="astgen AST type generator CLI")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_check = sub.add_parser("check", help="문법을 검사하고 방출 순서를 계산해 봅니다")
    p_check.add_argument("file", help="grammar.json 파일")
    p_check.add_argument("--strict-cycles", action="store_true", help="규칙 간 순환(상호 재귀)을 모두 오류로 처리")
    p_check.add_argument("-D", "--debug", action="store_true", help="디버그 정보를 상세 출력")
    p_check.set_defaults(func=cmd_check)

    p_gen = sub.add_parser("gen", help="AST 타입 블록을 생성합니다")
    p_gen.add_argument("file", help="grammar.json 파일")
    p_gen.add_argument("-o", "--output", help="출력 파일 경로(미지정시 표준출력)")
    p_gen.add_argument("--strict-cycles", action="store_true", help="규칙 간 순환(상호 재귀)을 모두 오류로 처리")
    p_gen.add_argument("-D", "--debug", action="store_true", help="디버그 정보를 상세 출력")
    p_gen.set_defaults(func=cmd_gen)

    args = ap.parse_args(argv)
    return int(args.func(args))

if __name__ == "__main__":
    sys.exit(main())
