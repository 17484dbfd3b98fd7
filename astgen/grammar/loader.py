"""grammar.json 로더

입력 형식 (tree-sitter grammar.json의 부분집합)
    {
      "name": "arithmetic",
      "rules": { "expr": {"type": "CHOICE", "members": [...]}, ... },
      "extras": [ {"type": "SYMBOL", "name": "comment"}, {"type": "PATTERN", "value": "\\s"} ]
    }

- rules 객체의 키 순서가 곧 규칙 순서
- extras 중 SYMBOL만 extra 규칙을 가리킨다. 나머지(PATTERN 등)는 규칙이 아니므로 무시
- 구조가 잘못되면 MalformedGrammar (경로 포함: rules.expr.members[1])
- extras의 SYMBOL이 없는 규칙을 가리키면 DanglingReference
"""

from __future__ import annotations
import json
from pathlib    import Path
from typing     import Any, Dict, List, Set

from ..errors   import DanglingReference, MalformedGrammar
from .ast       import (
    Grammar, Rule, RuleBody,
    Repeat, Choice, Seq, PrecLeft, PrecRight, Symbol, String, Pattern,
)


def load_grammar_text(path: str) -> str:
    """
    Load Grammar Text
    """
    text = Path(path).read_text(encoding="utf-8")
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _field(obj: Dict[str, Any], key: str, kind: type, path: str) -> Any:
    if key not in obj:
        raise MalformedGrammar(f"missing '{key}'", path)
    val = obj[key]
    if not isinstance(val, kind):
        raise MalformedGrammar(f"'{key}' must be {kind.__name__}", path)
    return val


def body_from_dict(obj: Any, path: str = "body") -> RuleBody:
    """태그드 dict 하나를 RuleBody로 (재귀)."""
    if not isinstance(obj, dict):
        raise MalformedGrammar("rule body must be an object", path)
    kind = obj.get("type")
    if kind in ("REPEAT", "PREC_LEFT", "PREC_RIGHT"):
        content = body_from_dict(_field(obj, "content", dict, path), f"{path}.content")
        if kind == "REPEAT":
            return Repeat(content)
        # 정수든 이름(문자열)이든 보관만 한다
        value = obj.get("value", 0)
        return PrecLeft(content, value) if kind == "PREC_LEFT" else PrecRight(content, value)
    if kind in ("CHOICE", "SEQ"):
        raw = _field(obj, "members", list, path)
        members = [body_from_dict(m, f"{path}.members[{i}]") for i, m in enumerate(raw)]
        if not members:
            raise MalformedGrammar("'members' must not be empty", path)
        return Choice(members) if kind == "CHOICE" else Seq(members)
    if kind == "SYMBOL":
        return Symbol(_field(obj, "name", str, path))
    if kind == "STRING":
        return String(_field(obj, "value", str, path))
    if kind == "PATTERN":
        return Pattern(_field(obj, "value", str, path))
    if kind is None:
        raise MalformedGrammar("missing 'type'", path)
    raise MalformedGrammar(f"unknown rule type {kind!r}", path)


def grammar_from_dict(obj: Any) -> Grammar:
    if not isinstance(obj, dict):
        raise MalformedGrammar("grammar must be a JSON object")
    name = _field(obj, "name", str, "grammar")
    raw_rules = _field(obj, "rules", dict, "grammar")
    raw_extras = obj.get("extras", [])
    if not isinstance(raw_extras, list):
        raise MalformedGrammar("'extras' must be list", "grammar")

    extras: Set[str] = set()
    for i, e in enumerate(raw_extras):
        body = body_from_dict(e, f"extras[{i}]")
        if isinstance(body, Symbol):
            if body.name not in raw_rules:
                raise DanglingReference(body.name, [f"extras[{i}]"])
            extras.add(body.name)

    rules: List[Rule] = []
    for rname, raw in raw_rules.items():
        body = body_from_dict(raw, f"rules.{rname}")
        rules.append(Rule(name=rname, body=body, is_extra=rname in extras))
    return Grammar(name=name, rules=rules)


def parse_grammar_json(src: str) -> Grammar:
    try:
        obj = json.loads(src)
    except json.JSONDecodeError as e:
        raise MalformedGrammar(f"invalid JSON: {e.msg} (line {e.lineno}, col {e.colno})") from e
    return grammar_from_dict(obj)


def load_grammar(path: str) -> Grammar:
    return parse_grammar_json(load_grammar_text(path))
