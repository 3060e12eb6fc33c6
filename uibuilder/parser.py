import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .config import get_builder_config
from .enums import enum_table
from .errors import SemanticError, StructuralError, UIParseError, with_source_snippet
from .lexer import LineIndex, Token, extract_calls, tokenize
from .model import Node
from .normalize import normalize_records

logger = logging.getLogger(__name__)

_TOKEN_NAMES = {
    'LBRACE': "'{'",
    'RBRACE': "'}'",
    'LBRACK': "'['",
    'RBRACK': "']'",
    'COLON': "':'",
    'COMMA': "','",
    'STRING': 'string',
    'NUMBER': 'number',
    'ID': 'identifier',
}

_LITERALS = {'true': True, 'false': False, 'null': None}


class Cursor:
    def __init__(self, tokens: List[Token], end_position: Tuple[int, int] = (0, 0)):
        self.toks = tokens
        self.i = 0
        self.end_position = end_position

    def peek(self) -> Optional[Token]:
        return self.toks[self.i] if self.i < len(self.toks) else None

    def match(self, *types: str) -> Optional[Token]:
        if self.i < len(self.toks) and self.toks[self.i][0] in types:
            t = self.toks[self.i]
            self.i += 1
            return t
        return None

    def expect(self, *types: str, what: Optional[str] = None) -> Token:
        t = self.peek()
        if t and t[0] in types:
            self.i += 1
            return t
        want = what or ' or '.join(_TOKEN_NAMES[name] for name in types)
        if t:
            raise StructuralError(f"expected {want}, got {_describe(t)}", line=t[2], col=t[3])
        line, col = self.end_position
        raise StructuralError(f"unexpected end of call arguments: expected {want}", line=line, col=col)


def _describe(tok: Token) -> str:
    if tok[0] in ('STRING', 'NUMBER', 'ID'):
        return f"{_TOKEN_NAMES[tok[0]]} {tok[1]!r}"
    return _TOKEN_NAMES[tok[0]]


def _parse_number_literal(raw: str):
    return float(raw) if '.' in raw else int(raw)


def resolve_identifier(tok: Token, strings: Optional[Mapping[str, str]] = None) -> Any:
    """Resolve an identifier token to a Python value.

    ``true``/``false``/``null`` become literals, ``mod.<Enum>.<Member>`` becomes
    the member ordinal, ``mod.stringkeys.<key>`` stays an opaque string unless
    ``strings`` holds the key, and bare identifiers are plain strings.
    """

    raw = tok[1]
    if raw in _LITERALS:
        return _LITERALS[raw]
    if '.' not in raw:
        return raw
    cfg = get_builder_config()
    parts = raw.split('.')
    if len(parts) == 3 and parts[0] == cfg.runtime_namespace:
        _, group, member = parts
        table = enum_table(group)
        if table is not None:
            ordinal = table.ordinal(member)
            if ordinal is None:
                raise SemanticError(f"unknown {group} member {member!r}", line=tok[2], col=tok[3])
            return ordinal
        if group == cfg.string_keys_namespace and member:
            if strings is not None and member in strings:
                return strings[member]
            return raw
    raise SemanticError(f"unsupported identifier {raw!r}", line=tok[2], col=tok[3])


def parse_value(cur: Cursor, strings: Optional[Mapping[str, str]] = None) -> Any:
    t = cur.peek()
    if t is None:
        line, col = cur.end_position
        raise StructuralError("unexpected end of call arguments: expected a value", line=line, col=col)
    kind = t[0]
    if kind == 'LBRACE':
        return parse_object(cur, strings)
    if kind == 'LBRACK':
        return parse_array(cur, strings)
    cur.i += 1
    if kind == 'STRING':
        return t[1]
    if kind == 'NUMBER':
        return _parse_number_literal(t[1])
    if kind == 'ID':
        return resolve_identifier(t, strings)
    raise StructuralError(f"unexpected {_describe(t)}: expected a value", line=t[2], col=t[3])


def parse_object(cur: Cursor, strings: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    cur.expect('LBRACE')
    obj: Dict[str, Any] = {}
    if cur.match('RBRACE'):
        return obj
    while True:
        key = cur.expect('ID', 'STRING', what='property name')
        cur.expect('COLON')
        obj[key[1]] = parse_value(cur, strings)
        comma = cur.match('COMMA')
        if comma:
            nxt = cur.peek()
            if nxt and nxt[0] == 'RBRACE':
                raise StructuralError("trailing comma before '}'", line=comma[2], col=comma[3])
            continue
        cur.expect('RBRACE', what="',' or '}' (missing comma?)")
        return obj


def parse_array(cur: Cursor, strings: Optional[Mapping[str, str]] = None) -> List[Any]:
    cur.expect('LBRACK')
    items: List[Any] = []
    if cur.match('RBRACK'):
        return items
    while True:
        items.append(parse_value(cur, strings))
        comma = cur.match('COMMA')
        if comma:
            nxt = cur.peek()
            if nxt and nxt[0] == 'RBRACK':
                raise StructuralError("trailing comma before ']'", line=comma[2], col=comma[3])
            continue
        cur.expect('RBRACK', what="',' or ']' (missing comma?)")
        return items


def parse_arguments(
    tokens: List[Token],
    end_position: Tuple[int, int] = (0, 0),
    strings: Optional[Mapping[str, str]] = None,
) -> List[Dict[str, Any]]:
    """Parse the comma-separated object arguments of one call."""

    cur = Cursor(tokens, end_position)
    records: List[Dict[str, Any]] = []
    while True:
        t = cur.peek()
        if t is None:
            line, col = end_position
            raise StructuralError("expected an object literal argument", line=line, col=col)
        if t[0] != 'LBRACE':
            raise StructuralError(
                f"argument {len(records) + 1} must be an object literal, got {_describe(t)}",
                line=t[2],
                col=t[3],
            )
        records.append(parse_object(cur, strings))
        if not cur.match('COMMA'):
            break
    trailing = cur.peek()
    if trailing:
        raise StructuralError(
            f"unexpected {_describe(trailing)} after argument {len(records)} (missing comma?)",
            line=trailing[2],
            col=trailing[3],
        )
    return records


def parse_records(text: str, strings: Optional[Mapping[str, str]] = None) -> List[Dict[str, Any]]:
    """Extract and parse every ``ParseUI`` call in ``text`` into raw records."""

    index = LineIndex(text)
    records: List[Dict[str, Any]] = []
    for call in extract_calls(text):
        tokens = tokenize(text, call.start, call.end, index=index)
        end_position = index.position(call.end)
        records.extend(parse_arguments(tokens, end_position, strings))
    return records


def parse_ui_source(text: str, strings: Optional[Mapping[str, str]] = None) -> List[Node]:
    """Run extraction, tokenizing, parsing and normalization over ``text``.

    The result is a list of fully populated root nodes; nothing outside the
    returned value is touched, so callers may adopt it atomically.
    """

    try:
        records = parse_records(text, strings)
        nodes = normalize_records(records)
    except UIParseError as err:
        augmented = with_source_snippet(err, text)
        if augmented is None:
            raise
        raise augmented from None
    logger.info("Parsed %d root element(s) from source", len(nodes))
    return nodes
