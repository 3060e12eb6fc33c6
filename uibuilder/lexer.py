import bisect
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple

from .config import get_builder_config
from .errors import LexicalError, StructuralError

Token = Tuple[str, str, int, int]  # (type, value, line, col)

logger = logging.getLogger(__name__)

SYMBOLS = {
    '{': 'LBRACE',
    '}': 'RBRACE',
    '[': 'LBRACK',
    ']': 'RBRACK',
    ':': 'COLON',
    ',': 'COMMA',
}

WS = ' \t\r\n\f\v'

_id_re = re.compile(r'[A-Za-z_$][A-Za-z0-9_$.]*')
_num_re = re.compile(r'-?\d+(?:\.\d+)?')

_ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '"': '"',
    "'": "'",
    '\\': '\\',
}


class LineIndex:
    """Maps absolute offsets in ``text`` to 1-based (line, col) pairs."""

    def __init__(self, text: str):
        self._starts = [0]
        for idx, ch in enumerate(text):
            if ch == '\n':
                self._starts.append(idx + 1)

    def position(self, offset: int) -> Tuple[int, int]:
        line = bisect.bisect_right(self._starts, offset)
        return line, offset - self._starts[line - 1] + 1


@dataclass
class CallSource:
    """Argument text of one ``modlib.ParseUI(...)`` call: ``text[start:end]``."""

    start: int
    end: int
    line: int
    col: int


def _marker_pattern() -> Pattern[str]:
    cfg = get_builder_config()
    return re.compile(
        rf'{re.escape(cfg.library_namespace)}\s*\.\s*{re.escape(cfg.parse_function)}\s*\('
    )


def _at_word_start(text: str, i: int) -> bool:
    if i == 0:
        return True
    prev = text[i - 1]
    return not (prev.isalnum() or prev in '_$.')


def _skip_quoted(text: str, i: int) -> int:
    """Return the index just past the literal starting at ``text[i]`` (or len(text))."""

    quote = text[i]
    n = len(text)
    i += 1
    while i < n:
        ch = text[i]
        if ch == '\\':
            i += 2
            continue
        if ch == quote:
            return i + 1
        i += 1
    return n


def _skip_comment(text: str, i: int) -> int:
    if text.startswith('//', i):
        end = text.find('\n', i)
        return len(text) if end == -1 else end
    end = text.find('*/', i + 2)
    return len(text) if end == -1 else end + 2


def _skip_inert(text: str, i: int) -> Optional[int]:
    ch = text[i]
    if ch in '"\'`':
        return _skip_quoted(text, i)
    if text.startswith('//', i) or text.startswith('/*', i):
        return _skip_comment(text, i)
    return None


def _find_closing_paren(text: str, open_index: int, index: LineIndex) -> int:
    depth = 0
    i = open_index
    n = len(text)
    while i < n:
        skipped = _skip_inert(text, i)
        if skipped is not None:
            i = skipped
            continue
        ch = text[i]
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
            if depth == 0:
                return i
        i += 1
    line, col = index.position(open_index)
    raise StructuralError("unbalanced parentheses: call is never closed", line=line, col=col)


def extract_calls(text: str) -> List[CallSource]:
    """Locate every ``modlib.ParseUI(...)`` call and isolate its argument text.

    Markers inside string literals or comments are ignored, as are parentheses,
    quotes and commas inside them while balancing the call.
    """

    pattern = _marker_pattern()
    index = LineIndex(text)
    calls: List[CallSource] = []
    i = 0
    n = len(text)
    while i < n:
        skipped = _skip_inert(text, i)
        if skipped is not None:
            i = skipped
            continue
        if _at_word_start(text, i):
            m = pattern.match(text, i)
            if m:
                open_index = m.end() - 1
                close_index = _find_closing_paren(text, open_index, index)
                line, col = index.position(open_index + 1)
                calls.append(CallSource(open_index + 1, close_index, line, col))
                i = close_index + 1
                continue
        i += 1
    if not calls:
        marker = get_builder_config().call_marker
        raise StructuralError(f"no {marker}(...) call found in source")
    logger.info("Extracted %d ParseUI call(s)", len(calls))
    return calls


def _read_string(text: str, i: int, end: int, index: LineIndex) -> Tuple[str, int]:
    quote = text[i]
    start = i
    out: List[str] = []
    i += 1
    while i < end:
        ch = text[i]
        if ch == '\\':
            if i + 1 >= end:
                break
            nxt = text[i + 1]
            out.append(_ESCAPES.get(nxt, nxt))
            i += 2
            continue
        if ch == quote:
            return ''.join(out), i + 1
        if ch == '\n':
            break
        out.append(ch)
        i += 1
    line, col = index.position(start)
    raise LexicalError("unterminated string literal", line=line, col=col)


def tokenize(text: str, start: int = 0, end: Optional[int] = None, *, index: Optional[LineIndex] = None) -> List[Token]:
    """Tokenize ``text[start:end]``; positions refer to the whole ``text``."""

    end = len(text) if end is None else end
    index = index or LineIndex(text)
    tokens: List[Token] = []
    i = start
    while i < end:
        ch = text[i]
        if ch in WS:
            i += 1
            continue
        if text.startswith('//', i):
            nl = text.find('\n', i, end)
            i = end if nl == -1 else nl
            continue
        if text.startswith('/*', i):
            close = text.find('*/', i + 2, end)
            if close == -1:
                line, col = index.position(i)
                raise LexicalError("unterminated block comment", line=line, col=col)
            i = close + 2
            continue
        line, col = index.position(i)
        if ch in SYMBOLS:
            tokens.append((SYMBOLS[ch], ch, line, col))
            i += 1
            continue
        if ch in '"\'':
            value, i = _read_string(text, i, end, index)
            tokens.append(('STRING', value, line, col))
            continue
        if ch == '-' or ch.isdigit():
            m = _num_re.match(text, i, end)
            if not m:
                raise LexicalError(f"invalid number starting with {ch!r}", line=line, col=col)
            j = m.end()
            if j < end and (text[j] == '.' or text[j].isalnum() or text[j] in '_$'):
                raise LexicalError(f"invalid number {text[i:j + 1]!r}", line=line, col=col)
            tokens.append(('NUMBER', m.group(0), line, col))
            i = j
            continue
        m = _id_re.match(text, i, end)
        if m:
            tokens.append(('ID', m.group(0), line, col))
            i = m.end()
            continue
        raise LexicalError(f"unexpected character: {ch!r}", line=line, col=col)
    return tokens
