import pytest

from uibuilder.errors import LexicalError, StructuralError
from uibuilder.lexer import LineIndex, extract_calls, tokenize


def _types(tokens):
    return [tok[0] for tok in tokens]


def test_extract_calls_ignores_parens_in_strings_and_comments():
    text = (
        'const x = modlib.ParseUI({ name: "a)(" /* ) */ }, // )\n'
        "{ name: 'b' });\n"
        'foo(modlib.ParseUI({}));\n'
    )

    calls = extract_calls(text)

    assert len(calls) == 2
    first = text[calls[0].start:calls[0].end]
    assert first.startswith('{ name: "a)("')
    assert first.endswith("{ name: 'b' }")
    assert text[calls[1].start:calls[1].end] == '{}'
    assert calls[1].line == 3


def test_extract_calls_skips_marker_in_comment_and_string():
    text = '// modlib.ParseUI(\nconst s = "modlib.ParseUI(";\nmodlib.ParseUI({ name: "x" })'

    calls = extract_calls(text)

    assert len(calls) == 1
    assert calls[0].line == 3


def test_extract_calls_allows_spaced_marker():
    assert len(extract_calls('modlib . ParseUI ( {} )')) == 1


@pytest.mark.parametrize('text', [
    'const x = 1;',
    'mymodlib.ParseUI({})',
    '/* modlib.ParseUI({}) */',
])
def test_extract_calls_requires_marker(text):
    with pytest.raises(StructuralError, match='no modlib.ParseUI'):
        extract_calls(text)


def test_extract_calls_unbalanced():
    with pytest.raises(StructuralError, match='unbalanced') as excinfo:
        extract_calls('x\nmodlib.ParseUI({ name: "x" }')
    assert excinfo.value.line == 2


def test_tokenize_basic_shapes():
    tokens = tokenize("{ a: -1.5, b: [1, 2], c: mod.UIAnchor.Center, d: 'x\\'y' }")

    assert _types(tokens) == [
        'LBRACE',
        'ID', 'COLON', 'NUMBER', 'COMMA',
        'ID', 'COLON', 'LBRACK', 'NUMBER', 'COMMA', 'NUMBER', 'RBRACK', 'COMMA',
        'ID', 'COLON', 'ID', 'COMMA',
        'ID', 'COLON', 'STRING',
        'RBRACE',
    ]
    assert tokens[3][1] == '-1.5'
    assert tokens[15][1] == 'mod.UIAnchor.Center'
    assert tokens[19][1] == "x'y"


def test_tokenize_string_escapes():
    tokens = tokenize(r'"a\"b" "tab\tnew\nback\\"')

    assert tokens[0] == ('STRING', 'a"b', 1, 1)
    assert tokens[1][1] == 'tab\tnew\nback\\'


def test_tokenize_skips_comments():
    tokens = tokenize('{ // note\n /* block\n */ a: 1 }')

    assert _types(tokens) == ['LBRACE', 'ID', 'COLON', 'NUMBER', 'RBRACE']
    assert tokens[1][2:] == (3, 5)


def test_tokenize_positions_refer_to_whole_text():
    text = 'prefix\nmodlib.ParseUI({ a: 1 })'
    start = text.index('{')
    end = text.index('})') + 1

    tokens = tokenize(text, start, end)

    assert tokens[0] == ('LBRACE', '{', 2, 16)
    assert tokens[-1][0] == 'RBRACE'


def test_unexpected_character_reports_position():
    with pytest.raises(LexicalError, match='unexpected character') as excinfo:
        tokenize('x\n  @')
    assert (excinfo.value.line, excinfo.value.col) == (2, 3)
    assert excinfo.value.message.startswith('[line 2, col 3]')


@pytest.mark.parametrize('text', ['1.', '-x', '12abc', '1.2.3'])
def test_invalid_numbers(text):
    with pytest.raises(LexicalError, match='invalid number'):
        tokenize(text)


@pytest.mark.parametrize('text', ['"open', "'line\nbreak'", '"trailing\\'])
def test_unterminated_string(text):
    with pytest.raises(LexicalError, match='unterminated string literal'):
        tokenize(text)


def test_unterminated_block_comment():
    with pytest.raises(LexicalError, match='unterminated block comment'):
        tokenize('{ /* never closed')


def test_line_index():
    index = LineIndex('ab\ncd\n\nx')

    assert index.position(0) == (1, 1)
    assert index.position(4) == (2, 2)
    assert index.position(6) == (3, 1)
    assert index.position(7) == (4, 1)
