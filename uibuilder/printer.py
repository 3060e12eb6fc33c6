import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .config import get_builder_config
from .enums import EnumTable
from .model import (
    BUTTON_STATE_FIELDS,
    COMMON_FIELDS,
    ENUM_FIELDS,
    VARIANT_FIELDS,
    WIRE_KEYS,
    ElementType,
    Node,
)

logger = logging.getLogger(__name__)

_WS_RE = re.compile(r'\s+')
_NON_ALNUM_RE = re.compile(r'[^A-Za-z0-9]+')
_STRING_KEY_RE = re.compile(r'[A-Za-z_$][A-Za-z0-9_$]*')

# Words a bare `export const <name>` binding may not use.
_RESERVED_WORDS = frozenset(
    'break case catch class const continue debugger default delete do else enum export extends'
    ' false finally for function if import in instanceof let new null return static super switch'
    ' this throw true try typeof var void while with yield await implements interface package'
    ' private protected public'.split()
)

COMBINED_VARIABLE = 'widget'


def format_number(value: float) -> str:
    """Integers print bare; other values keep at most the configured fractional digits."""

    if isinstance(value, int):
        return str(value)
    number = float(value)
    if number.is_integer():
        return str(int(number))
    precision = get_builder_config().number_precision
    text = f"{number:.{precision}f}".rstrip('0').rstrip('.')
    return '0' if text in ('', '-0') else text


def quote_string(text: str) -> str:
    escaped = (
        text.replace('\\', '\\\\')
        .replace('"', '\\"')
        .replace('\n', '\\n')
        .replace('\r', '\\r')
        .replace('\t', '\\t')
    )
    return f'"{escaped}"'


def format_enum(table: EnumTable, ordinal: int) -> str:
    member = table.member_name(ordinal)
    if member is None:
        return format_number(ordinal)
    return f"{get_builder_config().runtime_namespace}.{table.name}.{member}"


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, str):
        return quote_string(value)
    if isinstance(value, (list, tuple)):
        return '[' + ', '.join(format_value(item) for item in value) + ']'
    if value is None:
        return 'null'
    raise ValueError(f"cannot serialize value {value!r}")


def string_key(node: Node) -> str:
    return _WS_RE.sub('_', node.name.strip())


def _format_label(node: Node, strings: Optional[Mapping[str, str]]) -> str:
    key = string_key(node)
    if strings and strings.get(key) and _STRING_KEY_RE.fullmatch(key):
        cfg = get_builder_config()
        return f"{cfg.runtime_namespace}.{cfg.string_keys_namespace}.{key}"
    return quote_string(node.text_label)


def _format_field(node: Node, name: str, strings: Optional[Mapping[str, str]]) -> str:
    if name == 'type':
        return quote_string(node.type.value)
    if name == 'text_label':
        return _format_label(node, strings)
    if name in ENUM_FIELDS:
        return format_enum(ENUM_FIELDS[name], getattr(node, name))
    return format_value(getattr(node, name))


def _render_object(entries: Sequence[Tuple[str, str]], indent_level: int) -> str:
    indent = get_builder_config().indent
    inner = indent * (indent_level + 1)
    lines = ['{']
    for idx, (key, value) in enumerate(entries):
        sep = ',' if idx < len(entries) - 1 else ''
        lines.append(f"{inner}{key}: {value}{sep}")
    lines.append(indent * indent_level + '}')
    return '\n'.join(lines)


def _render_children(children: Sequence[Node], render, indent_level: int, strings) -> str:
    indent = get_builder_config().indent
    item_indent = indent * (indent_level + 2)
    items = [item_indent + render(child, indent_level + 2, strings) for child in children]
    return '[\n' + ',\n'.join(items) + '\n' + indent * (indent_level + 1) + ']'


def serialize_params(node: Node, indent_level: int = 0, strings: Optional[Mapping[str, str]] = None) -> str:
    """Per-node object literal: common fields plus the fields of the node's variant.

    Buttons always serialize ``buttonEnabled: true`` in this form, whatever
    the stored flag says.
    """

    entries = [(WIRE_KEYS[name], _format_field(node, name, strings)) for name in COMMON_FIELDS]
    for name in VARIANT_FIELDS[node.type]:
        if name == 'button_enabled':
            entries.append((WIRE_KEYS[name], 'true'))
            continue
        entries.append((WIRE_KEYS[name], _format_field(node, name, strings)))
    if node.children:
        entries.append(('children', _render_children(node.children, serialize_params, indent_level, strings)))
    return _render_object(entries, indent_level)


def serialize_combined(node: Node, indent_level: int = 0, strings: Optional[Mapping[str, str]] = None) -> str:
    """Object literal for the combined export: ``buttonEnabled`` is written on
    every node with its real value, and the button state colors only when it
    is true."""

    entries = [(WIRE_KEYS[name], _format_field(node, name, strings)) for name in COMMON_FIELDS]
    if node.type in (ElementType.TEXT, ElementType.IMAGE):
        entries.extend((WIRE_KEYS[name], _format_field(node, name, strings)) for name in VARIANT_FIELDS[node.type])
    entries.append((WIRE_KEYS['button_enabled'], format_value(bool(node.button_enabled))))
    if node.button_enabled:
        entries.extend((WIRE_KEYS[name], _format_field(node, name, strings)) for name in BUTTON_STATE_FIELDS)
    if node.children:
        entries.append(('children', _render_children(node.children, serialize_combined, indent_level, strings)))
    return _render_object(entries, indent_level)


def collect_strings(roots: Iterable[Node]) -> Dict[str, str]:
    """Text labels keyed by node name (id when the name is blank); first writer wins."""

    strings: Dict[str, str] = {}
    for root in roots:
        for node in root.walk():
            if node.type is not ElementType.TEXT or not node.text_label.strip():
                continue
            key = node.name if node.name.strip() else node.id
            strings.setdefault(key, node.text_label)
    return strings


def _identifier_from_label(label: str) -> str:
    parts = [part for part in _NON_ALNUM_RE.split(label) if part]
    if not parts:
        return COMBINED_VARIABLE
    head = parts[0][0].lower() + parts[0][1:]
    ident = head + ''.join(part[0].upper() + part[1:] for part in parts[1:])
    if ident[0].isdigit():
        ident = COMBINED_VARIABLE + ident
    if ident in _RESERVED_WORDS:
        ident += COMBINED_VARIABLE.capitalize()
    return ident


def variable_names(roots: Iterable[Node]) -> List[str]:
    """Collision-free lower-camel identifiers, one per root, in order."""

    used = set()
    names: List[str] = []
    for root in roots:
        base = _identifier_from_label(root.name or root.id)
        candidate = base
        suffix = 2
        while candidate in used:
            candidate = f"{base}{suffix}"
            suffix += 1
        used.add(candidate)
        names.append(candidate)
    return names


def _call_statement(variable: str, objects: Sequence[str]) -> str:
    cfg = get_builder_config()
    args = ',\n'.join(cfg.indent + obj for obj in objects)
    return f"export const {variable} = {cfg.call_marker}(\n{args}\n);\n"


@dataclass
class ExportSnippet:
    element_id: str
    variable_name: str
    code: str


def serialize_snippets(roots: Sequence[Node], strings: Optional[Mapping[str, str]] = None) -> List[ExportSnippet]:
    """One independent ``export const`` declaration per root (per-node form)."""

    return [
        ExportSnippet(root.id, name, _call_statement(name, [serialize_params(root, 1, strings)]))
        for root, name in zip(roots, variable_names(roots))
    ]


def serialize_call(roots: Sequence[Node], strings: Optional[Mapping[str, str]] = None) -> str:
    """Single ``ParseUI`` call holding every root in the combined form."""

    if not roots:
        return '// No UI elements\n'
    return _call_statement(COMBINED_VARIABLE, [serialize_combined(root, 1, strings) for root in roots])


@dataclass
class ExportArtifacts:
    params: List[Dict[str, Any]]
    params_json: str
    strings: Dict[str, str]
    strings_json: str
    typescript_code: str
    snippets: List[ExportSnippet] = field(default_factory=list)


def build_export_artifacts(roots: Sequence[Node], timestamp: Optional[str] = None) -> ExportArtifacts:
    strings = collect_strings(roots)
    params = [root.to_params() for root in roots]
    stamp = timestamp or datetime.now().strftime('%Y-%m-%d %H:%M:%S')
    code = f"// UI export generated {stamp}\n" + serialize_call(roots, strings)
    logger.info("Built export for %d root(s), %d string(s)", len(roots), len(strings))
    return ExportArtifacts(
        params=params,
        params_json=json.dumps(params, indent=2),
        strings=strings,
        strings_json=json.dumps(strings, indent=2, ensure_ascii=False),
        typescript_code=code,
        snippets=serialize_snippets(roots, strings),
    )
