from .config import BuilderConfig, get_builder_config, set_builder_config
from .enums import ENUM_TABLES, EnumTable, UIAnchor, UI_ANCHOR, UI_BG_FILL, UI_IMAGE_TYPE
from .errors import LexicalError, SemanticError, StructuralError, UIParseError
from .model import DEFAULT_UI_PARAMS, ElementType, Node, create_node
from .tree import ElementTree, ImportResult
from .geometry import (
    ElementBounds,
    Rect,
    absolute_position,
    absolute_rect,
    anchor_offset,
    anchor_start,
    canvas_rect,
    compute_all_bounds,
    local_from_absolute,
)
from .snapping import SnapResult, apply_snapping, snap_candidates, snap_node
from .printer import (
    ExportArtifacts,
    ExportSnippet,
    build_export_artifacts,
    collect_strings,
    format_number,
    serialize_call,
    serialize_combined,
    serialize_params,
    serialize_snippets,
    variable_names,
)
from .lexer import extract_calls, tokenize
from .parser import parse_records, parse_ui_source
from .normalize import normalize_records

__all__ = [
    'BuilderConfig',
    'get_builder_config',
    'set_builder_config',
    'ENUM_TABLES',
    'EnumTable',
    'UIAnchor',
    'UI_ANCHOR',
    'UI_BG_FILL',
    'UI_IMAGE_TYPE',
    'LexicalError',
    'SemanticError',
    'StructuralError',
    'UIParseError',
    'DEFAULT_UI_PARAMS',
    'ElementType',
    'Node',
    'create_node',
    'ElementTree',
    'ImportResult',
    'ElementBounds',
    'Rect',
    'absolute_position',
    'absolute_rect',
    'anchor_offset',
    'anchor_start',
    'canvas_rect',
    'compute_all_bounds',
    'local_from_absolute',
    'SnapResult',
    'apply_snapping',
    'snap_candidates',
    'snap_node',
    'ExportArtifacts',
    'ExportSnippet',
    'build_export_artifacts',
    'collect_strings',
    'format_number',
    'serialize_call',
    'serialize_combined',
    'serialize_params',
    'serialize_snippets',
    'variable_names',
    'extract_calls',
    'tokenize',
    'parse_records',
    'parse_ui_source',
    'normalize_records',
]
