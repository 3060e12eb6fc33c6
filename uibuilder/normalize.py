"""Turn raw parsed records (camelCase dicts) into fully populated nodes."""

from __future__ import annotations

import copy
import itertools
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .enums import EnumTable
from .errors import SemanticError
from .logging_utils import apply_debug_logging
from .model import (
    COLOR_FIELDS,
    DEFAULT_UI_PARAMS,
    ENUM_FIELDS,
    FIELD_FOR_WIRE_KEY,
    ElementType,
    Node,
    default_name,
)

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]

_VECTOR2_FIELDS = ("position", "size")
_BOOL_FIELDS = ("visible", "locked", "button_enabled")
_STRUCTURAL_KEYS = {"id", "name", "type", "children", "advancedMetadata"}


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def coerce_number(value: Any, default: float) -> float:
    if _is_number(value):
        return value
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
        return int(number) if number.is_integer() and "." not in value else number
    return default


def coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if _is_number(value):
        return bool(value)
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    return default


def coerce_string(value: Any, default: str) -> str:
    if isinstance(value, str):
        return value
    if _is_number(value) or isinstance(value, bool):
        return str(value).lower() if isinstance(value, bool) else str(value)
    return default


def coerce_vector(value: Any, default: Sequence[float], length: int) -> List[float]:
    if not isinstance(value, (list, tuple)) or len(value) != length:
        return list(default)
    return [coerce_number(item, fallback) for item, fallback in zip(value, default)]


def coerce_enum(value: Any, table: EnumTable, default: int) -> int:
    """Map an ordinal or a member name onto ``table``, else ``default``."""

    if _is_number(value) and float(value).is_integer() and int(value) in table:
        return int(value)
    if isinstance(value, str):
        member = value.rsplit(".", 1)[-1]
        ordinal = table.ordinal(member)
        if ordinal is not None:
            return ordinal
    logger.debug("Unrecognized %s value %r, using default %s", table.name, value, table.member_name(default))
    return default


def coerce_type(value: Any) -> ElementType:
    try:
        return ElementType.coerce(value)
    except ValueError:
        logger.debug("Unrecognized element type %r, using Container", value)
        return ElementType.CONTAINER


def _coerce_field(name: str, value: Any) -> Any:
    default = DEFAULT_UI_PARAMS[name]
    if name in ENUM_FIELDS:
        return coerce_enum(value, ENUM_FIELDS[name], default)
    if name in COLOR_FIELDS:
        return coerce_vector(value, default, 3)
    if name in _VECTOR2_FIELDS:
        return coerce_vector(value, default, 2)
    if name in _BOOL_FIELDS:
        return coerce_bool(value, default)
    if name == "text_label":
        return coerce_string(value, default)
    return coerce_number(value, default)


def normalize_record(record: Mapping[str, Any], next_id: IdFactory) -> Node:
    """Build a node from ``record``, backfilling every absent field from defaults."""

    if not isinstance(record, Mapping):
        raise SemanticError(f"element record must be an object, got {type(record).__name__}")

    node_id = next_id()
    kind = coerce_type(record.get("type"))
    values: Dict[str, Any] = copy.deepcopy(DEFAULT_UI_PARAMS)

    for key, raw in record.items():
        if key in _STRUCTURAL_KEYS:
            continue
        name = FIELD_FOR_WIRE_KEY.get(key)
        if name is None or name not in values:
            logger.debug("Ignoring unknown field %r on %s record", key, kind.value)
            continue
        values[name] = _coerce_field(name, raw)

    name = coerce_string(record.get("name"), "")
    if not name.strip():
        name = default_name(kind, node_id)

    metadata = record.get("advancedMetadata")
    node = Node(
        id=node_id,
        name=name,
        type=kind,
        advanced_metadata=copy.deepcopy(metadata) if isinstance(metadata, Mapping) else None,
        **values,
    )

    children = record.get("children")
    if children is None:
        return node
    if not isinstance(children, (list, tuple)):
        raise SemanticError(f"'children' of {name!r} must be an array")
    node.children = [normalize_record(child, next_id) for child in children]
    return node


def normalize_records(
    records: Sequence[Mapping[str, Any]],
    next_id: Optional[IdFactory] = None,
) -> List[Node]:
    if next_id is None:
        counter = itertools.count(1)

        def next_id() -> str:
            return f"element_{next(counter)}"

    return [normalize_record(record, next_id) for record in records]


apply_debug_logging(globals(), logger=logger)
