from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .enums import UI_ANCHOR, UI_BG_FILL, UI_IMAGE_TYPE, EnumTable, UIAnchor

Vector = List[float]


class ElementType(str, Enum):
    CONTAINER = "Container"
    TEXT = "Text"
    IMAGE = "Image"
    BUTTON = "Button"

    @classmethod
    def coerce(cls, value: Union["ElementType", str]) -> "ElementType":
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value.lower() == str(value).lower():
                return member
        raise ValueError(f"unknown element type {value!r}")


BUTTON_STATES: Tuple[str, ...] = ("base", "disabled", "pressed", "hover", "focused")

# Default values shared by new nodes and by imported (sparse) records.
DEFAULT_UI_PARAMS: Dict[str, Any] = {
    "position": [0, 0],
    "size": [100, 50],
    "anchor": int(UIAnchor.TopLeft),
    "visible": True,
    "padding": 0,
    "bg_color": [0.2, 0.2, 0.2],
    "bg_alpha": 1,
    "bg_fill": UI_BG_FILL.ordinal("Solid"),
    "locked": False,
    "text_label": "",
    "text_color": [1, 1, 1],
    "text_alpha": 1,
    "text_size": 12,
    "text_anchor": int(UIAnchor.Center),
    "image_type": UI_IMAGE_TYPE.ordinal("None"),
    "image_color": [1, 1, 1],
    "image_alpha": 1,
    "button_enabled": False,
    "button_color_base": [0.3, 0.3, 0.3],
    "button_alpha_base": 1,
    "button_color_disabled": [0.1, 0.1, 0.1],
    "button_alpha_disabled": 0.5,
    "button_color_pressed": [0.2, 0.2, 0.2],
    "button_alpha_pressed": 1,
    "button_color_hover": [0.4, 0.4, 0.4],
    "button_alpha_hover": 1,
    "button_color_focused": [0.5, 0.5, 0.5],
    "button_alpha_focused": 1,
}


def _default(key: str):
    return field(default_factory=lambda: copy.deepcopy(DEFAULT_UI_PARAMS[key]))


@dataclass
class Node:
    """One widget in the element tree.

    Every node carries the fields of every variant; ``VARIANT_FIELDS`` decides
    which of them are meaningful (and serialized) for its ``type``.
    """

    id: str
    name: str
    type: ElementType = ElementType.CONTAINER
    position: Vector = _default("position")
    size: Vector = _default("size")
    anchor: int = _default("anchor")
    visible: bool = _default("visible")
    padding: float = _default("padding")
    bg_color: Vector = _default("bg_color")
    bg_alpha: float = _default("bg_alpha")
    bg_fill: int = _default("bg_fill")
    locked: bool = _default("locked")
    text_label: str = _default("text_label")
    text_color: Vector = _default("text_color")
    text_alpha: float = _default("text_alpha")
    text_size: float = _default("text_size")
    text_anchor: int = _default("text_anchor")
    image_type: int = _default("image_type")
    image_color: Vector = _default("image_color")
    image_alpha: float = _default("image_alpha")
    button_enabled: bool = _default("button_enabled")
    button_color_base: Vector = _default("button_color_base")
    button_alpha_base: float = _default("button_alpha_base")
    button_color_disabled: Vector = _default("button_color_disabled")
    button_alpha_disabled: float = _default("button_alpha_disabled")
    button_color_pressed: Vector = _default("button_color_pressed")
    button_alpha_pressed: float = _default("button_alpha_pressed")
    button_color_hover: Vector = _default("button_color_hover")
    button_alpha_hover: float = _default("button_alpha_hover")
    button_color_focused: Vector = _default("button_color_focused")
    button_alpha_focused: float = _default("button_alpha_focused")
    advanced_metadata: Optional[Dict[str, Any]] = None
    children: List["Node"] = field(default_factory=list)

    def walk(self) -> Iterator["Node"]:
        """Yield this node and its descendants depth-first, parents first."""

        yield self
        for child in self.children:
            yield from child.walk()

    def copy(self) -> "Node":
        return copy.deepcopy(self)

    def to_params(self) -> Dict[str, Any]:
        """Return the JSON-ready wire dict (camelCase keys, no id)."""

        params: Dict[str, Any] = {}
        for name in PARAM_FIELDS:
            value = getattr(self, name)
            if name == "type":
                value = self.type.value
            params[WIRE_KEYS[name]] = copy.deepcopy(value)
        if self.advanced_metadata is not None:
            params[WIRE_KEYS["advanced_metadata"]] = copy.deepcopy(self.advanced_metadata)
        params["children"] = [child.to_params() for child in self.children]
        return params


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


# Fields exported to the params JSON, in declaration order.
PARAM_FIELDS: Tuple[str, ...] = tuple(
    f.name for f in fields(Node) if f.name not in ("id", "advanced_metadata", "children")
)

WIRE_KEYS: Dict[str, str] = {f.name: _camel(f.name) for f in fields(Node)}
FIELD_FOR_WIRE_KEY: Dict[str, str] = {wire: name for name, wire in WIRE_KEYS.items()}

COMMON_FIELDS: Tuple[str, ...] = (
    "name",
    "type",
    "position",
    "size",
    "anchor",
    "visible",
    "padding",
    "bg_color",
    "bg_alpha",
    "bg_fill",
)

BUTTON_STATE_FIELDS: Tuple[str, ...] = tuple(
    name
    for state in BUTTON_STATES
    for name in (f"button_color_{state}", f"button_alpha_{state}")
)

VARIANT_FIELDS: Dict[ElementType, Tuple[str, ...]] = {
    ElementType.CONTAINER: (),
    ElementType.TEXT: ("text_label", "text_color", "text_alpha", "text_size", "text_anchor"),
    ElementType.IMAGE: ("image_type", "image_color", "image_alpha"),
    ElementType.BUTTON: ("button_enabled",) + BUTTON_STATE_FIELDS,
}

ENUM_FIELDS: Dict[str, EnumTable] = {
    "anchor": UI_ANCHOR,
    "text_anchor": UI_ANCHOR,
    "bg_fill": UI_BG_FILL,
    "image_type": UI_IMAGE_TYPE,
}

COLOR_FIELDS: Tuple[str, ...] = (
    "bg_color",
    "text_color",
    "image_color",
) + tuple(f"button_color_{state}" for state in BUTTON_STATES)


def default_name(element_type: ElementType, node_id: str) -> str:
    return f"{element_type.value}_{node_id}"


def create_node(
    element_type: Union[ElementType, str],
    name: Optional[str] = None,
    *,
    node_id: str,
) -> Node:
    """Create a node of ``element_type`` seeded from ``DEFAULT_UI_PARAMS``."""

    kind = ElementType.coerce(element_type)
    seeded = copy.deepcopy(DEFAULT_UI_PARAMS)
    label = name if name and name.strip() else default_name(kind, node_id)
    return Node(id=node_id, name=label, type=kind, **seeded)
