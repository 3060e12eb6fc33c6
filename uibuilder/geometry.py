"""Anchor-relative geometry: absolute bounds and their inverse."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .config import get_builder_config
from .enums import UIAnchor
from .model import Node
from .tree import ElementTree

Point = Tuple[float, float]

# Fraction of the container (x, y) each anchor sits at; y grows downwards.
_ANCHOR_FRACTIONS: Dict[int, Tuple[float, float]] = {
    UIAnchor.TopLeft: (0.0, 0.0),
    UIAnchor.TopCenter: (0.5, 0.0),
    UIAnchor.TopRight: (1.0, 0.0),
    UIAnchor.CenterLeft: (0.0, 0.5),
    UIAnchor.Center: (0.5, 0.5),
    UIAnchor.CenterRight: (1.0, 0.5),
    UIAnchor.BottomLeft: (0.0, 1.0),
    UIAnchor.BottomCenter: (0.5, 1.0),
    UIAnchor.BottomRight: (1.0, 1.0),
}


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center_x(self) -> float:
        return self.left + self.width / 2

    @property
    def center_y(self) -> float:
        return self.top + self.height / 2

    def lines(self, axis: str) -> Tuple[float, float, float]:
        """Leading edge, trailing edge and center along ``axis`` ('x' or 'y')."""

        if axis == "x":
            return self.left, self.right, self.center_x
        return self.top, self.bottom, self.center_y


@dataclass(frozen=True)
class ElementBounds:
    id: str
    parent_id: Optional[str]
    rect: Rect


def _fractions(anchor: int) -> Tuple[float, float]:
    try:
        return _ANCHOR_FRACTIONS[anchor]
    except KeyError:
        raise ValueError(f"invalid anchor ordinal {anchor!r}") from None


def canvas_size() -> Tuple[float, float]:
    cfg = get_builder_config()
    return cfg.canvas_width, cfg.canvas_height


def canvas_rect() -> Rect:
    width, height = canvas_size()
    return Rect(0, 0, width, height)


def anchor_start(anchor: int, container_width: float, container_height: float) -> Point:
    """Reference point of ``anchor`` inside a container of the given size."""

    fx, fy = _fractions(anchor)
    return _scale(fx, container_width), _scale(fy, container_height)


def anchor_offset(anchor: int, size: Sequence[float]) -> Point:
    """Shift that lines the element's own matching edge/center up with the anchor point."""

    fx, fy = _fractions(anchor)
    return -_scale(fx, size[0]), -_scale(fy, size[1])


def _scale(fraction: float, extent: float) -> float:
    # keeps integer inputs integral for the edge anchors
    if fraction == 0.0:
        return 0
    if fraction == 1.0:
        return extent
    return extent / 2


def _container_size(parent: Optional[Node]) -> Tuple[float, float]:
    if parent is None:
        return canvas_size()
    return parent.size[0], parent.size[1]


def _place(node: Node, parent_abs: Point, container: Tuple[float, float]) -> Point:
    sx, sy = anchor_start(node.anchor, container[0], container[1])
    ox, oy = anchor_offset(node.anchor, node.size)
    return (
        parent_abs[0] + sx + ox + node.position[0],
        parent_abs[1] + sy + oy + node.position[1],
    )


def absolute_position(node: Node, tree: ElementTree) -> Point:
    """Absolute top-left of ``node`` in canvas units."""

    parent = tree.parent_of(node.id)
    parent_abs: Point = (0, 0) if parent is None else absolute_position(parent, tree)
    return _place(node, parent_abs, _container_size(parent))


def absolute_rect(node: Node, tree: ElementTree) -> Rect:
    x, y = absolute_position(node, tree)
    return Rect(x, y, node.size[0], node.size[1])


def compute_all_bounds(tree: ElementTree) -> List[ElementBounds]:
    """Absolute rects of every node in one depth-first pass (parents first)."""

    bounds: List[ElementBounds] = []
    origin_of: Dict[str, Point] = {}
    canvas = canvas_size()
    for node, parent_id in tree.walk():
        if parent_id is None:
            x, y = _place(node, (0, 0), canvas)
        else:
            parent = tree.get(parent_id)
            x, y = _place(node, origin_of[parent_id], _container_size(parent))
        origin_of[node.id] = (x, y)
        bounds.append(ElementBounds(node.id, parent_id, Rect(x, y, node.size[0], node.size[1])))
    return bounds


def bounds_by_id(bounds: Iterable[ElementBounds]) -> Dict[str, ElementBounds]:
    return {entry.id: entry for entry in bounds}


def local_from_absolute(absolute_x: float, absolute_y: float, node: Node, tree: ElementTree) -> Point:
    """Inverse of :func:`absolute_position`: the ``position`` that puts ``node`` at the given point."""

    parent = tree.parent_of(node.id)
    parent_abs: Point = (0, 0) if parent is None else absolute_position(parent, tree)
    container = _container_size(parent)
    sx, sy = anchor_start(node.anchor, container[0], container[1])
    ox, oy = anchor_offset(node.anchor, node.size)
    return (
        absolute_x - parent_abs[0] - sx - ox,
        absolute_y - parent_abs[1] - sy - oy,
    )
