"""Edge/center snapping of a moving box against nearby rects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, List, Optional, Sequence, Tuple

import numpy as np

from .config import get_builder_config
from .geometry import ElementBounds, Rect, bounds_by_id, canvas_rect, compute_all_bounds
from .tree import ElementTree

Point = Tuple[float, float]

DEFAULT_SNAP_THRESHOLD = 8.0


@dataclass
class SnapResult:
    x: float
    y: float
    vertical_guide: Optional[float] = None  # x of the matched line
    horizontal_guide: Optional[float] = None  # y of the matched line

    @property
    def snapped(self) -> bool:
        return self.vertical_guide is not None or self.horizontal_guide is not None


def snap_candidates(
    tree: ElementTree,
    bounds: Sequence[ElementBounds],
    node_id: str,
    exclude_ids: Collection[str] = (),
) -> List[Rect]:
    """Siblings of ``node_id`` in tree order, then its parent's rect (or the canvas)."""

    parent_id = tree.parent_id_of(node_id)
    excluded = set(exclude_ids) | {node_id}
    rects = [
        entry.rect
        for entry in bounds
        if entry.parent_id == parent_id and entry.id not in excluded
    ]
    if parent_id is None:
        rects.append(canvas_rect())
    else:
        parent = bounds_by_id(bounds).get(parent_id)
        if parent is not None:
            rects.append(parent.rect)
    return rects


def _snap_axis(start: float, extent: float, targets: np.ndarray, threshold: float) -> Tuple[float, Optional[float]]:
    # targets: (n_rects, 3) leading/trailing/center lines
    shifts = np.array([0.0, extent, extent / 2.0])
    moving = start + shifts
    diffs = np.abs(targets[:, None, :] - moving[None, :, None])
    flat = diffs.ravel()
    best = int(np.argmin(flat))
    if flat[best] > threshold:
        return start, None
    rect_idx, moving_idx, target_idx = np.unravel_index(best, diffs.shape)
    guide = float(targets[rect_idx, target_idx])
    return guide - float(shifts[moving_idx]), guide


def apply_snapping(
    size: Sequence[float],
    proposed: Point,
    candidates: Sequence[Rect],
    threshold: float = DEFAULT_SNAP_THRESHOLD,
    enabled: bool = True,
) -> SnapResult:
    """Snap a box of ``size`` proposed at top-left ``proposed`` to ``candidates``.

    Each axis is resolved on its own: the box's leading edge, trailing edge and
    center are compared with every candidate's leading edge, trailing edge and
    center, and the closest pair within ``threshold`` wins. Ties keep the first
    pair in scan order (candidates as supplied, then leading/trailing/center).
    """

    x, y = proposed
    if not enabled or not candidates:
        return SnapResult(x, y)

    xs = np.array([rect.lines("x") for rect in candidates], dtype=float)
    ys = np.array([rect.lines("y") for rect in candidates], dtype=float)
    snapped_x, vertical = _snap_axis(float(x), float(size[0]), xs, threshold)
    snapped_y, horizontal = _snap_axis(float(y), float(size[1]), ys, threshold)
    return SnapResult(
        x if vertical is None else snapped_x,
        y if horizontal is None else snapped_y,
        vertical,
        horizontal,
    )


def snap_node(
    tree: ElementTree,
    node_id: str,
    proposed: Point,
    exclude_ids: Collection[str] = (),
    threshold: Optional[float] = None,
    enabled: Optional[bool] = None,
    bounds: Optional[Sequence[ElementBounds]] = None,
) -> SnapResult:
    """Snap ``node_id`` moved to absolute ``proposed`` against its sibling scope."""

    cfg = get_builder_config()
    threshold = cfg.snap_threshold if threshold is None else threshold
    enabled = cfg.snap_enabled if enabled is None else enabled
    if not enabled:
        return SnapResult(proposed[0], proposed[1])
    if bounds is None:
        bounds = compute_all_bounds(tree)
    node = tree.get(node_id)
    candidates = snap_candidates(tree, bounds, node_id, exclude_ids)
    return apply_snapping(node.size, proposed, candidates, threshold, enabled)
