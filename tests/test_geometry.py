import pytest

from uibuilder.enums import UIAnchor
from uibuilder.geometry import (
    Rect,
    absolute_position,
    absolute_rect,
    anchor_offset,
    anchor_start,
    compute_all_bounds,
    local_from_absolute,
)
from uibuilder.tree import ElementTree

# (anchor, fraction of the box/container that must coincide)
ANCHOR_POINTS = [
    (UIAnchor.TopLeft, (0.0, 0.0)),
    (UIAnchor.TopCenter, (0.5, 0.0)),
    (UIAnchor.TopRight, (1.0, 0.0)),
    (UIAnchor.CenterLeft, (0.0, 0.5)),
    (UIAnchor.Center, (0.5, 0.5)),
    (UIAnchor.CenterRight, (1.0, 0.5)),
    (UIAnchor.BottomLeft, (0.0, 1.0)),
    (UIAnchor.BottomCenter, (0.5, 1.0)),
    (UIAnchor.BottomRight, (1.0, 1.0)),
]


@pytest.mark.parametrize('anchor, fractions', ANCHOR_POINTS)
def test_anchor_identity(anchor, fractions):
    width, height = 200, 100
    size = (40, 20)
    sx, sy = anchor_start(anchor, width, height)
    ox, oy = anchor_offset(anchor, size)
    left, top = sx + ox, sy + oy
    fx, fy = fractions

    assert left + fx * size[0] == pytest.approx(fx * width)
    assert top + fy * size[1] == pytest.approx(fy * height)


def test_anchor_examples():
    assert anchor_start(UIAnchor.TopLeft, 200, 100) == (0, 0)
    assert anchor_start(UIAnchor.BottomRight, 200, 100) == (200, 100)
    assert anchor_start(UIAnchor.Center, 200, 100) == (100, 50)
    assert anchor_offset(UIAnchor.BottomRight, (40, 20)) == (-40, -20)
    assert anchor_offset(UIAnchor.CenterLeft, (40, 20)) == (0, -10)


def test_zero_size_container_is_a_valid_origin():
    assert anchor_start(UIAnchor.Center, 0, 0) == (0, 0)
    assert anchor_offset(UIAnchor.Center, (0, 0)) == (0, 0)


def test_invalid_anchor_rejected():
    with pytest.raises(ValueError):
        anchor_start(42, 10, 10)


def _panel_tree():
    tree = ElementTree()
    panel = tree.add('Container', 'panel')
    tree.update(panel.id, anchor=UIAnchor.Center, size=[200, 100])
    return tree, panel


def test_root_positions_use_canvas():
    tree, panel = _panel_tree()

    assert absolute_position(panel, tree) == (860, 490)

    corner = tree.add('Container', 'corner')
    tree.update(corner.id, anchor=UIAnchor.BottomRight, size=[20, 10], position=[-5, -5])
    assert absolute_position(corner, tree) == (1920 - 20 - 5, 1080 - 10 - 5)


def test_child_top_left_matches_parent_corner():
    tree, panel = _panel_tree()
    child = tree.add('Text', 'label', parent_id=panel.id)

    assert absolute_position(child, tree) == absolute_position(panel, tree)


def test_nested_anchor_and_offset():
    tree, panel = _panel_tree()
    child = tree.add('Button', 'ok', parent_id=panel.id)
    tree.update(child.id, anchor=UIAnchor.BottomCenter, size=[50, 20], position=[10, -4])

    x, y = absolute_position(child, tree)

    assert (x, y) == (860 + 100 - 25 + 10, 490 + 100 - 20 - 4)


def test_compute_all_bounds_matches_single_queries():
    tree, panel = _panel_tree()
    child = tree.add('Container', 'inner', parent_id=panel.id)
    tree.update(child.id, anchor=UIAnchor.Center, size=[60, 40])
    leaf = tree.add('Image', 'icon', parent_id=child.id)
    tree.update(leaf.id, anchor=UIAnchor.TopRight, size=[10, 10], position=[-2, 3])
    other = tree.add('Text', 'title')

    bounds = compute_all_bounds(tree)

    assert [entry.id for entry in bounds] == [panel.id, child.id, leaf.id, other.id]
    assert [entry.parent_id for entry in bounds] == [None, panel.id, child.id, None]
    for entry in bounds:
        node = tree.get(entry.id)
        assert (entry.rect.left, entry.rect.top) == absolute_position(node, tree)
        assert (entry.rect.width, entry.rect.height) == tuple(node.size)


def test_rect_derived_edges():
    rect = Rect(10, 20, 100, 50)

    assert rect.right == 110
    assert rect.bottom == 70
    assert rect.center_x == 60
    assert rect.center_y == 45
    assert rect.lines('x') == (10, 110, 60)
    assert rect.lines('y') == (20, 70, 45)


@pytest.mark.parametrize('anchor', [anchor for anchor, _ in ANCHOR_POINTS])
def test_local_from_absolute_inverts_absolute_position(anchor):
    tree, panel = _panel_tree()
    child = tree.add('Container', 'child', parent_id=panel.id)
    tree.update(child.id, anchor=anchor, size=[30, 16], position=[7.5, -3])

    ax, ay = absolute_position(child, tree)

    assert local_from_absolute(ax, ay, child, tree) == pytest.approx((7.5, -3))


def test_local_from_absolute_for_drag_target():
    tree, panel = _panel_tree()

    local = local_from_absolute(900, 500, panel, tree)
    tree.update(panel.id, position=list(local))

    assert absolute_position(panel, tree) == pytest.approx((900, 500))


def test_absolute_rect_for_nested_node():
    tree, panel = _panel_tree()
    child = tree.add('Container', 'inner', parent_id=panel.id)
    tree.update(child.id, anchor=UIAnchor.BottomRight, size=[40, 30])

    rect = absolute_rect(child, tree)

    assert rect == Rect(860 + 200 - 40, 490 + 100 - 30, 40, 30)
    assert (rect.right, rect.bottom) == (1060, 590)
