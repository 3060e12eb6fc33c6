import pytest

from uibuilder.enums import UIAnchor
from uibuilder.model import COMMON_FIELDS, VARIANT_FIELDS
from uibuilder.parser import parse_ui_source
from uibuilder.printer import build_export_artifacts, serialize_call, serialize_snippets
from uibuilder.tree import ElementTree


def _build_tree():
    tree = ElementTree()
    panel = tree.add('Container', 'Main Panel')
    tree.update(panel.id, anchor=UIAnchor.Center, size=[640, 360], bg_alpha=0.85, padding=4)
    title = tree.add('Text', 'title', parent_id=panel.id)
    tree.update(title.id, text_label='Score: "0"', text_size=28, position=[0, 12.5])
    icon = tree.add('Image', 'icon', parent_id=panel.id)
    tree.update(icon.id, image_type=5, image_color=[0.1, 0.9, 0.25])
    button = tree.add('Button', 'start', parent_id=panel.id)
    tree.update(button.id, button_enabled=True, button_color_hover=[0.75, 0.5, 0])
    tree.add('Container', 'hud')
    return tree


def _compared_fields(node):
    names = COMMON_FIELDS + tuple(n for n in VARIANT_FIELDS[node.type] if n != 'button_enabled')
    return {name: getattr(node, name) for name in names}


def _flatten(roots):
    return [node for root in roots for node in root.walk()]


def test_per_node_snippets_round_trip():
    tree = _build_tree()
    roots = tree.snapshot()

    source = '\n'.join(snippet.code for snippet in serialize_snippets(roots))
    parsed = parse_ui_source(source)

    assert len(parsed) == 2
    for original, restored in zip(_flatten(roots), _flatten(parsed)):
        assert _compared_fields(restored) == _compared_fields(original)
    buttons = [node for node in _flatten(parsed) if node.type.value == 'Button']
    assert buttons[0].button_enabled is True


def test_combined_call_round_trip():
    tree = _build_tree()
    roots = tree.snapshot()

    parsed = parse_ui_source(serialize_call(roots))

    assert [n.name for n in _flatten(parsed)] == [n.name for n in _flatten(roots)]
    for original, restored in zip(_flatten(roots), _flatten(parsed)):
        assert _compared_fields(restored) == _compared_fields(original)
        assert restored.button_enabled == original.button_enabled


def test_export_then_import_into_store():
    tree = _build_tree()
    artifacts = build_export_artifacts(tree.snapshot(), timestamp='now')

    target = ElementTree()
    opaque = target.import_source(artifacts.typescript_code)
    assert opaque.success
    assert [n.text_label for n, _ in target.walk() if n.name == 'title'] == ['mod.stringkeys.title']

    result = target.import_source(artifacts.typescript_code, strings=artifacts.strings)
    assert result.success
    assert result.imported_count == 2
    assert [n.text_label for n, _ in target.walk() if n.name == 'title'] == ['Score: "0"']
    assert len(target) == len(tree)


@pytest.mark.parametrize('name', ['Title-1', 'hud.score'])
def test_export_round_trips_text_with_punctuated_name(name):
    tree = ElementTree()
    text = tree.add('Text', name)
    tree.update(text.id, text_label='Hello')
    artifacts = build_export_artifacts(tree.snapshot(), timestamp='now')

    parsed = parse_ui_source(artifacts.typescript_code)
    snippets = parse_ui_source(artifacts.snippets[0].code)

    assert artifacts.strings == {name: 'Hello'}
    assert [(n.name, n.text_label) for n in parsed] == [(name, 'Hello')]
    assert [(n.name, n.text_label) for n in snippets] == [(name, 'Hello')]
