from enum import IntEnum

import pytest

from uibuilder.enums import UI_ANCHOR, UI_BG_FILL, UI_IMAGE_TYPE, EnumTable, UIAnchor, enum_table
from uibuilder.model import (
    DEFAULT_UI_PARAMS,
    VARIANT_FIELDS,
    ElementType,
    Node,
    create_node,
)


def test_anchor_table_is_alphabetical():
    assert list(UI_ANCHOR) == [
        'BottomCenter',
        'BottomLeft',
        'BottomRight',
        'Center',
        'CenterLeft',
        'CenterRight',
        'TopCenter',
        'TopLeft',
        'TopRight',
    ]
    assert UI_ANCHOR.ordinal('TopLeft') == int(UIAnchor.TopLeft) == 7
    assert UI_BG_FILL.ordinal('Solid') == 8
    assert UI_IMAGE_TYPE.member_name(2) == 'None'


def test_enum_table_lookups():
    assert UI_ANCHOR.member_name(3) == 'Center'
    assert UI_ANCHOR.member_name(9) is None
    assert UI_ANCHOR.member_name(-1) is None
    assert UI_ANCHOR.member_name(True) is None
    assert UI_ANCHOR.ordinal('Middle') is None
    assert 8 in UI_ANCHOR
    assert 9 not in UI_ANCHOR
    assert enum_table('UIBgFill') is UI_BG_FILL
    assert enum_table('UIColor') is None


def test_from_enum_requires_contiguous_ordinals():
    class Gappy(IntEnum):
        A = 0
        B = 2

    with pytest.raises(ValueError):
        EnumTable.from_enum(Gappy)


@pytest.mark.parametrize('raw, expected', [
    ('Text', ElementType.TEXT),
    ('button', ElementType.BUTTON),
    (ElementType.IMAGE, ElementType.IMAGE),
])
def test_element_type_coerce(raw, expected):
    assert ElementType.coerce(raw) is expected


def test_element_type_coerce_rejects_unknown():
    with pytest.raises(ValueError):
        ElementType.coerce('Slider')


def test_create_node_seeds_defaults():
    node = create_node('Text', node_id='element_9')

    assert node.name == 'Text_element_9'
    assert node.type is ElementType.TEXT
    assert node.size == DEFAULT_UI_PARAMS['size']
    assert node.anchor == UIAnchor.TopLeft
    assert node.text_anchor == UIAnchor.Center
    assert node.children == []

    node.size[0] = 999
    assert DEFAULT_UI_PARAMS['size'] == [100, 50]


def test_create_node_blank_name_uses_default():
    assert create_node('Button', '   ', node_id='b1').name == 'Button_b1'
    assert create_node('Button', 'Play', node_id='b1').name == 'Play'


def test_to_params_uses_wire_keys():
    root = create_node('Container', 'root', node_id='element_1')
    root.children.append(create_node('Image', 'icon', node_id='element_2'))
    root.advanced_metadata = {'note': 'kept'}

    params = root.to_params()

    assert 'id' not in params
    assert params['type'] == 'Container'
    assert params['bgColor'] == [0.2, 0.2, 0.2]
    assert params['buttonColorBase'] == [0.3, 0.3, 0.3]
    assert params['advancedMetadata'] == {'note': 'kept'}
    assert params['children'][0]['name'] == 'icon'
    assert params['children'][0]['children'] == []
    assert 'advancedMetadata' not in params['children'][0]


def test_walk_is_preorder():
    root = Node(id='r', name='r')
    a = Node(id='a', name='a')
    b = Node(id='b', name='b')
    a.children.append(Node(id='a1', name='a1'))
    root.children.extend([a, b])

    assert [node.id for node in root.walk()] == ['r', 'a', 'a1', 'b']


def test_variant_fields_cover_button_states():
    assert VARIANT_FIELDS[ElementType.CONTAINER] == ()
    assert VARIANT_FIELDS[ElementType.BUTTON][0] == 'button_enabled'
    assert 'button_alpha_focused' in VARIANT_FIELDS[ElementType.BUTTON]
    assert len(VARIANT_FIELDS[ElementType.BUTTON]) == 11
