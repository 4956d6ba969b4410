"""Tests for the editor component tree."""

import string

from aetheris.editor.document import (
    ROOT_ID,
    ComponentNode,
    append_child,
    collect_ids,
    create_component,
    default_props,
    find_component,
    initial_layout,
    layout_from_data,
    layout_to_data,
    merge_props,
    new_component_id,
    remove_node,
)


def test_initial_layout_shape():
    layout = initial_layout()
    assert len(layout) == 1
    root = layout[0]
    assert root.id == ROOT_ID
    assert root.type == "Container"
    assert [child.id for child in root.children] == ["header-1", "text-1"]
    assert root.children[0].props["level"] == 1


def test_new_component_id_format():
    allowed = set(string.ascii_lowercase + string.digits)
    for _ in range(50):
        node_id = new_component_id()
        assert len(node_id) == 9
        assert set(node_id) <= allowed


def test_new_component_id_avoids_taken():
    taken = {new_component_id() for _ in range(20)}
    assert new_component_id(taken) not in taken


def test_create_component_uses_default_props():
    button = create_component("Button")
    assert button.props == {"text": "Clique Aqui", "className": "px-4 py-2 bg-blue-600 text-white rounded"}
    assert button.children == []


def test_default_props_are_copies():
    props = default_props("Heading")
    props["text"] = "changed"
    assert default_props("Heading")["text"] == "Novo Título"


def test_unknown_and_bare_types_have_empty_props():
    assert default_props("Columns") == {}
    assert default_props("Video") == {}
    assert default_props("Marquee") == {}


def test_append_child_is_copy_on_write():
    layout = initial_layout()
    child = create_component("Text")
    updated = append_child(layout, ROOT_ID, child)
    assert len(layout[0].children) == 2
    assert len(updated[0].children) == 3
    assert updated[0].children[-1].id == child.id
    assert updated[0] is not layout[0]


def test_append_child_to_missing_parent_is_noop():
    layout = initial_layout()
    updated = append_child(layout, "nope", create_component("Text"))
    assert layout_to_data(updated) == layout_to_data(layout)


def test_append_child_to_leaf_is_noop():
    layout = initial_layout()
    updated = append_child(layout, "header-1", create_component("Text"))
    assert layout_to_data(updated) == layout_to_data(layout)
    assert find_component(updated, "header-1").children == []


def test_append_child_nested_container():
    layout = append_child(initial_layout(), ROOT_ID, ComponentNode(id="box", type="Container"))
    layout = append_child(layout, "box", ComponentNode(id="inner", type="Text"))
    assert collect_ids(layout) == ["root", "header-1", "text-1", "box", "inner"]


def test_merge_props_is_shallow_and_keeps_other_keys():
    layout = initial_layout()
    updated = merge_props(layout, "header-1", {"text": "Olá"})
    header = find_component(updated, "header-1")
    assert header.props["text"] == "Olá"
    assert header.props["level"] == 1
    assert find_component(layout, "header-1").props["text"] == "Bem-vindo ao seu novo site"


def test_remove_node_drops_subtree():
    layout = append_child(initial_layout(), ROOT_ID, ComponentNode(id="box", type="Container"))
    layout = append_child(layout, "box", ComponentNode(id="inner", type="Text"))
    updated = remove_node(layout, "box")
    assert "box" not in collect_ids(updated)
    assert "inner" not in collect_ids(updated)
    assert "box" in collect_ids(layout)


def test_remove_root_is_refused():
    layout = initial_layout()
    assert layout_to_data(remove_node(layout, ROOT_ID)) == layout_to_data(layout)


def test_layout_round_trip():
    layout = initial_layout()
    assert layout_from_data(layout_to_data(layout)) == layout


def test_layout_from_non_list_is_empty():
    assert layout_from_data(None) == []
    assert layout_from_data({"id": "root"}) == []
    assert layout_from_data("[]") == []
