from aetheris.editor.document import ROOT_ID, ComponentNode, initial_layout
from aetheris.editor.panel import property_fields
from aetheris.editor.renderer import (
    EMPTY_CONTAINER_LABEL,
    SELECTED_CLASSES,
    render_canvas,
    render_node,
)


def test_canvas_renders_initial_layout():
    html = render_canvas(initial_layout())
    assert 'data-drop-target="canvas"' in html
    assert 'data-node-id="root"' in html
    assert "<h1" in html and "Bem-vindo ao seu novo site</h1>" in html
    assert "<p" in html and "Arraste componentes para começar a editar.</p>" in html
    assert SELECTED_CLASSES not in html


def test_selected_node_is_outlined_and_labelled():
    html = render_canvas(initial_layout(), selected_id="text-1")
    assert SELECTED_CLASSES in html
    assert 'data-selected="true"' in html
    assert '<div class="selection-label">Text</div>' in html
    assert html.count("data-selected") == 1


def test_empty_container_placeholder():
    html = render_node(ComponentNode(id=ROOT_ID, type="Container"))
    assert EMPTY_CONTAINER_LABEL in html


def test_heading_level_is_clamped():
    assert render_node(ComponentNode(id="h", type="Heading", props={"text": "x", "level": 9})).startswith("<h6")
    assert render_node(ComponentNode(id="h", type="Heading", props={"text": "x", "level": "bad"})).startswith("<h1")


def test_text_is_escaped():
    html = render_node(ComponentNode(id="t", type="Text", props={"text": "<script>alert(1)</script>"}))
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_button_and_image():
    button = render_node(ComponentNode(id="b", type="Button", props={"text": "Go", "className": "btn"}))
    assert button.startswith('<button type="button"')
    assert 'class="btn relative group cursor-pointer transition-all"' in button
    image = render_node(ComponentNode(id="i", type="Image", props={"src": "a.png", "alt": "A"}))
    assert '<img src="a.png" alt="A"' in image


def test_types_without_renderer_produce_nothing():
    assert render_node(ComponentNode(id="c", type="Columns")) == ""
    assert render_node(ComponentNode(id="v", type="Video")) == ""
    assert render_node(ComponentNode(id="m", type="Marquee")) == ""


def test_hover_highlight():
    assert "bg-cyan-neon/5" in render_canvas(initial_layout(), is_over=True)
    assert "bg-cyan-neon/5" not in render_canvas(initial_layout())


def test_property_fields_for_selection():
    empty = property_fields(None)
    assert empty["selected"] is None and empty["fields"] == []

    node = ComponentNode(id="i", type="Image", props={"src": "a.png", "className": "w-full"})
    panel = property_fields(node)
    assert panel["selected"] == {"id": "i", "type": "Image"}
    assert [field["key"] for field in panel["fields"]] == ["src", "className"]
    assert "p-4" in panel["layout"]["padding"]
