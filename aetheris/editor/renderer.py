"""
HTML projection of the editor tree.

Each component type has one render function; types without one (including
``Columns`` and ``Video``) render nothing. The selected node gets an outline
and a floating label with its type. Every element carries
``data-node-id`` so the editor page can route clicks back to the session.
"""

from __future__ import annotations

import html
from typing import Callable, Dict, List, Optional

from aetheris.editor.document import ComponentNode

INTERACTION_CLASSES = "relative group cursor-pointer transition-all"
SELECTED_CLASSES = "outline outline-2 outline-cyan-neon outline-offset-[-2px]"
EMPTY_CONTAINER_LABEL = "Container Vazio"


def _classes(node: ComponentNode, selected_id: Optional[str]) -> str:
    parts = [str(node.props.get("className") or ""), INTERACTION_CLASSES]
    if node.id == selected_id:
        parts.append(SELECTED_CLASSES)
    return " ".join(part for part in parts if part)


def _attrs(node: ComponentNode, selected_id: Optional[str]) -> str:
    selected = ' data-selected="true"' if node.id == selected_id else ""
    return (
        f' data-node-id="{html.escape(node.id, quote=True)}"'
        f' data-node-type="{html.escape(node.type, quote=True)}"'
        f' class="{html.escape(_classes(node, selected_id), quote=True)}"{selected}'
    )


def _label(node: ComponentNode, selected_id: Optional[str]) -> str:
    if node.id != selected_id:
        return ""
    return f'<div class="selection-label">{html.escape(node.type)}</div>'


def _text(node: ComponentNode) -> str:
    value = node.props.get("text")
    return html.escape(str(value)) if value is not None else ""


def render_container(node: ComponentNode, selected_id: Optional[str]) -> str:
    if node.children:
        inner = "".join(render_node(child, selected_id) for child in node.children)
    else:
        inner = f'<div class="empty-container">{EMPTY_CONTAINER_LABEL}</div>'
    return f"<div{_attrs(node, selected_id)}>{_label(node, selected_id)}{inner}</div>"


def heading_level(node: ComponentNode) -> int:
    try:
        level = int(node.props.get("level") or 1)
    except (TypeError, ValueError):
        return 1
    return min(max(level, 1), 6)


def render_heading(node: ComponentNode, selected_id: Optional[str]) -> str:
    tag = f"h{heading_level(node)}"
    return f"<{tag}{_attrs(node, selected_id)}>{_label(node, selected_id)}{_text(node)}</{tag}>"


def render_text(node: ComponentNode, selected_id: Optional[str]) -> str:
    return f"<p{_attrs(node, selected_id)}>{_label(node, selected_id)}{_text(node)}</p>"


def render_button(node: ComponentNode, selected_id: Optional[str]) -> str:
    return f'<button type="button"{_attrs(node, selected_id)}>{_label(node, selected_id)}{_text(node)}</button>'


def render_image(node: ComponentNode, selected_id: Optional[str]) -> str:
    src = html.escape(str(node.props.get("src") or ""), quote=True)
    alt = html.escape(str(node.props.get("alt") or ""), quote=True)
    return (
        f"<div{_attrs(node, selected_id)}>{_label(node, selected_id)}"
        f'<img src="{src}" alt="{alt}" class="w-full h-auto" /></div>'
    )


RENDERERS: Dict[str, Callable[[ComponentNode, Optional[str]], str]] = {
    "Container": render_container,
    "Heading": render_heading,
    "Text": render_text,
    "Button": render_button,
    "Image": render_image,
}


def render_node(node: ComponentNode, selected_id: Optional[str] = None) -> str:
    renderer = RENDERERS.get(node.type)
    if renderer is None:
        return ""
    return renderer(node, selected_id)


def render_canvas(layout: List[ComponentNode], selected_id: Optional[str] = None, is_over: bool = False) -> str:
    """The whole canvas: a single drop target wrapping the rendered tree."""
    classes = "editor-canvas min-h-[800px] relative transition-colors"
    if is_over:
        classes += " bg-cyan-neon/5"
    body = "".join(render_node(node, selected_id) for node in layout)
    return f'<div class="{classes}" data-drop-target="canvas">{body}</div>'
