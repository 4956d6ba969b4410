from __future__ import annotations

from typing import Any, Dict, List, Optional

from aetheris.editor.document import ComponentNode

PADDING_OPTIONS = ["p-0", "p-2", "p-4", "p-8"]
MARGIN_OPTIONS = ["m-0", "m-2", "m-4", "m-8"]


def property_fields(node: Optional[ComponentNode]) -> Dict[str, Any]:
    """Editable fields of the selected node, as shown by the property panel."""
    if node is None:
        return {"selected": None, "fields": []}
    fields: List[Dict[str, Any]] = []
    if "text" in node.props:
        fields.append({"key": "text", "label": "Texto", "widget": "textarea", "value": node.props["text"]})
    if "src" in node.props:
        fields.append({"key": "src", "label": "URL da Imagem", "widget": "input", "value": node.props["src"]})
    fields.append(
        {"key": "className", "label": "Classes CSS", "widget": "textarea", "value": node.props.get("className", "")}
    )
    return {
        "selected": {"id": node.id, "type": node.type},
        "fields": fields,
        "layout": {"padding": PADDING_OPTIONS, "margin": MARGIN_OPTIONS},
    }
