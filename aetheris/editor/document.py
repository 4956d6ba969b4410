"""
Component tree backing the visual editor.

A layout is a list of top-level ``ComponentNode`` objects; by convention it
holds a single ``Container`` with the reserved id ``root``. Every operation
here is copy-on-write: it returns a new list and never touches the nodes it
was given, so snapshots kept by the history stay independent.
"""

from __future__ import annotations

import copy
import secrets
import string
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional

ROOT_ID = "root"

COMPONENT_TYPES = ("Container", "Heading", "Text", "Button", "Image", "Columns", "Video")
CONTAINER_TYPES = {"Container", "Columns"}

DEFAULT_PROPS: Dict[str, Dict[str, Any]] = {
    "Heading": {"text": "Novo Título", "level": 2, "className": "text-2xl font-bold my-4"},
    "Text": {"text": "Novo parágrafo de texto.", "className": "text-base my-2"},
    "Button": {"text": "Clique Aqui", "className": "px-4 py-2 bg-blue-600 text-white rounded"},
    "Image": {"src": "https://picsum.photos/400/300", "alt": "Placeholder", "className": "w-full rounded"},
    "Container": {"className": "p-4 border border-dashed border-gray-300 rounded my-4"},
}

_ID_ALPHABET = string.ascii_lowercase + string.digits


@dataclass
class ComponentNode:
    """A single typed node of the editor tree."""

    id: str
    type: str
    props: Dict[str, Any] = field(default_factory=dict)
    children: List["ComponentNode"] = field(default_factory=list)

    @property
    def is_container(self) -> bool:
        return self.type in CONTAINER_TYPES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "props": dict(self.props),
            "children": [child.to_dict() for child in self.children],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComponentNode":
        return cls(
            id=str(data["id"]),
            type=str(data["type"]),
            props=dict(data.get("props") or {}),
            children=[cls.from_dict(child) for child in data.get("children") or []],
        )


def new_component_id(taken: Optional[set] = None) -> str:
    while True:
        candidate = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
        if not taken or candidate not in taken:
            return candidate


def default_props(component_type: str) -> Dict[str, Any]:
    return dict(DEFAULT_PROPS.get(component_type, {}))


def create_component(component_type: str, taken: Optional[set] = None) -> ComponentNode:
    return ComponentNode(id=new_component_id(taken), type=component_type, props=default_props(component_type))


def initial_layout() -> List[ComponentNode]:
    return [
        ComponentNode(
            id=ROOT_ID,
            type="Container",
            props={"className": "min-h-screen bg-white p-8"},
            children=[
                ComponentNode(
                    id="header-1",
                    type="Heading",
                    props={"text": "Bem-vindo ao seu novo site", "level": 1, "className": "text-4xl font-bold mb-4"},
                ),
                ComponentNode(
                    id="text-1",
                    type="Text",
                    props={"text": "Arraste componentes para começar a editar.", "className": "text-gray-600"},
                ),
            ],
        )
    ]


def clone_layout(nodes: List[ComponentNode]) -> List[ComponentNode]:
    return copy.deepcopy(nodes)


def layout_to_data(nodes: List[ComponentNode]) -> List[Dict[str, Any]]:
    return [node.to_dict() for node in nodes]


def layout_from_data(data: Any) -> List[ComponentNode]:
    """Build a layout from decoded JSON; anything but a list yields an empty layout."""
    if not isinstance(data, list):
        return []
    return [ComponentNode.from_dict(item) for item in data if isinstance(item, dict)]


def iter_nodes(nodes: List[ComponentNode]) -> Iterator[ComponentNode]:
    """Depth-first, pre-order walk in stored child order."""
    for node in nodes:
        yield node
        yield from iter_nodes(node.children)


def collect_ids(nodes: List[ComponentNode]) -> List[str]:
    return [node.id for node in iter_nodes(nodes)]


def find_component(nodes: List[ComponentNode], node_id: Optional[str]) -> Optional[ComponentNode]:
    if node_id is None:
        return None
    for node in iter_nodes(nodes):
        if node.id == node_id:
            return node
    return None


def contains_id(node: ComponentNode, node_id: str) -> bool:
    return find_component([node], node_id) is not None


def _map_nodes(nodes: List[ComponentNode], fn: Callable[[ComponentNode], Optional[ComponentNode]]) -> List[ComponentNode]:
    # fn returns a replacement for a matched node, or None to keep recursing
    result = []
    for node in nodes:
        replaced = fn(node)
        if replaced is not None:
            result.append(replaced)
        else:
            result.append(
                ComponentNode(
                    id=node.id,
                    type=node.type,
                    props=dict(node.props),
                    children=_map_nodes(node.children, fn),
                )
            )
    return result


def append_child(nodes: List[ComponentNode], parent_id: str, child: ComponentNode) -> List[ComponentNode]:
    """Return a new layout with ``child`` appended to ``parent_id``.

    Unknown parents, and parents whose type cannot hold children, leave the
    layout unchanged.
    """

    def attach(node: ComponentNode) -> Optional[ComponentNode]:
        if node.id != parent_id or not node.is_container:
            return None
        children = clone_layout(node.children)
        children.append(copy.deepcopy(child))
        return ComponentNode(id=node.id, type=node.type, props=dict(node.props), children=children)

    return _map_nodes(nodes, attach)


def merge_props(nodes: List[ComponentNode], node_id: str, partial: Dict[str, Any]) -> List[ComponentNode]:
    def merge(node: ComponentNode) -> Optional[ComponentNode]:
        if node.id != node_id:
            return None
        return ComponentNode(
            id=node.id,
            type=node.type,
            props={**node.props, **partial},
            children=clone_layout(node.children),
        )

    return _map_nodes(nodes, merge)


def remove_node(nodes: List[ComponentNode], node_id: str) -> List[ComponentNode]:
    """Drop ``node_id`` and its subtree wherever it occurs. The root is never removed."""
    if node_id == ROOT_ID:
        return clone_layout(nodes)
    return [
        ComponentNode(
            id=node.id,
            type=node.type,
            props=dict(node.props),
            children=remove_node(node.children, node_id),
        )
        for node in nodes
        if node.id != node_id
    ]
