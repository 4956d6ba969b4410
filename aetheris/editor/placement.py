"""
Drag and drop placement.

Palette items hand out a ``DragPayload``; only the canvas drop target
mutates the tree. Drops always append to the root container: nested
containers are not drop targets.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from aetheris.editor.document import ROOT_ID, ComponentNode
from aetheris.editor.session import EditorSession

COMPONENT_KIND = "COMPONENT"


@dataclass(frozen=True)
class DragPayload:
    type: str
    kind: str = COMPONENT_KIND


@dataclass(frozen=True)
class PaletteItem:
    type: str
    label: str
    icon: str


PALETTE: List[PaletteItem] = [
    PaletteItem("Container", "Container", "layout"),
    PaletteItem("Heading", "Título", "type"),
    PaletteItem("Text", "Texto", "list"),
    PaletteItem("Button", "Botão", "mouse-pointer"),
    PaletteItem("Image", "Imagem", "image"),
    PaletteItem("Columns", "Colunas", "columns"),
    PaletteItem("Video", "Vídeo", "play"),
]


class DraggableItem:
    """A palette entry. Dragging only changes how it looks."""

    def __init__(self, item: PaletteItem) -> None:
        self.item = item
        self.is_dragging = False

    @property
    def opacity(self) -> float:
        return 0.5 if self.is_dragging else 1.0

    def begin_drag(self) -> DragPayload:
        self.is_dragging = True
        return DragPayload(type=self.item.type)

    def end_drag(self) -> None:
        self.is_dragging = False


class CanvasDropTarget:
    def __init__(self, session: EditorSession) -> None:
        self.session = session
        self.is_over = False

    @staticmethod
    def accepts(payload: Optional[DragPayload]) -> bool:
        return payload is not None and payload.kind == COMPONENT_KIND and bool(payload.type)

    def hover(self, payload: Optional[DragPayload]) -> None:
        self.is_over = self.accepts(payload)

    def leave(self) -> None:
        self.is_over = False

    def drop(self, payload: Optional[DragPayload]) -> Optional[ComponentNode]:
        self.is_over = False
        if not self.accepts(payload):
            return None
        return self.session.add_component(payload.type, ROOT_ID)


def palette() -> List[DraggableItem]:
    return [DraggableItem(item) for item in PALETTE]
