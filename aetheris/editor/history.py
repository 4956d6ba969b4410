"""Linear undo/redo log over whole-layout snapshots."""

from __future__ import annotations

from typing import List, Optional

from aetheris.editor.document import ComponentNode, clone_layout


class History:
    """Snapshots plus a cursor.

    The cursor always points inside ``[0, len - 1]``. Saving after an undo
    discards everything past the cursor; there is no redo tree.
    """

    def __init__(self, layout: List[ComponentNode]) -> None:
        self._entries: List[List[ComponentNode]] = [clone_layout(layout)]
        self._index = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def index(self) -> int:
        return self._index

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def reset(self, layout: List[ComponentNode]) -> None:
        self._entries = [clone_layout(layout)]
        self._index = 0

    def save(self, layout: List[ComponentNode]) -> None:
        del self._entries[self._index + 1 :]
        self._entries.append(clone_layout(layout))
        self._index = len(self._entries) - 1

    def undo(self) -> Optional[List[ComponentNode]]:
        if not self.can_undo:
            return None
        self._index -= 1
        return clone_layout(self._entries[self._index])

    def redo(self) -> Optional[List[ComponentNode]]:
        if not self.can_redo:
            return None
        self._index += 1
        return clone_layout(self._entries[self._index])

    def current(self) -> List[ComponentNode]:
        return clone_layout(self._entries[self._index])
