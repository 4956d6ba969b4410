from __future__ import annotations

import asyncio
import logging
import secrets
from typing import Any, Dict, List, Optional

from aetheris.artifacts.project import ArtifactProject, seed_layout
from aetheris.config import Config
from aetheris.editor.document import (
    ROOT_ID,
    ComponentNode,
    append_child,
    collect_ids,
    contains_id,
    create_component,
    find_component,
    initial_layout,
    layout_from_data,
    layout_to_data,
    merge_props,
    remove_node,
)
from aetheris.editor.history import History
from aetheris.services import editor_state, projects
from aetheris.services.errors import NotFoundError

logger = logging.getLogger(__name__)


class EditorSession:
    """One open editor: the layout, its history and the current selection.

    Constructed when the editor opens and discarded when it closes. All
    mutations are synchronous and each one records exactly one history
    entry.
    """

    def __init__(
        self,
        layout: Optional[List[ComponentNode]] = None,
        *,
        session_id: Optional[str] = None,
        project_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> None:
        self.id = session_id or secrets.token_urlsafe(12)
        self.project_id = project_id
        self.user_id = user_id
        self.saved_layout: Optional[List[Dict[str, Any]]] = None
        self.layout: List[ComponentNode] = layout if layout is not None else initial_layout()
        self.history = History(self.layout)
        self.selected_id: Optional[str] = None
        self.autosaver: Optional["Autosaver"] = None

    def save_to_history(self) -> None:
        self.history.save(self.layout)

    def add_component(self, component_type: str, parent_id: str = ROOT_ID) -> Optional[ComponentNode]:
        node = create_component(component_type, taken=set(collect_ids(self.layout)))
        updated = append_child(self.layout, parent_id, node)
        self.layout = updated
        self.save_to_history()
        return find_component(self.layout, node.id)

    def update_component_props(self, node_id: str, props: Dict[str, Any]) -> None:
        self.layout = merge_props(self.layout, node_id, props)
        self.save_to_history()

    def delete_component(self, node_id: str) -> None:
        if node_id == ROOT_ID:
            return
        if self.selected_id is not None:
            doomed = find_component(self.layout, node_id)
            if doomed is not None and contains_id(doomed, self.selected_id):
                self.selected_id = None
        self.layout = remove_node(self.layout, node_id)
        self.save_to_history()

    def select_component(self, node_id: Optional[str]) -> None:
        self.selected_id = node_id

    def load_layout(self, layout: List[ComponentNode]) -> None:
        self.layout = layout
        self.history.reset(layout)
        self.selected_id = None

    def undo(self) -> None:
        snapshot = self.history.undo()
        if snapshot is not None:
            self.layout = snapshot

    def redo(self) -> None:
        snapshot = self.history.redo()
        if snapshot is not None:
            self.layout = snapshot

    def selected(self) -> Optional[ComponentNode]:
        return find_component(self.layout, self.selected_id)

    def restore_version(self, version: Dict[str, Any]) -> None:
        """Load an archived version into the editor. Nothing is written until the next save."""
        self.load_layout(layout_from_data(version.get("layout")))

    @property
    def has_unsaved_changes(self) -> bool:
        return layout_to_data(self.layout) != self.saved_layout

    def save(self) -> None:
        """Write the layout to the project; its stored files and features are left alone."""
        if self.project_id is None:
            raise NotFoundError("Editor session is not attached to a project.")
        data = layout_to_data(self.layout)
        projects.save_layout(self.project_id, data)
        self.saved_layout = data

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "projectId": self.project_id,
            "layout": layout_to_data(self.layout),
            "selectedId": self.selected_id,
            "historyIndex": self.history.index,
            "historyLength": len(self.history),
            "canUndo": self.history.can_undo,
            "canRedo": self.history.can_redo,
        }


class Autosaver:
    """Periodically saves a session's layout on the running event loop."""

    def __init__(self, session: EditorSession, interval: float) -> None:
        self.session = session
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            if not self.session.has_unsaved_changes:
                continue
            try:
                self.session.save()
            except NotFoundError as exc:
                logger.warning("Autosave for session %s skipped: %s", self.session.id, exc)
            except Exception:
                logger.exception("Autosave for session %s failed", self.session.id)

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None


class SessionRegistry:
    """Open editor sessions keyed by id."""

    def __init__(self) -> None:
        self._sessions: Dict[str, EditorSession] = {}

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def open(
        self,
        *,
        project_id: Optional[int] = None,
        user_id: Optional[int] = None,
        layout: Optional[List[ComponentNode]] = None,
        restore: bool = False,
    ) -> EditorSession:
        project = None
        if project_id is not None:
            project = projects.get_project(project_id)
            user_id = user_id if user_id is not None else project["user_id"]
            if layout is None:
                stored = layout_from_data(project["layout"])
                layout = stored or seed_layout(ArtifactProject.from_record(project))
        if restore and user_id is not None and project_id is not None:
            state = editor_state.load_state(user_id, project_id)
            if state is not None:
                layout = layout_from_data(state["layout"]) or layout
        session = EditorSession(layout, project_id=project_id, user_id=user_id)
        if project is not None:
            session.saved_layout = project["layout"]
        self._sessions[session.id] = session
        if project_id is not None:
            self._start_autosave(session)
        logger.info("Opened editor session %s (project=%s)", session.id, project_id)
        return session

    def _start_autosave(self, session: EditorSession) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop; autosave disabled for session %s", session.id)
            return
        session.autosaver = Autosaver(session, Config.autosave_seconds())
        session.autosaver.start()

    def get(self, session_id: str) -> EditorSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError("Editor session not found.")
        return session

    def close(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise NotFoundError("Editor session not found.")
        if session.autosaver is not None:
            session.autosaver.cancel()
        if session.user_id is not None and session.project_id is not None:
            editor_state.store_state(session.user_id, session.project_id, layout_to_data(session.layout))
        logger.info("Closed editor session %s", session_id)

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)


registry = SessionRegistry()
