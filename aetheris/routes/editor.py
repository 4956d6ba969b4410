from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from aetheris.editor.document import ROOT_ID, layout_from_data
from aetheris.editor.panel import property_fields
from aetheris.editor.placement import PALETTE, CanvasDropTarget, DragPayload
from aetheris.editor.renderer import render_canvas
from aetheris.editor.session import registry
from aetheris.services import projects as project_service
from aetheris.utils.session import resolve_user_id

router = APIRouter(prefix="/api/editor", tags=["editor"])


class OpenSessionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_id: Optional[int] = Field(default=None, alias="projectId")
    user_id: Optional[int] = Field(default=None, alias="userId")
    layout: Optional[List[Dict[str, Any]]] = None
    restore: bool = False


class AddComponentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(min_length=1)
    parent_id: str = Field(default=ROOT_ID, alias="parentId")


class SelectRequest(BaseModel):
    id: Optional[str] = None


class DropRequest(BaseModel):
    type: str
    kind: str = "COMPONENT"


class LoadLayoutRequest(BaseModel):
    layout: List[Dict[str, Any]]


def _state(session_id: str) -> dict:
    session = registry.get(session_id)
    state = session.to_dict()
    state["panel"] = property_fields(session.selected())
    return state


@router.get("/palette")
async def palette() -> list:
    return [{"type": item.type, "label": item.label, "icon": item.icon} for item in PALETTE]


@router.post("/sessions")
async def open_session(request: Request, body: OpenSessionRequest) -> dict:
    layout = layout_from_data(body.layout) if body.layout else None
    session = registry.open(
        project_id=body.project_id,
        user_id=resolve_user_id(request, body.user_id),
        layout=layout,
        restore=body.restore,
    )
    return _state(session.id)


@router.get("/sessions/{session_id}")
async def get_session(session_id: str) -> dict:
    return _state(session_id)


@router.delete("/sessions/{session_id}")
async def close_session(session_id: str) -> dict:
    registry.close(session_id)
    return {"success": True}


@router.post("/sessions/{session_id}/components")
async def add_component(session_id: str, body: AddComponentRequest) -> dict:
    session = registry.get(session_id)
    node = session.add_component(body.type, body.parent_id)
    state = _state(session_id)
    state["added"] = node.to_dict() if node else None
    return state


@router.patch("/sessions/{session_id}/components/{node_id}")
async def update_component(session_id: str, node_id: str, props: Dict[str, Any]) -> dict:
    registry.get(session_id).update_component_props(node_id, props)
    return _state(session_id)


@router.delete("/sessions/{session_id}/components/{node_id}")
async def delete_component(session_id: str, node_id: str) -> dict:
    registry.get(session_id).delete_component(node_id)
    return _state(session_id)


@router.post("/sessions/{session_id}/select")
async def select_component(session_id: str, body: SelectRequest) -> dict:
    registry.get(session_id).select_component(body.id)
    return _state(session_id)


@router.post("/sessions/{session_id}/drop")
async def drop_component(session_id: str, body: DropRequest) -> dict:
    target = CanvasDropTarget(registry.get(session_id))
    node = target.drop(DragPayload(type=body.type, kind=body.kind))
    state = _state(session_id)
    state["added"] = node.to_dict() if node else None
    return state


@router.post("/sessions/{session_id}/undo")
async def undo(session_id: str) -> dict:
    registry.get(session_id).undo()
    return _state(session_id)


@router.post("/sessions/{session_id}/redo")
async def redo(session_id: str) -> dict:
    registry.get(session_id).redo()
    return _state(session_id)


@router.post("/sessions/{session_id}/load")
async def load_layout(session_id: str, body: LoadLayoutRequest) -> dict:
    registry.get(session_id).load_layout(layout_from_data(body.layout))
    return _state(session_id)


@router.post("/sessions/{session_id}/save")
async def save_session(session_id: str) -> dict:
    registry.get(session_id).save()
    return {"success": True}


@router.post("/sessions/{session_id}/versions/{version_id}/restore")
async def restore_version(session_id: str, version_id: int) -> dict:
    session = registry.get(session_id)
    if session.project_id is None:
        return _state(session_id)
    session.restore_version(project_service.get_version(session.project_id, version_id))
    return _state(session_id)


@router.get("/sessions/{session_id}/canvas", response_class=HTMLResponse)
async def canvas(session_id: str) -> HTMLResponse:
    session = registry.get(session_id)
    return HTMLResponse(render_canvas(session.layout, session.selected_id))
