from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from pydantic import BaseModel

from aetheris.artifacts.diff import diff_stats
from aetheris.artifacts.project import ArtifactProject
from aetheris.artifacts.viewer import ArtifactViewer
from aetheris.services import projects as project_service
from aetheris.services.errors import NotFoundError

router = APIRouter(tags=["artifacts"])


class FormatRequest(BaseModel):
    path: str
    persist: bool = True


def _viewer(project_id: int, path: Optional[str] = None, version_id: Optional[int] = None) -> ArtifactViewer:
    record = project_service.get_project(project_id)
    previous = None
    if version_id is not None:
        previous = project_service.get_version(project_id, version_id)
    else:
        versions = project_service.list_versions(project_id)
        previous = versions[0] if versions else None
    viewer = ArtifactViewer(ArtifactProject.from_record(record, previous))
    viewer.select_path(path)
    return viewer


@router.get("/api/projects/{project_id}/files")
async def list_files(project_id: int, path: Optional[str] = None) -> dict:
    viewer = _viewer(project_id, path)
    return {
        "name": viewer.project.name,
        "description": viewer.project.description,
        "features": viewer.project.features,
        "files": [item.model_dump() for item in viewer.files],
        "tree": viewer.file_tree(),
        "active": {
            "index": viewer.active_index,
            "path": viewer.active_file.path,
            "language": viewer.language,
            "content": viewer.active_file.content,
        },
    }


@router.get("/preview/{project_id}", response_class=HTMLResponse)
async def preview_page(project_id: int) -> HTMLResponse:
    return HTMLResponse(_viewer(project_id).preview_html())


@router.get("/api/projects/{project_id}/preview-frame", response_class=HTMLResponse)
async def preview_frame(project_id: int, view: str = Query("desktop", pattern="^(desktop|mobile)$")) -> HTMLResponse:
    return HTMLResponse(_viewer(project_id).preview_frame(view))


@router.get("/api/projects/{project_id}/diff")
async def file_diff(
    project_id: int,
    path: Optional[str] = None,
    version_id: Optional[int] = Query(None, alias="versionId"),
    output: str = Query("json", pattern="^(json|html|unified)$"),
):
    viewer = _viewer(project_id, path, version_id)
    if output == "html":
        return HTMLResponse(viewer.diff_html())
    if output == "unified":
        return PlainTextResponse(viewer.unified_diff())
    rows = viewer.diff()
    return {"path": viewer.active_file.path, "stats": diff_stats(rows), "rows": [row.to_dict() for row in rows]}


@router.get("/api/projects/{project_id}/metrics")
async def file_metrics(project_id: int, path: Optional[str] = None) -> dict:
    return _viewer(project_id, path).metrics().to_dict()


@router.post("/api/projects/{project_id}/format")
async def format_file(project_id: int, body: FormatRequest) -> dict:
    record = project_service.get_project(project_id)
    viewer = _viewer(project_id, body.path)
    if viewer.project.file(body.path) is None:
        raise NotFoundError(f"File not found: {body.path}")
    formatted = viewer.format_active_file()
    if body.persist:
        project_service.save_layout(project_id, record["layout"] or [], viewer.project.to_config())
    return {"success": True, "path": formatted.path, "content": formatted.content}


@router.get("/api/projects/{project_id}/export", response_class=PlainTextResponse)
async def export_files(project_id: int, path: Optional[str] = None) -> PlainTextResponse:
    viewer = _viewer(project_id, path)
    text = viewer.export_active() if path else viewer.export_all()
    return PlainTextResponse(text)


@router.get("/api/projects/{project_id}/download")
async def download_project(project_id: int) -> Response:
    viewer = _viewer(project_id)
    return Response(
        content=viewer.zip_bytes(),
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{viewer.download_name()}"'},
    )
