from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, ConfigDict, Field

from aetheris.services import activity
from aetheris.services import projects as project_service

router = APIRouter(prefix="/api", tags=["projects"])


class CreateProjectRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId")
    name: str
    prompt: str = ""
    config: Dict[str, Any] = Field(default_factory=lambda: {"files": [], "features": []})


class SaveLayoutRequest(BaseModel):
    layout: List[Any]
    config: Optional[Dict[str, Any]] = None


class DeployRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_id: int = Field(alias="projectId")
    subdomain: str = Field(min_length=1, max_length=63, pattern=r"^[A-Za-z0-9]([A-Za-z0-9-]*[A-Za-z0-9])?$")


@router.get("/projects/{user_id}")
async def list_projects(user_id: int, limit: int = Query(10, ge=1, le=100), offset: int = Query(0, ge=0)) -> dict:
    return project_service.list_projects(user_id, limit=limit, offset=offset)


@router.post("/projects")
async def create_project(body: CreateProjectRequest) -> dict:
    project_id = project_service.create_project(body.user_id, body.name, body.prompt, body.config)
    return {"success": True, "projectId": project_id}


@router.get("/project/{project_id}")
async def get_project(project_id: int) -> dict:
    return project_service.get_project(project_id)


@router.post("/projects/{project_id}/layout")
async def save_layout(project_id: int, body: SaveLayoutRequest) -> dict:
    project_service.save_layout(project_id, body.layout, body.config)
    return {"success": True}


@router.get("/projects/{project_id}/versions")
async def list_versions(project_id: int) -> list:
    return project_service.list_versions(project_id)


@router.post("/deploy")
async def deploy(body: DeployRequest) -> dict:
    return project_service.deploy(body.project_id, body.subdomain)


@router.get("/activity/{user_id}")
async def list_activity(user_id: int) -> list:
    return activity.list_activity(user_id)
