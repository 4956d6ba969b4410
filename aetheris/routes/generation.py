from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel, ConfigDict, Field

from aetheris.artifacts.project import ArtifactProject
from aetheris.services import generation
from aetheris.services import projects as project_service
from aetheris.utils.session import resolve_user_id

router = APIRouter(prefix="/api", tags=["generation"])
logger = logging.getLogger(__name__)


class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(min_length=1)
    user_id: Optional[int] = Field(default=None, alias="userId")
    previous_project_id: Optional[int] = Field(default=None, alias="previousProjectId")


@router.post("/generate")
async def generate(request: Request, body: GenerateRequest) -> dict:
    """Generate a site; the project row is only written after a valid response."""
    artifact = await generation.generate_website(body.prompt)
    if body.previous_project_id is not None:
        previous = project_service.get_project(body.previous_project_id)
        artifact.previous_files = ArtifactProject.from_record(previous).files
    user_id = resolve_user_id(request, body.user_id)
    project_id = None
    if user_id is not None:
        project_id = project_service.create_project(user_id, artifact.name, body.prompt, artifact.to_config())
        artifact.id = project_id
        logger.info("Stored generated project %s for user %s", project_id, user_id)
    return {
        "success": True,
        "projectId": project_id,
        "project": artifact.model_dump(by_alias=True, exclude_none=True),
    }
