from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from aetheris.artifacts.project import REQUIRED_FILES, ArtifactProject
from aetheris.config import Config
from aetheris.services.errors import GenerationError

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """Generate a complete, professional, multi-file website project based on this prompt: "{prompt}".
The output must be a valid JSON object with:
1. "name": A creative name for the project.
2. "description": A brief summary of the project.
3. "features": An array of key features implemented.
4. "files": An array of objects, each with "path" (filename) and "content" (code).
   Include at least: {required}.
   Use Tailwind CSS classes in the HTML, but also provide a custom styles.css for advanced effects.

Make it look premium, modern, and responsive."""

RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "name": {"type": "STRING"},
        "description": {"type": "STRING"},
        "features": {"type": "ARRAY", "items": {"type": "STRING"}},
        "files": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {"path": {"type": "STRING"}, "content": {"type": "STRING"}},
                "required": ["path", "content"],
            },
        },
    },
    "required": ["name", "description", "features", "files"],
}


def build_request(prompt: str) -> Dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": PROMPT_TEMPLATE.format(prompt=prompt, required=", ".join(REQUIRED_FILES))}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": RESPONSE_SCHEMA,
        },
    }


def extract_text(payload: Dict[str, Any]) -> str:
    try:
        parts = payload["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError) as exc:
        raise GenerationError("Generation response has no candidates") from exc
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict))


def parse_project(raw: str) -> ArtifactProject:
    """Validate the collaborator's JSON text as a complete website project."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise GenerationError("Generation response is not valid JSON") from exc
    if not isinstance(data, dict):
        raise GenerationError("Generation response is not a JSON object")
    for key in ("name", "description", "features", "files"):
        if key not in data:
            raise GenerationError(f"Generation response is missing '{key}'")
    try:
        project = ArtifactProject.model_validate(data)
    except ValidationError as exc:
        raise GenerationError(f"Generation response has an invalid shape: {exc.error_count()} error(s)") from exc
    missing = project.missing_required_files()
    if missing:
        raise GenerationError(f"Generation response is missing files: {', '.join(missing)}")
    return project


async def generate_website(prompt: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> ArtifactProject:
    api_key = Config.gemini_api_key()
    if not api_key and transport is None:
        raise GenerationError("GEMINI_API_KEY is not configured")
    try:
        async with httpx.AsyncClient(timeout=Config.GENERATION_TIMEOUT, transport=transport) as client:
            response = await client.post(
                Config.gemini_url(),
                headers={"x-goog-api-key": api_key},
                json=build_request(prompt),
            )
    except httpx.HTTPError as exc:
        logger.warning("Generation request failed: %s", exc)
        raise GenerationError(f"Generation request failed: {exc}") from exc
    if response.status_code >= 400:
        logger.warning("Generation API error %s: %s", response.status_code, response.text[:200])
        raise GenerationError(f"Generation API returned {response.status_code}")
    try:
        payload = response.json()
    except json.JSONDecodeError as exc:
        raise GenerationError("Generation API returned a non-JSON body") from exc
    project = parse_project(extract_text(payload))
    logger.info("Generated project %r with %d files", project.name, len(project.files))
    return project
