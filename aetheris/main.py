from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from aetheris.config import Config
from aetheris.database.connection import get_connection, init_db
from aetheris.editor.session import registry
from aetheris.routes import artifacts, auth, editor, editor_page, generation, projects
from aetheris.services.errors import (
    ConflictError,
    FormattingError,
    GenerationError,
    LimitExceededError,
    NotFoundError,
)

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Aetheris", description="AI website generator with a visual editor")
app.add_middleware(SessionMiddleware, secret_key=Config.session_secret())

app.include_router(auth.router)
app.include_router(projects.router)
app.include_router(generation.router)
app.include_router(artifacts.router)
app.include_router(editor.router)
app.include_router(editor_page.router)

ERROR_STATUS = (
    (NotFoundError, 404),
    (LimitExceededError, 403),
    (ConflictError, 400),
    (FormattingError, 422),
    (GenerationError, 502),
)


def _error_response(exc: Exception) -> JSONResponse:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return JSONResponse({"error": str(exc)}, status_code=status_code)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


async def handle_domain_error(request: Request, exc: Exception) -> JSONResponse:
    logger.info("%s %s -> %s: %s", request.method, request.url.path, type(exc).__name__, exc)
    return _error_response(exc)


for error_type, _ in ERROR_STATUS:
    app.add_exception_handler(error_type, handle_domain_error)


@app.on_event("startup")
async def startup_event() -> None:
    init_db()


@app.on_event("shutdown")
async def shutdown_event() -> None:
    registry.close_all()


@app.get("/api/health")
async def health() -> dict:
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("SELECT COUNT(*) FROM users")
    user_count = cursor.fetchone()[0]
    cursor.execute("SELECT COUNT(*) FROM projects")
    project_count = cursor.fetchone()[0]
    conn.close()
    return {
        "status": "ok",
        "message": "Aetheris AI Engine Online",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "users": user_count,
        "projects": project_count,
        "openSessions": len(registry),
    }


def run() -> None:
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")


if __name__ == "__main__":
    run()
