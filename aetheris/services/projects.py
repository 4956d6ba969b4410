from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from aetheris.config import Config
from aetheris.database.connection import get_connection, transaction
from aetheris.services.activity import log_activity
from aetheris.services.errors import ConflictError, LimitExceededError, NotFoundError

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _loads(raw: Optional[str]) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Discarding undecodable JSON column: %r", raw[:80])
        return None


def _project_from_row(row: sqlite3.Row) -> Dict[str, Any]:
    record = dict(row)
    record["config"] = _loads(record.get("config"))
    record["layout"] = _loads(record.get("layout"))
    return record


def list_projects(user_id: int, limit: int = 10, offset: int = 0) -> Dict[str, Any]:
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        "SELECT * FROM projects WHERE user_id = ? ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
        (user_id, limit, offset),
    )
    rows = cursor.fetchall()
    cursor.execute("SELECT COUNT(*) FROM projects WHERE user_id = ?", (user_id,))
    total = cursor.fetchone()[0]
    conn.close()
    return {
        "projects": [_project_from_row(row) for row in rows],
        "total": int(total),
        "limit": limit,
        "offset": offset,
    }


def create_project(user_id: int, name: str, prompt: str, config: Dict[str, Any]) -> int:
    """Charge one credit and insert the project, enforcing the plan limits."""
    with transaction() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM users WHERE id = ?", (user_id,))
        user = cursor.fetchone()
        if not user:
            raise NotFoundError("User not found")
        cursor.execute("SELECT COUNT(*) FROM projects WHERE user_id = ?", (user_id,))
        project_count = cursor.fetchone()[0]
        plan = Config.PLANS.get(user["plan"], Config.PLANS["free"])
        if project_count >= plan["projects"]:
            raise LimitExceededError(f"Limite de projetos atingido para o plano {user['plan']}.")
        if user["credits"] < 1:
            raise LimitExceededError("Créditos insuficientes")
        now = _now()
        cursor.execute("UPDATE users SET credits = credits - 1 WHERE id = ?", (user_id,))
        cursor.execute(
            """
            INSERT INTO projects (user_id, name, prompt, config, layout, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (user_id, name, prompt, json.dumps(config, ensure_ascii=False), json.dumps([]), now, now),
        )
        project_id = int(cursor.lastrowid)
    log_activity(user_id, "PROJECT_CREATE", f'Projeto "{name}" criado.')
    logger.info("Created project %s for user %s", project_id, user_id)
    return project_id


def get_project(project_id: int) -> Dict[str, Any]:
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("SELECT * FROM projects WHERE id = ?", (project_id,))
    row = cursor.fetchone()
    conn.close()
    if not row:
        raise NotFoundError("Project not found")
    return _project_from_row(row)


def save_layout(project_id: int, layout: Any, config: Any = None) -> None:
    """Archive the stored (layout, config) as a version, then overwrite it.

    Both steps run in one transaction so the version log never loses a state.
    With ``config`` left as ``None`` the stored config is kept as it is.
    """
    with transaction() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT layout, config FROM projects WHERE id = ?", (project_id,))
        current = cursor.fetchone()
        if not current:
            raise NotFoundError("Project not found")
        new_config = current["config"] if config is None else json.dumps(config, ensure_ascii=False)
        now = _now()
        cursor.execute(
            "INSERT INTO project_versions (project_id, layout, config, created_at) VALUES (?, ?, ?, ?)",
            (project_id, current["layout"], current["config"], now),
        )
        cursor.execute(
            "UPDATE projects SET layout = ?, config = ?, updated_at = ? WHERE id = ?",
            (json.dumps(layout, ensure_ascii=False), new_config, now, project_id),
        )
    logger.info("Saved layout for project %s", project_id)


def list_versions(project_id: int) -> List[Dict[str, Any]]:
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        "SELECT * FROM project_versions WHERE project_id = ? ORDER BY created_at DESC, id DESC",
        (project_id,),
    )
    rows = cursor.fetchall()
    conn.close()
    return [_project_from_row(row) for row in rows]


def get_version(project_id: int, version_id: int) -> Dict[str, Any]:
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        "SELECT * FROM project_versions WHERE id = ? AND project_id = ?",
        (version_id, project_id),
    )
    row = cursor.fetchone()
    conn.close()
    if not row:
        raise NotFoundError("Version not found")
    return _project_from_row(row)


def deploy(project_id: int, subdomain: str) -> Dict[str, Any]:
    project = get_project(project_id)
    subdomain = subdomain.strip().lower()
    try:
        with transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO deployments (project_id, subdomain, created_at) VALUES (?, ?, ?)",
                (project_id, subdomain, _now()),
            )
            deployment_id = int(cursor.lastrowid)
    except sqlite3.IntegrityError as exc:
        raise ConflictError("Subdomain already taken") from exc
    url = f"https://{subdomain}.{Config.deploy_domain()}"
    log_activity(project["user_id"], "DEPLOY", f"Projeto publicado em {url}.")
    return {"success": True, "deploymentId": deployment_id, "url": url}
