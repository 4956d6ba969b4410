from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from aetheris.database.connection import get_connection


def store_state(user_id: int, project_id: int, layout: Any) -> None:
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO editor_state (user_id, project_id, layout, updated_at)
        VALUES (?, ?, ?, ?)
        ON CONFLICT(user_id, project_id) DO UPDATE SET layout = excluded.layout, updated_at = excluded.updated_at
        """,
        (user_id, project_id, json.dumps(layout, ensure_ascii=False), datetime.now(timezone.utc).isoformat()),
    )
    conn.commit()
    conn.close()


def load_state(user_id: int, project_id: int) -> Optional[Dict[str, Any]]:
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        "SELECT * FROM editor_state WHERE user_id = ? AND project_id = ?",
        (user_id, project_id),
    )
    row = cursor.fetchone()
    conn.close()
    if not row:
        return None
    record = dict(row)
    record["layout"] = json.loads(record["layout"])
    return record
