from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, List

from aetheris.database.connection import get_connection

logger = logging.getLogger(__name__)


def log_activity(user_id: int, action: str, details: str) -> None:
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO activity_logs (user_id, action, details, created_at)
        VALUES (?, ?, ?, ?)
        """,
        (user_id, action, details, datetime.now(timezone.utc).isoformat()),
    )
    conn.commit()
    conn.close()
    logger.debug("Activity %s for user %s", action, user_id)


def list_activity(user_id: int, limit: int = 50) -> List[Dict[str, str]]:
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute(
        "SELECT * FROM activity_logs WHERE user_id = ? ORDER BY created_at DESC, id DESC LIMIT ?",
        (user_id, limit),
    )
    rows = cursor.fetchall()
    conn.close()
    return [dict(row) for row in rows]
