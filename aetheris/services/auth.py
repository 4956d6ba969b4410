from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from aetheris.config import Config
from aetheris.database.connection import get_connection
from aetheris.services.activity import log_activity
from aetheris.services.errors import ConflictError

PASSWORD_SALT = "aetheris-salt"

PUBLIC_FIELDS = ("id", "email", "name", "credits", "plan", "created_at")


def hash_password(password: str) -> str:
    return hashlib.sha256(f"{PASSWORD_SALT}:{password}".encode("utf-8")).hexdigest()


def verify_password(password: str, stored_hash: str) -> bool:
    return hash_password(password) == stored_hash


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {key: user[key] for key in PUBLIC_FIELDS if key in user}


def create_user(email: str, password: str, name: str = "") -> int:
    conn = get_connection()
    cursor = conn.cursor()
    normalized_email = email.strip().lower()
    cursor.execute("SELECT id FROM users WHERE email = ?", (normalized_email,))
    if cursor.fetchone():
        conn.close()
        raise ConflictError("Email already exists")
    cursor.execute(
        """
        INSERT INTO users (email, name, password_hash, credits, plan, created_at)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (
            normalized_email,
            name.strip(),
            hash_password(password),
            Config.PLANS["free"]["credits"],
            "free",
            datetime.now(timezone.utc).isoformat(),
        ),
    )
    conn.commit()
    user_id = int(cursor.lastrowid)
    conn.close()
    log_activity(user_id, "REGISTER", "Nova conta criada com plano Free.")
    return user_id


def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("SELECT * FROM users WHERE email = ?", (email.strip().lower(),))
    row = cursor.fetchone()
    conn.close()
    return dict(row) if row else None


def get_user_by_id(user_id: int) -> Optional[Dict[str, Any]]:
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("SELECT * FROM users WHERE id = ?", (user_id,))
    row = cursor.fetchone()
    conn.close()
    return dict(row) if row else None


def authenticate(email: str, password: str) -> Optional[Dict[str, Any]]:
    user = get_user_by_email(email)
    if not user or not verify_password(password, user["password_hash"]):
        return None
    log_activity(user["id"], "LOGIN", "Usuário realizou login no sistema.")
    return user
