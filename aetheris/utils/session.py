from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request

from aetheris.services import auth


def session_user_id(request: Request) -> Optional[int]:
    raw = request.session.get("user_id")
    return int(raw) if raw else None


def current_user(request: Request) -> Optional[Dict[str, Any]]:
    user_id = session_user_id(request)
    if user_id is None:
        return None
    return auth.get_user_by_id(user_id)


def resolve_user_id(request: Request, explicit: Optional[int]) -> Optional[int]:
    """Prefer the id sent in the body; fall back to the signed-in user."""
    if explicit is not None:
        return explicit
    return session_user_id(request)
