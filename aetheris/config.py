from __future__ import annotations

import os
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]


class Config:
    """Application configuration, read from the environment on each access."""

    DEFAULT_DB_PATH = ROOT_DIR / "aetheris.db"
    GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
    GEMINI_MODEL = "gemini-2.0-flash"
    GENERATION_TIMEOUT = 300.0
    AUTOSAVE_SECONDS = 60.0
    DEPLOY_DOMAIN = "aetheris.ai"

    PLANS = {
        "free": {"credits": 10, "projects": 3, "features": ["basic_editor"]},
        "pro": {"credits": 100, "projects": 20, "features": ["basic_editor", "white_label", "custom_domain"]},
        "enterprise": {
            "credits": 9999,
            "projects": 9999,
            "features": ["basic_editor", "white_label", "custom_domain", "priority_support"],
        },
    }

    @classmethod
    def db_path(cls) -> Path:
        return Path(os.getenv("AETHERIS_DB_PATH", str(cls.DEFAULT_DB_PATH)))

    @classmethod
    def session_secret(cls) -> str:
        return os.getenv("AETHERIS_SESSION_SECRET", "aetheris-session")

    @classmethod
    def gemini_api_key(cls) -> str:
        return os.getenv("GEMINI_API_KEY", "")

    @classmethod
    def gemini_model(cls) -> str:
        return os.getenv("GEMINI_MODEL", cls.GEMINI_MODEL)

    @classmethod
    def gemini_url(cls) -> str:
        template = os.getenv("GEMINI_API_URL", cls.GEMINI_API_URL)
        return template.format(model=cls.gemini_model())

    @classmethod
    def autosave_seconds(cls) -> float:
        return float(os.getenv("AETHERIS_AUTOSAVE_SECONDS", cls.AUTOSAVE_SECONDS))

    @classmethod
    def deploy_domain(cls) -> str:
        return os.getenv("AETHERIS_DEPLOY_DOMAIN", cls.DEPLOY_DOMAIN)
