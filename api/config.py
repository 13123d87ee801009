"""Runtime configuration read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

# Value shipped in example .env files; treated the same as an unset key
PLACEHOLDER_API_KEY = "your-openai-api-key-here"

DEFAULT_IMPROVE_SUFFIX = " (Improved with better flow and clarity)"


@dataclass(frozen=True)
class Settings:
    """Snapshot of the environment taken once at startup."""

    openai_api_key: str | None = None
    openai_model: str = "gpt-3.5-turbo"
    openai_base_url: str | None = None
    ai_request_timeout: float = 20.0
    demo_improve_suffix: str = DEFAULT_IMPROVE_SUFFIX

    note_store_backend: str = "mongodb"
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "smartnotes"
    init_db: bool = True

    default_user_id: str | None = "demo-user"

    @property
    def ai_enabled(self) -> bool:
        """Whether a usable provider credential is configured."""
        key = (self.openai_api_key or "").strip()
        return bool(key) and key != PLACEHOLDER_API_KEY

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from the current process environment."""
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-3.5-turbo"),
            openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
            ai_request_timeout=float(os.getenv("AI_REQUEST_TIMEOUT", "20")),
            demo_improve_suffix=os.getenv("AI_DEMO_IMPROVE_SUFFIX", DEFAULT_IMPROVE_SUFFIX),
            note_store_backend=os.getenv("NOTE_STORE_BACKEND", "mongodb").lower(),
            mongodb_url=os.getenv("MONGODB_URL", "mongodb://localhost:27017"),
            mongodb_db_name=os.getenv("MONGODB_DB_NAME", "smartnotes"),
            init_db=os.getenv("INIT_DB", "true").lower() == "true",
            default_user_id=os.getenv("DEFAULT_USER_ID", "demo-user") or None,
        )
