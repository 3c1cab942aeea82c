"""core/config.py — Application configuration via Pydantic BaseSettings.

Loads environment variables from .env (and the OS environment).
Import `settings` from this module wherever configuration is needed.

Usage:
    from upcoming_events.core.config import settings

    if courseid != settings.site_id:
        ...
"""

from __future__ import annotations

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env lives in the project root (one level above backend/)
_ENV_FILE = Path(__file__).parent.parent.parent.parent / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Host platform database
    database_url: str = "sqlite:///./upcoming_events.db"

    # Application
    environment: str = "development"
    log_level: str = "DEBUG"

    # CORS — origins allowed to call the reload endpoint from a browser
    allowed_origins: list[str] = [
        "http://localhost:8000",
        "http://localhost:3000",
    ]

    # Host site
    www_root: str = "http://localhost:8000"
    site_id: int = 1                 # front page course
    site_admins: list[int] = [2]
    default_admin_id: int = 2
    session_cookie: str = "MoodleSession"
    session_timeout: int = 28800     # seconds of inactivity before a session is dead

    # Calendar defaults used by the initial block render
    calendar_lookahead: int = 21     # days
    calendar_maxevents: int = 10

    @field_validator("log_level", mode="before")
    @classmethod
    def _uppercase_log_level(cls, v: str) -> str:
        return v.upper()

    @field_validator("www_root", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


# Singleton — import this everywhere
settings = Settings()
