"""
Application configuration. Loads from environment variables.
Secrets and sensitive config must never be hardcoded.
"""

import os

from dotenv import load_dotenv

load_dotenv()
from functools import lru_cache
from typing import Optional


@lru_cache(maxsize=1)
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "NoteVault"
    debug: bool = False

    # Database (postgresql+psycopg for psycopg3; sqlite:// for local runs)
    database_url: str = "postgresql+psycopg://localhost:5432/notevault_dev"
    db_connect_timeout: int = 10  # seconds

    # Security
    secret_key: str = ""
    access_token_expire_hours: int = 24

    # AI insights: "local" (heuristics only) or "openai"
    ai_provider: str = "local"
    llm_api_key: Optional[str] = None
    llm_model: str = "gpt-4o-mini"
    llm_timeout: float = 60.0
    llm_max_retries: int = 3

    # Invites: log the notification that would be emailed to the invitee
    invite_email_enabled: bool = True

    def __init__(self) -> None:
        self.app_name = os.getenv("APP_NAME", self.app_name)
        self.debug = os.getenv("DEBUG", "false").lower() == "true"

        default_user = os.getenv("PGUSER") or os.getenv("USER") or "postgres"
        default_url = (
            f"postgresql+psycopg://{default_user}:"
            f"{os.getenv('PGPASSWORD', '')}@"
            f"{os.getenv('PGHOST', 'localhost')}:"
            f"{os.getenv('PGPORT', '5432')}/"
            f"{os.getenv('PGDATABASE', 'notevault_dev')}"
        )
        raw_url = os.getenv("DATABASE_URL", default_url)
        # Ensure psycopg3 driver if URL uses generic postgresql://
        if raw_url.startswith("postgresql://") and not raw_url.startswith("postgresql+psycopg"):
            raw_url = raw_url.replace("postgresql://", "postgresql+psycopg://", 1)
        self.database_url = raw_url
        self.db_connect_timeout = int(os.getenv("DB_CONNECT_TIMEOUT", str(self.db_connect_timeout)))

        self.secret_key = os.getenv("SECRET_KEY", "")
        self.access_token_expire_hours = int(
            os.getenv("ACCESS_TOKEN_EXPIRE_HOURS", str(self.access_token_expire_hours))
        )

        self.ai_provider = os.getenv("AI_PROVIDER", self.ai_provider).lower()
        self.llm_api_key = os.getenv("LLM_API_KEY")
        self.llm_model = os.getenv("LLM_MODEL", self.llm_model)
        self.llm_timeout = float(os.getenv("LLM_TIMEOUT", str(self.llm_timeout)))
        self.llm_max_retries = int(os.getenv("LLM_MAX_RETRIES", str(self.llm_max_retries)))

        self.invite_email_enabled = (
            os.getenv("INVITE_EMAIL_ENABLED", "true").lower() == "true"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")
