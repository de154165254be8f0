"""
Configuration tests.
"""

import pytest

from notevault.config import Settings, get_settings


def test_get_settings_returns_settings() -> None:
    """get_settings returns a Settings instance."""
    settings = get_settings()
    assert isinstance(settings, Settings)


def test_settings_has_required_attributes() -> None:
    """Settings has all required attributes."""
    settings = get_settings()
    assert hasattr(settings, "app_name")
    assert hasattr(settings, "database_url")
    assert hasattr(settings, "secret_key")
    assert hasattr(settings, "ai_provider")
    assert hasattr(settings, "invite_email_enabled")
    assert settings.app_name == "NoteVault"


def test_test_run_uses_sqlite() -> None:
    settings = get_settings()
    assert settings.is_sqlite
    assert settings.ai_provider == "local"


def test_generic_postgres_url_gets_psycopg_driver(monkeypatch: pytest.MonkeyPatch) -> None:
    """postgresql:// URLs are rewritten to the psycopg3 driver."""
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/notevault")
    settings = Settings()
    assert settings.database_url == "postgresql+psycopg://u:p@db:5432/notevault"
    assert settings.is_sqlite is False


def test_llm_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AI_PROVIDER", "OpenAI")
    monkeypatch.setenv("LLM_API_KEY", "k")
    monkeypatch.setenv("LLM_MODEL", "gpt-4o")
    monkeypatch.setenv("LLM_TIMEOUT", "90")
    monkeypatch.setenv("LLM_MAX_RETRIES", "5")
    settings = Settings()
    assert settings.ai_provider == "openai"
    assert settings.llm_api_key == "k"
    assert settings.llm_model == "gpt-4o"
    assert settings.llm_timeout == 90.0
    assert settings.llm_max_retries == 5


def test_token_lifetime_and_invite_flag_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_HOURS", "2")
    monkeypatch.setenv("INVITE_EMAIL_ENABLED", "false")
    settings = Settings()
    assert settings.access_token_expire_hours == 2
    assert settings.invite_email_enabled is False
