"""Tests for chat_budget/config.py."""
from __future__ import annotations

import pytest

from chat_budget.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("MODEL_NAME", "TOKEN_LIMIT", "ENCODING_NAME", "SYSTEM_PROMPT",
                "DB_PATH", "OPENAI_API_KEY", "OPENAI_BASE_URL", "TEMPERATURE"):
        monkeypatch.delenv(key, raising=False)


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env()
        assert settings.model_name == "gpt-3.5-turbo"
        assert settings.token_limit == 4096
        assert settings.encoding_name == "cl100k_base"
        assert settings.openai_api_key is None

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("MODEL_NAME", "gpt-4")
        monkeypatch.setenv("TOKEN_LIMIT", "8192")
        settings = Settings.from_env()
        assert settings.model_name == "gpt-4"
        assert settings.token_limit == 8192

    def test_empty_env_ignored(self, monkeypatch):
        monkeypatch.setenv("TOKEN_LIMIT", "")
        assert Settings.from_env().token_limit == 4096

    def test_kwargs_win_over_env(self, monkeypatch):
        monkeypatch.setenv("TOKEN_LIMIT", "8192")
        assert Settings.from_env(token_limit=1024).token_limit == 1024

    def test_invalid_limit_rejected(self, monkeypatch):
        monkeypatch.setenv("TOKEN_LIMIT", "lots")
        with pytest.raises(ValueError):
            Settings.from_env()
