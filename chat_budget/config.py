"""Settings loaded from environment variables and .env."""

from __future__ import annotations

import os
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .dialects import DEFAULT_MODEL
from .selection import DEFAULT_TOKEN_LIMIT
from .tokenizer import DEFAULT_ENCODING


load_dotenv()


class Settings(BaseModel):
    """All settings for the chat client, loaded from .env or passed directly."""

    model_name: str = Field(default=DEFAULT_MODEL)
    token_limit: int = Field(default=DEFAULT_TOKEN_LIMIT)
    encoding_name: str = Field(default=DEFAULT_ENCODING)
    system_prompt: str = Field(
        default="You are ChatGPT, a large language model trained by OpenAI. "
        "Carefully follow the user's instructions. Respond using Markdown."
    )
    db_path: str = Field(default="data/conversation.db")
    openai_api_key: Optional[str] = Field(default=None)
    openai_base_url: Optional[str] = Field(default=None)
    temperature: float = Field(default=0.7)

    @classmethod
    def _collect_env_overrides(cls) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        for field_name in cls.model_fields:
            env_key = field_name.upper()
            if env_key in os.environ and os.environ[env_key] != "":
                overrides[field_name] = os.environ[env_key]
        return overrides

    @classmethod
    def from_env(cls, **kwargs: Any) -> "Settings":
        """Loads settings from environment variables; keyword arguments win."""
        overrides = cls._collect_env_overrides()
        overrides.update({k: v for k, v in kwargs.items() if v is not None})
        return cls(**overrides)
