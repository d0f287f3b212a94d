"""
Pydantic schemas for chat messages, token usage and serialization dialects.
Messages are frozen: trimming and normalization always work on copies so the
caller's conversation history stays untouched.
"""

from typing import Dict, Optional
from pydantic import BaseModel, Field
from datetime import datetime


# ===== Message Schema =====

class Message(BaseModel):
    """
    Individual message in the conversation.
    Used for counting, trimming and storing conversation history.
    """
    role: str = Field(description="Message role: 'system', 'user' or 'assistant'")
    content: str = Field(description="Message content")
    timestamp: datetime = Field(default_factory=datetime.now)
    token_count: Optional[int] = Field(None, description="Number of tokens in this message")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "role": "user",
                "content": "Hello, I need help with my project",
                "timestamp": "2026-01-30T10:00:00",
                "token_count": 8
            }
        }


# ===== Usage Schemas =====

class TokenUsage(BaseModel):
    """Running prompt/completion totals for one model."""
    prompt_tokens: int = Field(default=0, ge=0, description="Tokens sent as prompt context")
    completion_tokens: int = Field(default=0, ge=0, description="Tokens received as completions")


# Model identifier -> running totals
TotalTokenUsed = Dict[str, TokenUsage]


# ===== Dialect Schema =====

class Dialect(BaseModel):
    """
    Textual layout a model family expects before tokenization.

    The assistant turn that closes every prompt is always written as
    ``<|im_start|>assistant`` followed by ``role_separator``.
    """
    name: str = Field(description="Short dialect name used in logs")
    message_separator: str = Field(description="Text placed between serialized messages")
    role_separator: str = Field(description="Text placed between role and content")
    use_explicit_markers: bool = Field(
        default=True,
        description="Wrap each message in <|im_start|> ... <|im_end|>"
    )

    class Config:
        frozen = True
