"""Token budget accounting for chat prompts."""

from .normalize import normalize, to_half_width
from .schemas import Dialect, Message, TokenUsage, TotalTokenUsed
from .dialects import MODEL_DIALECTS, get_dialect, serialize_messages
from .tokenizer import (
    EncoderInitError,
    EncoderNotInitializedError,
    TokenCounter,
    count_tokens,
    get_chat_encoding,
    get_token_counter,
    initialize,
    load_encoder,
)
from .selection import DEFAULT_TOKEN_LIMIT, limit_message_tokens, select_messages
from .usage import SessionStore, UsageStore, UsageTracker, record_usage

__all__ = [
    "DEFAULT_TOKEN_LIMIT",
    "Dialect",
    "EncoderInitError",
    "EncoderNotInitializedError",
    "MODEL_DIALECTS",
    "Message",
    "SessionStore",
    "TokenCounter",
    "TokenUsage",
    "TotalTokenUsed",
    "UsageStore",
    "UsageTracker",
    "count_tokens",
    "get_chat_encoding",
    "get_dialect",
    "get_token_counter",
    "initialize",
    "limit_message_tokens",
    "load_encoder",
    "normalize",
    "record_usage",
    "select_messages",
    "serialize_messages",
    "to_half_width",
]
