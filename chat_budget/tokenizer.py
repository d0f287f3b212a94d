"""Token counting for chat prompts using tiktoken."""

import logging
import threading
from typing import List, Optional, Protocol, Sequence

import tiktoken

from .dialects import CONTROL_TOKENS, serialize_messages
from .schemas import Message

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "cl100k_base"


class EncoderInitError(RuntimeError):
    """The tokenizer tables could not be loaded."""


class EncoderNotInitializedError(RuntimeError):
    """A counting helper was used before initialize() was called."""


class Encoder(Protocol):
    def encode(self, text: str, *, allowed_special=...) -> List[int]:
        ...


def load_encoder(encoding_name: str = DEFAULT_ENCODING) -> tiktoken.Encoding:
    """
    Build the chat encoder on top of a tiktoken base encoding.

    The control markers are registered as special tokens so they are never
    split into sub-word pieces.

    Raises:
        EncoderInitError: if the base encoding cannot be loaded
    """
    try:
        base = tiktoken.get_encoding(encoding_name)
    except Exception as e:
        raise EncoderInitError(f"Could not load tiktoken encoding '{encoding_name}': {e}") from e

    encoding = tiktoken.Encoding(
        name=f"{encoding_name}_chat",
        pat_str=base._pat_str,
        mergeable_ranks=base._mergeable_ranks,
        special_tokens={
            **base._special_tokens,
            **CONTROL_TOKENS,
        },
    )
    logger.info(f"Loaded chat encoder '{encoding.name}' ({encoding.n_vocab} tokens)")
    return encoding


class TokenCounter:
    """
    Counts tokens of serialized chat prompts.

    Wraps any encoder exposing ``encode(text, allowed_special=...)``; the
    encoder is shared and never mutated, so one counter can serve every
    caller.
    """

    def __init__(self, encoder: Encoder):
        """
        Args:
            encoder: tiktoken Encoding (see load_encoder) or compatible object
        """
        self.encoder = encoder

    @classmethod
    def from_encoding(cls, encoding_name: str = DEFAULT_ENCODING) -> "TokenCounter":
        return cls(load_encoder(encoding_name))

    def encode_messages(self, messages: Sequence[Message], model: str) -> List[int]:
        """Token IDs of the serialized prompt, control markers included."""
        serialized = serialize_messages(messages, model)
        return list(self.encoder.encode(serialized, allowed_special="all"))

    def count_tokens(self, messages: Sequence[Message], model: str) -> int:
        """
        Count tokens a message list consumes once serialized for ``model``.

        An empty list counts as 0 without touching the encoder.
        """
        if not messages:
            return 0
        return len(self.encode_messages(messages, model))

    def count_message_tokens(self, message: Message, model: str) -> int:
        """Token count of a single message sent on its own."""
        return self.count_tokens([message], model)

    def limit_messages(
        self,
        messages: Sequence[Message],
        limit: int,
        model: str
    ) -> List[Message]:
        from .selection import select_messages

        return select_messages(self, messages, limit, model)


# ===== Process-wide default counter =====

_default_counter: Optional[TokenCounter] = None
_init_lock = threading.Lock()


def initialize(encoding_name: str = DEFAULT_ENCODING) -> TokenCounter:
    """
    Load the shared encoder once. Must run before the module-level helpers.

    Repeat calls return the already-installed counter.
    """
    global _default_counter
    with _init_lock:
        if _default_counter is None:
            _default_counter = TokenCounter.from_encoding(encoding_name)
        return _default_counter


def set_token_counter(counter: Optional[TokenCounter]) -> None:
    """Install (or clear, with None) the process-wide counter."""
    global _default_counter
    with _init_lock:
        _default_counter = counter


def get_token_counter() -> TokenCounter:
    if _default_counter is None:
        raise EncoderNotInitializedError(
            "Token encoder is not initialized; call chat_budget.initialize() first"
        )
    return _default_counter


def get_chat_encoding(messages: Sequence[Message], model: str) -> List[int]:
    return get_token_counter().encode_messages(messages, model)


def count_tokens(messages: Sequence[Message], model: str) -> int:
    """Token count of ``messages`` under ``model``'s prompt format."""
    if not messages:
        return 0
    return get_token_counter().count_tokens(messages, model)
