"""
Prompt serialization for chat models.

Each model identifier maps to a Dialect describing how a conversation is
flattened into the single string the tokenizer sees. Adding a model only
means adding an entry to MODEL_DIALECTS.
"""

import logging
from typing import Dict, Sequence

from .normalize import to_half_width
from .schemas import Dialect, Message

logger = logging.getLogger(__name__)

IM_START = "<|im_start|>"
IM_END = "<|im_end|>"
IM_SEP = "<|im_sep|>"

# Reserved IDs just above the cl100k_base vocabulary
CONTROL_TOKENS: Dict[str, int] = {
    IM_START: 100264,
    IM_END: 100265,
    IM_SEP: 100266,
}

TURBO = Dialect(
    name="turbo",
    message_separator="\n",
    role_separator="\n",
    use_explicit_markers=False,
)

CHAT_MARKUP = Dialect(
    name="chat-markup",
    message_separator="",
    role_separator=IM_SEP,
    use_explicit_markers=True,
)

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_DIALECT = CHAT_MARKUP

MODEL_DIALECTS: Dict[str, Dialect] = {
    "gpt-3.5-turbo": TURBO,
    "gpt-4": CHAT_MARKUP,
    "gpt-4-32k": CHAT_MARKUP,
}


def get_dialect(model: str) -> Dialect:
    """Look up the dialect for a model, falling back to the default one."""
    dialect = MODEL_DIALECTS.get(model)
    if dialect is None:
        logger.warning(f"Unknown model '{model}', using {DEFAULT_DIALECT.name} dialect")
        return DEFAULT_DIALECT
    return dialect


def _serialize_message(message: Message, dialect: Dialect) -> str:
    body = f"{message.role}{dialect.role_separator}{to_half_width(message.content)}"
    if dialect.use_explicit_markers:
        return f"{IM_START}{body}{IM_END}"
    return body


def serialize_messages(messages: Sequence[Message], model: str) -> str:
    """
    Flatten messages into the prompt text for ``model``.

    Message content is normalized before it is written. The result always
    ends with an open assistant turn, the position where the model's reply
    is generated.
    """
    dialect = get_dialect(model)
    sep = dialect.message_separator

    body = sep.join(_serialize_message(msg, dialect) for msg in messages)
    reply_primer = f"{IM_START}assistant{dialect.role_separator}"
    return sep.join([body, reply_primer])
