"""
Context trimming: pick the newest messages that fit in a token budget.

Rules:
- A leading system message is kept only if it alone is strictly under the
  limit. Its tokens are reserved before anything else.
- Remaining messages are taken newest-first while the running total stays
  at or under the limit. The first one that does not fit ends the scan.
- A kept system message is inserted third from the end of the kept list,
  next to the latest turns rather than at the head.
- Without a system message, the oldest message is added back at the head
  if it fits strictly under the limit.
"""

import logging
from typing import List, Optional, Sequence

from .dialects import DEFAULT_MODEL
from .normalize import to_half_width
from .schemas import Message
from .tokenizer import TokenCounter, get_token_counter

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_LIMIT = 4096

# Position of a retained system message, counted from the end
SYSTEM_MESSAGE_OFFSET = -3


def select_messages(
    counter: TokenCounter,
    messages: Sequence[Message],
    limit: int,
    model: str
) -> List[Message]:
    """
    Return the trimmed copy of ``messages`` to send as context.

    Args:
        counter: Token counter used for every per-message count
        messages: Full conversation history, oldest first (not modified)
        limit: Maximum prompt tokens
        model: Model identifier selecting the prompt dialect

    Returns:
        New list of normalized Message copies in chronological order
    """
    if not messages:
        return []

    limited: List[Message] = []
    token_count = 0

    first = messages[0]
    is_system_first = first.role == "system"
    retain_system = False

    if is_system_first:
        system_tokens = counter.count_message_tokens(first, model)
        if system_tokens < limit:
            token_count += system_tokens
            retain_system = True
        else:
            logger.warning(
                f"System message dropped: {system_tokens} tokens does not fit limit {limit}"
            )

    for message in reversed(messages[1:]):
        count = counter.count_message_tokens(message, model)
        if count + token_count > limit:
            break
        token_count += count
        limited.insert(0, message)

    if retain_system:
        limited.insert(SYSTEM_MESSAGE_OFFSET, first)
    elif not is_system_first:
        first_tokens = counter.count_message_tokens(first, model)
        if first_tokens + token_count < limit:
            token_count += first_tokens
            limited.insert(0, first)

    logger.debug(f"Selected {len(limited)}/{len(messages)} messages, {token_count}/{limit} tokens")

    return [msg.model_copy(update={"content": to_half_width(msg.content)}) for msg in limited]


def limit_message_tokens(
    messages: Sequence[Message],
    limit: int = DEFAULT_TOKEN_LIMIT,
    model: str = DEFAULT_MODEL,
    counter: Optional[TokenCounter] = None
) -> List[Message]:
    """Trim ``messages`` to ``limit`` tokens using the shared counter by default."""
    if not messages:
        return []
    return select_messages(counter or get_token_counter(), messages, limit, model)
