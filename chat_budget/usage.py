"""Running per-model token usage totals."""

import logging
import threading
from typing import Optional, Protocol, Sequence

from .schemas import Message, TokenUsage, TotalTokenUsed
from .tokenizer import TokenCounter, get_token_counter

logger = logging.getLogger(__name__)

_record_lock = threading.Lock()


class UsageStore(Protocol):
    """Where accumulated usage lives between exchanges."""

    def get_total_token_used(self) -> TotalTokenUsed:
        ...

    def set_total_token_used(self, total: TotalTokenUsed) -> None:
        ...


class SessionStore:
    """In-process usage store, empty at start and never reset internally."""

    def __init__(self):
        self._total_token_used: TotalTokenUsed = {}

    def get_total_token_used(self) -> TotalTokenUsed:
        return {model: usage.model_copy() for model, usage in self._total_token_used.items()}

    def set_total_token_used(self, total: TotalTokenUsed) -> None:
        self._total_token_used = dict(total)


class UsageTracker:
    """
    Adds the tokens of each completed exchange to the store.

    The read-modify-write runs under a lock so concurrent exchanges never
    lose an update.
    """

    def __init__(
        self,
        counter: TokenCounter,
        store: Optional[UsageStore] = None,
        lock: Optional[threading.Lock] = None
    ):
        """
        Args:
            counter: Token counter used for prompt and completion counts
            store: Usage store; a fresh SessionStore if omitted
            lock: Lock shared by every tracker writing to the same store
        """
        self.counter = counter
        self.store = store if store is not None else SessionStore()
        self._lock = lock or threading.Lock()

    def record(
        self,
        model: str,
        prompt_messages: Sequence[Message],
        completion_message: Message
    ) -> TokenUsage:
        """
        Add one exchange to ``model``'s totals and return the new totals.

        Other models' entries are written back unchanged.
        """
        new_prompt_tokens = self.counter.count_tokens(prompt_messages, model)
        new_completion_tokens = self.counter.count_tokens([completion_message], model)

        with self._lock:
            total = self.store.get_total_token_used()
            current = total.get(model) or TokenUsage()
            updated = TokenUsage(
                prompt_tokens=current.prompt_tokens + new_prompt_tokens,
                completion_tokens=current.completion_tokens + new_completion_tokens
            )
            total[model] = updated
            self.store.set_total_token_used(total)

        logger.info(
            f"Usage for {model}: +{new_prompt_tokens} prompt, +{new_completion_tokens} completion "
            f"(totals {updated.prompt_tokens}/{updated.completion_tokens})"
        )
        return updated

    def get_usage(self, model: str) -> TokenUsage:
        return self.store.get_total_token_used().get(model) or TokenUsage()


def record_usage(
    model: str,
    prompt_messages: Sequence[Message],
    completion_message: Message,
    store: UsageStore
) -> TokenUsage:
    """Record one exchange against ``store`` using the shared counter."""
    return UsageTracker(get_token_counter(), store, lock=_record_lock).record(
        model, prompt_messages, completion_message
    )
