"""
LangGraph agents implementation.
Each agent handles one step of a chat exchange: building the trimmed
context, getting the model's reply and booking the tokens it cost.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from .config import Settings
from .database import Database
from .schemas import Message
from .tokenizer import TokenCounter
from .usage import UsageTracker

logger = logging.getLogger(__name__)


def create_chat_model(settings: Settings) -> ChatOpenAI:
    kwargs: Dict[str, Any] = {
        "model": settings.model_name,
        "temperature": settings.temperature,
    }
    if settings.openai_api_key:
        kwargs["api_key"] = settings.openai_api_key
    if settings.openai_base_url:
        kwargs["base_url"] = settings.openai_base_url
    return ChatOpenAI(**kwargs)


def to_langchain_messages(messages: Sequence[Message]) -> List[BaseMessage]:
    """Convert chat messages to LangChain message objects."""
    converted: List[BaseMessage] = []
    for msg in messages:
        if msg.role == "system":
            converted.append(SystemMessage(content=msg.content))
        elif msg.role == "assistant":
            converted.append(AIMessage(content=msg.content))
        else:
            converted.append(HumanMessage(content=msg.content))
    return converted


class Agents:
    """Collection of LangGraph agents for the chat pipeline."""

    def __init__(
        self,
        db: Database,
        token_counter: TokenCounter,
        usage_tracker: UsageTracker,
        settings: Optional[Settings] = None,
        llm: Optional[BaseChatModel] = None
    ):
        """
        Initialize agents with storage, token accounting and the chat model.

        Args:
            db: Database instance for conversation history
            token_counter: Counter shared with the usage tracker
            usage_tracker: Accumulator for per-model token totals
            settings: Model, token limit and system prompt
            llm: Chat model; an OpenAI chat model built from settings if omitted
        """
        self.db = db
        self.token_counter = token_counter
        self.usage_tracker = usage_tracker
        self.settings = settings or Settings()
        self.llm = llm if llm is not None else create_chat_model(self.settings)

    def _save(self, session_id: str, role: str, content: str) -> Message:
        message = Message(role=role, content=content)
        message = message.model_copy(update={
            "token_count": self.token_counter.count_message_tokens(message, self.settings.model_name)
        })
        self.db.save_message(session_id, message)
        return message

    # ===== Context Agent =====

    def context_agent(self, state: Dict[str, Any]) -> Dict[str, Any]:
        """
        Context Agent: store the new user turn and trim history to the budget.

        A new conversation is seeded with the configured system prompt.
        """
        session_id = state["session_id"]
        model = self.settings.model_name

        if not self.db.get_messages(session_id, limit=1) and self.settings.system_prompt:
            self._save(session_id, "system", self.settings.system_prompt)

        if state.get("user_query"):
            self._save(session_id, "user", state["user_query"])

        history = self.db.get_messages(session_id)
        selected = self.token_counter.limit_messages(history, self.settings.token_limit, model)
        prompt_tokens = self.token_counter.count_tokens(selected, model)

        logger.info(
            f"📊 Context Agent: {len(selected)}/{len(history)} messages, "
            f"{prompt_tokens}/{self.settings.token_limit} tokens"
        )

        return {
            **state,
            "messages": history,
            "selected_messages": selected,
            "prompt_tokens": prompt_tokens
        }

    # ===== Response Generator Agent =====

    def response_agent(self, state: Dict[str, Any]) -> Dict[str, Any]:
        """Response Agent: send the trimmed context and store the reply."""
        selected = state.get("selected_messages", [])

        response = self.llm.invoke(to_langchain_messages(selected))
        content = response.content if isinstance(response.content, str) else str(response.content)

        reply = self._save(state["session_id"], "assistant", content)

        logger.info(f"✅ Response generated ({len(content)} chars)")

        return {
            **state,
            "final_response": content,
            "reply": reply
        }

    # ===== Usage Agent =====

    def usage_agent(self, state: Dict[str, Any]) -> Dict[str, Any]:
        """Usage Agent: add this exchange's prompt and completion tokens."""
        usage = self.usage_tracker.record(
            self.settings.model_name,
            state.get("selected_messages", []),
            state["reply"]
        )
        return {
            **state,
            "usage": usage
        }
