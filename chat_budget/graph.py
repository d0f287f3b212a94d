"""
LangGraph orchestrator - connects the chat agents in a workflow.
"""

from typing import List, Optional, TypedDict

from langgraph.graph import StateGraph, END

from .agents import Agents
from .schemas import Message, TokenUsage


class GraphState(TypedDict, total=False):
    """State schema for the LangGraph workflow."""
    session_id: str
    user_query: str
    messages: List[Message]
    selected_messages: List[Message]
    prompt_tokens: int
    final_response: str
    reply: Optional[Message]
    usage: Optional[TokenUsage]


class ChatGraph:
    """
    LangGraph orchestrator for one chat exchange.

    Flow:
    1. Context Agent → Store user turn, trim history to the token limit
    2. Response Agent → Send trimmed context, store the reply
    3. Usage Agent → Add prompt/completion tokens to the running totals
    """

    def __init__(self, agents: Agents):
        self.agents = agents
        self.graph = self._build_graph()

    def _build_graph(self):
        workflow = StateGraph(GraphState)

        workflow.add_node("context_agent", self.agents.context_agent)
        workflow.add_node("response_agent", self.agents.response_agent)
        workflow.add_node("usage_agent", self.agents.usage_agent)

        workflow.set_entry_point("context_agent")
        workflow.add_edge("context_agent", "response_agent")
        workflow.add_edge("response_agent", "usage_agent")
        workflow.add_edge("usage_agent", END)

        return workflow.compile()

    def run(self, session_id: str, user_query: str) -> dict:
        """
        Run one exchange.

        Args:
            session_id: Unique session identifier
            user_query: User's input message

        Returns:
            Final state with response, trimmed context and usage
        """
        initial_state = {
            "session_id": session_id,
            "user_query": user_query,
            "messages": [],
            "selected_messages": [],
            "prompt_tokens": 0,
            "final_response": "",
            "reply": None,
            "usage": None
        }
        return self.graph.invoke(initial_state)


def create_chat_graph(agents: Agents) -> ChatGraph:
    """Factory function to create a chat graph."""
    return ChatGraph(agents)
