"""
Streamlit UI for the chat client.
Shows how much of the token budget the current conversation uses and the
running prompt/completion totals per model.
"""

import logging
import streamlit as st
from datetime import datetime

from chat_budget import MODEL_DIALECTS, SessionStore, UsageTracker, initialize
from chat_budget.agents import Agents
from chat_budget.config import Settings
from chat_budget.database import Database
from chat_budget.graph import create_chat_graph

logging.basicConfig(level=logging.INFO)

# Page configuration
st.set_page_config(
    page_title="Chat with Token Budget",
    page_icon="🤖",
    layout="wide"
)


def new_session_id() -> str:
    return f"session_{datetime.now().strftime('%Y%m%d_%H%M%S')}"


@st.cache_resource
def load_token_counter(encoding_name: str):
    # One encoder per process, loaded before any counting happens
    return initialize(encoding_name)


# Initialize session state
if "settings" not in st.session_state:
    st.session_state.settings = Settings.from_env()
if "session_id" not in st.session_state:
    st.session_state.session_id = new_session_id()
if "db" not in st.session_state:
    st.session_state.db = Database(st.session_state.settings.db_path)
if "usage_store" not in st.session_state:
    st.session_state.usage_store = SessionStore()

token_counter = load_token_counter(st.session_state.settings.encoding_name)


def build_graph(settings: Settings):
    tracker = UsageTracker(token_counter, st.session_state.usage_store)
    agents = Agents(
        db=st.session_state.db,
        token_counter=token_counter,
        usage_tracker=tracker,
        settings=settings
    )
    return create_chat_graph(agents)


def main():
    """Main Streamlit application."""
    settings: Settings = st.session_state.settings

    st.title("🤖 Chat with Token Budget")

    with st.sidebar:
        st.header("⚙️ Model")

        models = list(MODEL_DIALECTS)
        model_name = st.selectbox(
            "Model",
            models,
            index=models.index(settings.model_name) if settings.model_name in models else 0
        )
        token_limit = st.number_input(
            "Token limit",
            min_value=1,
            value=settings.token_limit,
            step=256
        )
        if model_name != settings.model_name or token_limit != settings.token_limit:
            st.session_state.settings = settings = settings.model_copy(
                update={"model_name": model_name, "token_limit": int(token_limit)}
            )
            st.session_state.pop("graph", None)

        col1, col2 = st.columns(2)
        with col1:
            if st.button("➕ New", use_container_width=True, help="Start a new conversation"):
                st.session_state.session_id = new_session_id()
                st.rerun()
        with col2:
            if st.button("🗑️ Clear", use_container_width=True, help="Clear current conversation"):
                st.session_state.db.clear_session(st.session_state.session_id)
                st.rerun()

        st.divider()

        # Current context against the budget
        st.subheader("📊 Current Context")
        history = st.session_state.db.get_messages(st.session_state.session_id)
        selected = token_counter.limit_messages(history, settings.token_limit, settings.model_name)
        context_tokens = token_counter.count_tokens(selected, settings.model_name)

        st.metric("Messages sent", f"{len(selected)}/{len(history)}")
        st.metric("Context", f"{context_tokens}/{settings.token_limit} tokens")
        st.progress(min(context_tokens / settings.token_limit, 1.0))

        st.divider()

        st.subheader("🧮 Total Tokens Used")
        totals = st.session_state.usage_store.get_total_token_used()
        if totals:
            st.table([
                {
                    "model": model,
                    "prompt": usage.prompt_tokens,
                    "completion": usage.completion_tokens
                }
                for model, usage in totals.items()
            ])
        else:
            st.info("No tokens used yet.")

    if "graph" not in st.session_state:
        st.session_state.graph = build_graph(settings)

    st.header("💬 Conversation")
    for msg in history:
        if msg.role == "system":
            continue
        with st.chat_message(msg.role):
            st.markdown(msg.content)

    if prompt := st.chat_input("Type your message..."):
        with st.spinner("🤔 Processing..."):
            st.session_state.graph.run(
                session_id=st.session_state.session_id,
                user_query=prompt
            )
        st.rerun()


if __name__ == "__main__":
    main()
