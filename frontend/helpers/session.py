"""
Chat session helpers for the Streamlit frontend.

Keeps one GuidelinesChat per browser session. The render surface shares
the process-wide position store, so nodes keep their placement across page
reruns and remounts.
"""

from __future__ import annotations

import streamlit as st

from governance.chat import GuidelinesChat, get_guidelines_client
from governance.config import get_settings
from governance.graph import (
    LayoutConfig,
    LayoutEngine,
    RenderSurface,
    get_position_store,
    load_seed_graph,
)

SESSION_KEY = "guidelines_chat"


def create_chat_session() -> GuidelinesChat:
    """Build a chat session wired to the configured backend and seed graph."""
    settings = get_settings()
    store = get_position_store()
    engine = LayoutEngine(store, LayoutConfig.from_settings(settings))
    surface = RenderSurface(
        store=store,
        engine=engine,
        width=settings.canvas_width,
        height=settings.canvas_height,
    )
    chat = GuidelinesChat(
        client=get_guidelines_client(),
        surface=surface,
        graph=load_seed_graph(settings.seed_graph_path),
    )
    chat.load_graph()
    return chat


def get_chat_session() -> GuidelinesChat:
    """Get or create the chat session for this browser session."""
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = create_chat_session()
    return st.session_state[SESSION_KEY]


def reset_chat_session() -> None:
    """Drop the chat session; node positions are kept."""
    st.session_state.pop(SESSION_KEY, None)
