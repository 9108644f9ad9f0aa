"""
Guidelines Guru - Chat with the AI guidelines and explore the policy graph.

This page provides:
- Chat assistant backed by the guidelines query endpoint
- Knowledge graph highlighting the nodes each answer refers to
- Ask-about-node questions generated from graph nodes
- Node pinning without relayout
- Feedback on answers
"""

import streamlit as st

from frontend.helpers import get_chat_session, reset_chat_session
from frontend.ui import (
    compute_graph_stats,
    render_chat_message,
    render_feedback_form,
    render_graph_stats,
    render_knowledge_graph,
    render_node_selector,
    render_pin_controls,
    render_type_legend,
    summarize_edge_states,
)
from governance.config import configure_logging


# Page config
st.set_page_config(
    page_title="Guidelines Guru",
    page_icon="",
    layout="wide",
)

configure_logging()


def main():
    """Main page content."""
    st.title("Guidelines Guru")
    st.markdown(
        "Ask about AI guidelines and policies. Relevant policy nodes light up in the graph."
    )

    chat = get_chat_session()
    surface = chat.surface

    # Sidebar controls
    with st.sidebar:
        st.header("Graph")

        if st.button("Reload graph", key="reload_graph"):
            if chat.load_graph():
                st.success("Graph loaded from backend.")
            else:
                st.warning("Backend graph unavailable, showing current graph.")

        if st.button("Clear highlight", key="clear_highlight"):
            chat.set_highlight(frozenset())

        st.markdown("---")
        st.subheader("Ask about a node")
        node_id = render_node_selector(chat.graph, key="ask_node")
        if node_id and st.button("Use as question", key="ask_node_button"):
            surface.click(node_id)
            st.session_state["chat_draft"] = chat.draft

        st.markdown("---")
        st.subheader("Pin a node")
        pin_id = render_node_selector(chat.graph, key="pin_node")
        if pin_id:
            render_pin_controls(surface, pin_id)

        st.markdown("---")
        if st.button("New conversation", key="new_conversation"):
            reset_chat_session()
            st.rerun()

    chat_col, graph_col = st.columns([2, 3])

    with chat_col:
        _render_chat(chat)

    with graph_col:
        _render_graph(chat)


def _render_chat(chat):
    """Render transcript, input and feedback."""
    st.subheader("Chat")

    for message in chat.messages:
        render_chat_message(message)

    with st.form(key="chat_form", clear_on_submit=True):
        question = st.text_area(
            "Your question",
            key="chat_draft",
            placeholder="e.g., What does the PII detection guideline require?",
        )
        submitted = st.form_submit_button("Send")

    if submitted:
        with st.spinner("Searching guidelines..."):
            chat.send(question)
        st.rerun()

    render_feedback_form(chat)


def _render_graph(chat):
    """Render graph, stats and legend."""
    st.subheader("Knowledge Graph")

    stats = compute_graph_stats(chat.graph, chat.highlight)
    render_graph_stats(stats)

    render_knowledge_graph(chat.surface, key="guidelines_graph")
    render_type_legend()

    with st.expander("Edge states", expanded=False):
        counts = summarize_edge_states(chat.surface)
        cols = st.columns(len(counts))
        for col, (state, count) in zip(cols, counts.items()):
            with col:
                st.metric(state.title(), count)


if __name__ == "__main__":
    main()
