"""
Knowledge graph components for Streamlit.

Provides reusable UI components for:
- The guidelines knowledge graph (SVG from the render surface)
- Graph statistics display
- Node selection and drag/pin controls
- Chat transcript and feedback form
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx
import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

from governance.chat import ChatMessage, FeedbackType
from governance.graph import EdgeState, KnowledgeGraph, Position
from governance.graph.styles import NODE_COLORS

if TYPE_CHECKING:
    from governance.chat import GuidelinesChat
    from governance.graph import RenderSurface


# =============================================================================
# Knowledge Graph
# =============================================================================


def render_knowledge_graph(surface: "RenderSurface", key: str = "knowledge_graph") -> None:
    """Render the knowledge graph SVG.

    Args:
        surface: Render surface holding the laid-out, styled graph
        key: Widget key
    """
    if not surface.geometry:
        st.info("No graph data to display.")
        return

    try:
        svg = surface.to_svg()
        components.html(
            f'<div id="{key}" style="background:#fafafa;border-radius:8px">{svg}</div>',
            height=int(surface.height) + 20,
            scrolling=True,
        )
    except Exception as e:
        st.error(f"Error rendering graph: {e}")
        render_graph_fallback(surface.graph)


def render_graph_fallback(graph: KnowledgeGraph) -> None:
    """Show nodes and edges as tables when the SVG cannot be drawn."""
    st.markdown("**Graph Nodes:**")

    if not graph.nodes:
        st.info("No nodes to display.")
        return

    nodes_df = pd.DataFrame([
        {"id": n.id, "label": n.label, "type": n.type.value} for n in graph.nodes
    ])
    st.dataframe(nodes_df, use_container_width=True)

    st.markdown("**Graph Edges:**")
    edges = graph.valid_edges()
    if edges:
        edges_df = pd.DataFrame([e.model_dump() for e in edges])
        st.dataframe(edges_df, use_container_width=True)


def render_type_legend() -> None:
    """Show the node tier colour legend."""
    cols = st.columns(len(NODE_COLORS))
    for col, (node_type, color) in zip(cols, NODE_COLORS.items()):
        with col:
            st.markdown(
                f'<span style="display:inline-block;width:12px;height:12px;'
                f'border-radius:3px;background:{color.fill};border:1px solid {color.stroke}">'
                f"</span> {node_type.value}",
                unsafe_allow_html=True,
            )


# =============================================================================
# Graph Statistics
# =============================================================================


def compute_graph_stats(graph: KnowledgeGraph, highlight: frozenset[str] = frozenset()) -> dict:
    """Compute basic graph statistics.

    Args:
        graph: The knowledge graph; dangling edges are not counted
        highlight: Highlighted node ids

    Returns:
        Dict with num_nodes, num_edges, density, clustering, num_highlighted,
        num_active_edges
    """
    edges = graph.valid_edges()
    num_nodes = len(graph.nodes)
    num_edges = len(edges)

    max_edges = num_nodes * (num_nodes - 1) if num_nodes > 1 else 1
    density = num_edges / max_edges if max_edges > 0 else 0

    clustering = 0.0
    if num_nodes > 0:
        G = nx.Graph()
        G.add_nodes_from(graph.node_ids())
        G.add_edges_from((e.source, e.target) for e in edges if e.source != e.target)
        clustering = nx.average_clustering(G)

    highlighted = highlight & graph.node_ids()
    active = sum(1 for e in edges if e.source in highlighted and e.target in highlighted)

    return {
        "num_nodes": num_nodes,
        "num_edges": num_edges,
        "density": density,
        "clustering": clustering,
        "num_highlighted": len(highlighted),
        "num_active_edges": active,
    }


def render_graph_stats(stats: dict) -> None:
    """Display graph statistics in a metrics row."""
    cols = st.columns(4)

    with cols[0]:
        st.metric("Nodes", stats.get("num_nodes", 0))

    with cols[1]:
        st.metric("Edges", stats.get("num_edges", 0))

    with cols[2]:
        st.metric("Highlighted", stats.get("num_highlighted", 0))

    with cols[3]:
        clustering = stats.get("clustering", 0)
        st.metric("Clustering", f"{clustering:.2f}")


def summarize_edge_states(surface: "RenderSurface") -> dict[str, int]:
    """Count edges per highlight state."""
    counts = {state.value: 0 for state in EdgeState}
    for style in surface.projection.edge_styles.values():
        counts[style.state.value] += 1
    return counts


# =============================================================================
# Node Controls
# =============================================================================


def render_node_selector(graph: KnowledgeGraph, key: str = "node_select") -> str | None:
    """Render dropdown to pick a node.

    Args:
        graph: The knowledge graph
        key: Widget key

    Returns:
        Selected node id or None
    """
    if not graph.nodes:
        st.warning("No nodes available.")
        return None

    labels = {n.id: f"{n.label} ({n.type.value})" for n in graph.nodes}
    return st.selectbox(
        "Node",
        options=list(labels),
        format_func=lambda node_id: labels.get(node_id, node_id),
        key=key,
        index=None,
        placeholder="Choose a node...",
    )


def render_pin_controls(surface: "RenderSurface", node_id: str, key_prefix: str = "pin") -> None:
    """Move a node to exact coordinates through a drag start/move/end cycle."""
    geometry = surface.geometry.get(node_id)
    if geometry is None:
        return

    col1, col2, col3 = st.columns([2, 2, 1])
    with col1:
        x = st.number_input("x", value=float(geometry.x), step=10.0, key=f"{key_prefix}_x_{node_id}")
    with col2:
        y = st.number_input("y", value=float(geometry.y), step=10.0, key=f"{key_prefix}_y_{node_id}")
    with col3:
        st.write("")
        if st.button("Move", key=f"{key_prefix}_move_{node_id}"):
            surface.drag_start(node_id)
            surface.drag_end(node_id, Position(x=x, y=y))
            surface.highlight(surface.projection.highlight)
            st.rerun()


# =============================================================================
# Chat
# =============================================================================


def render_chat_message(message: ChatMessage) -> None:
    """Render one transcript message."""
    role = "user" if message.sender == "user" else "assistant"
    with st.chat_message(role):
        st.markdown(message.text)
        if message.references:
            st.caption(" · ".join(f"{r.policy_id} - {r.section}" for r in message.references))
        if message.highlighted_nodes:
            st.caption(f"Highlighted: {', '.join(message.highlighted_nodes)}")
        st.caption(message.timestamp)


def render_feedback_form(chat: "GuidelinesChat", key: str = "feedback") -> None:
    """Render the feedback form for assistant answers."""
    answers = [m for m in chat.messages if m.sender == "ai" and m.id > 1]
    if not answers:
        return

    with st.expander("Provide Feedback", expanded=False):
        st.caption("Your feedback helps us improve the accuracy and relevance of our responses.")
        with st.form(key=key, clear_on_submit=True):
            message_id = st.selectbox(
                "Message",
                options=[m.id for m in answers],
                format_func=lambda mid: f"#{mid}",
                index=len(answers) - 1,
            )
            feedback_type = st.radio(
                "Feedback",
                options=[t.value for t in FeedbackType],
                format_func=lambda t: {
                    "irrelevant": "Irrelevant answer",
                    "outdated": "Outdated policy",
                    "unclear": "Unclear response",
                }.get(t, t),
                horizontal=True,
                index=None,
            )
            comment = st.text_area("Additional comments")
            submitted = st.form_submit_button("Submit Feedback")

        if submitted:
            if not feedback_type:
                st.warning("Choose a feedback type first.")
            elif chat.submit_feedback(message_id, feedback_type, comment):
                st.success("Thanks for the feedback.")
            else:
                st.warning("Feedback could not be sent.")
