"""
UI shared modules for the governance console.

This package contains reusable UI components used across the pages.
"""

from frontend.ui.graph_components import (
    render_knowledge_graph,
    render_graph_fallback,
    render_type_legend,
    compute_graph_stats,
    render_graph_stats,
    summarize_edge_states,
    render_node_selector,
    render_pin_controls,
    render_chat_message,
    render_feedback_form,
)

__all__ = [
    # Graph Components
    "render_knowledge_graph",
    "render_graph_fallback",
    "render_type_legend",
    "compute_graph_stats",
    "render_graph_stats",
    "summarize_edge_states",
    "render_node_selector",
    "render_pin_controls",
    # Chat
    "render_chat_message",
    "render_feedback_form",
]
