"""AI Governance Console - guidelines knowledge graph and chat assistant.

The graph engine (layout, position store, highlight projection, rendering)
lives in ``governance.graph``; the assistant and its backend client in
``governance.chat``.
"""

from .graph import (
    KnowledgeGraph,
    LayoutEngine,
    RenderSurface,
    classify,
    load_seed_graph,
)
from .chat import GuidelinesChat, GuidelinesClient

__version__ = "0.1.0"

__all__ = [
    "KnowledgeGraph",
    "LayoutEngine",
    "RenderSurface",
    "classify",
    "load_seed_graph",
    "GuidelinesChat",
    "GuidelinesClient",
]
