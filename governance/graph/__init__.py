"""Knowledge graph engine: layout, position store, highlight projection, rendering."""

from .schemas import (
    Edge,
    KnowledgeGraph,
    Node,
    NodeType,
    Position,
    filter_edges,
)
from .positions import (
    InMemoryPositionStore,
    JsonPositionStore,
    PositionStore,
    get_position_store,
    reset_position_store,
)
from .layout import LayoutConfig, LayoutEngine
from .highlight import (
    EdgeState,
    EdgeStyle,
    HighlightProjection,
    NodeStyle,
    Viewport,
    classify,
    classify_edge,
    focus_viewport,
)
from .render import (
    DragState,
    GraphError,
    InteractionError,
    RenderSurface,
    edge_path,
)
from .seed import load_seed_graph

__all__ = [
    # Schemas
    "Edge",
    "KnowledgeGraph",
    "Node",
    "NodeType",
    "Position",
    "filter_edges",
    # Position store
    "InMemoryPositionStore",
    "JsonPositionStore",
    "PositionStore",
    "get_position_store",
    "reset_position_store",
    # Layout
    "LayoutConfig",
    "LayoutEngine",
    # Highlight
    "EdgeState",
    "EdgeStyle",
    "HighlightProjection",
    "NodeStyle",
    "Viewport",
    "classify",
    "classify_edge",
    "focus_viewport",
    # Rendering
    "DragState",
    "GraphError",
    "InteractionError",
    "RenderSurface",
    "edge_path",
    # Seed data
    "load_seed_graph",
]
