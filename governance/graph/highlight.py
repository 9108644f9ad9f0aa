"""Highlight Projector - derives node and edge visual state from a highlight set.

``classify`` is a pure function of the graph, the highlight set and the
node positions. It holds no state and is recomputed in full whenever the
highlight set changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping

from .schemas import Edge, KnowledgeGraph, Node, Position
from .styles import (
    HIGHLIGHT_STROKE,
    NEUTRAL_STROKE,
    get_node_color,
    get_node_size,
    with_alpha,
)

# Node opacity
HIGHLIGHTED_OPACITY = 1.0
DIMMED_OPACITY = 0.15
NEUTRAL_OPACITY = 0.6

# Edge opacity
ACTIVE_EDGE_OPACITY = 1.0
ADJACENT_EDGE_OPACITY = 0.9
BACKGROUND_EDGE_OPACITY = 0.05
NEUTRAL_EDGE_OPACITY = 0.5

FOCUS_PADDING = 50.0
MAX_FOCUS_SCALE = 1.5


class EdgeState(str, Enum):
    """Three-way classification of an edge against a highlight set."""

    ACTIVE = "active"          # both endpoints highlighted
    ADJACENT = "adjacent"      # exactly one endpoint highlighted
    BACKGROUND = "background"  # neither endpoint highlighted


@dataclass(frozen=True)
class NodeStyle:
    """Visual state of a node."""

    node_id: str
    highlighted: bool
    fill: str
    stroke: str
    stroke_width: float
    opacity: float
    glow: bool
    font_weight: str
    z_index: int


@dataclass(frozen=True)
class EdgeStyle:
    """Visual state of an edge."""

    edge_id: str
    state: EdgeState
    stroke: str
    stroke_width: float
    opacity: float
    marker: str
    animated: bool


@dataclass(frozen=True)
class Viewport:
    """Pan/zoom transform: screen = world * k + (x, y)."""

    x: float = 0.0
    y: float = 0.0
    k: float = 1.0

    def to_svg(self) -> str:
        return f"translate({self.x:g},{self.y:g}) scale({self.k:g})"


@dataclass(frozen=True)
class HighlightProjection:
    """Derived visual state of a whole graph."""

    highlight: frozenset[str]
    node_styles: dict[str, NodeStyle] = field(default_factory=dict)
    edge_styles: dict[str, EdgeStyle] = field(default_factory=dict)
    viewport: Viewport = field(default_factory=Viewport)

    def edges_in(self, state: EdgeState) -> list[str]:
        """Ids of edges classified as ``state``."""
        return [eid for eid, style in self.edge_styles.items() if style.state == state]


def classify_edge(edge: Edge, highlight: frozenset[str] | set[str]) -> EdgeState:
    """Classify an edge by how many of its endpoints are highlighted."""
    hits = (edge.source in highlight) + (edge.target in highlight)
    if hits == 2:
        return EdgeState.ACTIVE
    if hits == 1:
        return EdgeState.ADJACENT
    return EdgeState.BACKGROUND


def node_style(node: Node, highlight: frozenset[str]) -> NodeStyle:
    """Style a node against a highlight set.

    An empty highlight set yields the neutral dimmed state shown while a
    query is in flight.
    """
    color = get_node_color(node.type)
    if node.id in highlight:
        return NodeStyle(
            node_id=node.id,
            highlighted=True,
            fill=color.fill,
            stroke=color.stroke,
            stroke_width=2,
            opacity=HIGHLIGHTED_OPACITY,
            glow=True,
            font_weight="bold",
            z_index=10,
        )
    return NodeStyle(
        node_id=node.id,
        highlighted=False,
        fill=with_alpha(color.fill, 0.6),
        stroke=with_alpha(color.stroke, 0.6),
        stroke_width=1,
        opacity=DIMMED_OPACITY if highlight else NEUTRAL_OPACITY,
        glow=False,
        font_weight="normal",
        z_index=1,
    )


def edge_style(edge: Edge, highlight: frozenset[str]) -> EdgeStyle:
    """Style an edge from its three-way classification."""
    state = classify_edge(edge, highlight)
    if state is EdgeState.ACTIVE:
        return EdgeStyle(
            edge_id=edge.id,
            state=state,
            stroke=HIGHLIGHT_STROKE,
            stroke_width=2,
            opacity=ACTIVE_EDGE_OPACITY,
            marker="arrowhead-highlighted",
            animated=True,
        )
    if state is EdgeState.ADJACENT:
        opacity = ADJACENT_EDGE_OPACITY
    else:
        opacity = BACKGROUND_EDGE_OPACITY if highlight else NEUTRAL_EDGE_OPACITY
    return EdgeStyle(
        edge_id=edge.id,
        state=state,
        stroke=NEUTRAL_STROKE,
        stroke_width=1,
        opacity=opacity,
        marker="arrowhead",
        animated=False,
    )


def focus_viewport(
    nodes: Iterable[Node],
    positions: Mapping[str, Position],
    highlight: frozenset[str],
    width: float,
    height: float,
    padding: float = FOCUS_PADDING,
    max_scale: float = MAX_FOCUS_SCALE,
) -> Viewport | None:
    """Compute a pan/zoom transform framing the highlighted nodes.

    Args:
        nodes: Graph nodes
        positions: Node centre positions
        highlight: Highlighted node ids
        width: Canvas width
        height: Canvas height
        padding: Margin added around the bounding box
        max_scale: Upper bound on zoom so a single node is not over-zoomed

    Returns:
        Viewport, or None when no highlighted node has a position
    """
    boxes = []
    for node in nodes:
        if node.id not in highlight or node.id not in positions:
            continue
        pos = positions[node.id]
        w, h = get_node_size(node.type)
        boxes.append((pos.x - w / 2, pos.y - h / 2, pos.x + w / 2, pos.y + h / 2))

    if not boxes:
        return None

    min_x = min(b[0] for b in boxes)
    min_y = min(b[1] for b in boxes)
    max_x = max(b[2] for b in boxes)
    max_y = max(b[3] for b in boxes)

    dx = max_x - min_x + padding * 2
    dy = max_y - min_y + padding * 2
    scale = min(width / dx, height / dy, max_scale)

    center_x = (min_x + max_x) / 2
    center_y = (min_y + max_y) / 2
    return Viewport(
        x=width / 2 - scale * center_x,
        y=height / 2 - scale * center_y,
        k=scale,
    )


def classify(
    graph: KnowledgeGraph,
    highlight: Iterable[str],
    positions: Mapping[str, Position] | None = None,
    *,
    viewport: Viewport | None = None,
    width: float = 900.0,
    height: float = 600.0,
    padding: float = FOCUS_PADDING,
    max_scale: float = MAX_FOCUS_SCALE,
) -> HighlightProjection:
    """Project a highlight set onto the graph.

    Args:
        graph: Nodes and edges; dangling edges are left out of the result
        highlight: Highlighted node ids; ids not in the graph are ignored
        positions: Node positions used for the focus viewport
        viewport: Current viewport, returned unchanged when there is
            nothing to focus on
        width: Canvas width
        height: Canvas height
        padding: Focus box padding
        max_scale: Maximum focus zoom

    Returns:
        HighlightProjection with per-node and per-edge styles and viewport
    """
    highlight_set = frozenset(highlight) & graph.node_ids()
    current = viewport or Viewport()

    node_styles = {node.id: node_style(node, highlight_set) for node in graph.nodes}
    edge_styles = {edge.id: edge_style(edge, highlight_set) for edge in graph.valid_edges()}

    focused = None
    if highlight_set:
        focused = focus_viewport(
            graph.nodes,
            positions or {},
            highlight_set,
            width,
            height,
            padding=padding,
            max_scale=max_scale,
        )

    return HighlightProjection(
        highlight=highlight_set,
        node_styles=node_styles,
        edge_styles=edge_styles,
        viewport=focused or current,
    )
