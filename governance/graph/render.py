"""
Render Surface - SVG drawing and interaction state for the knowledge graph.

Draws nodes as rounded rectangles sized by tier and edges as arcs between
node boundaries, with arrowheads pointing source to target. Interactions
(click, drag, resize) update the shared position store without a full
relayout.
"""

from __future__ import annotations

import html
import logging
import math
import textwrap
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from .highlight import EdgeStyle, HighlightProjection, NodeStyle, Viewport, classify
from .layout import LayoutConfig, LayoutEngine
from .positions import PositionStore, get_position_store
from .schemas import Edge, KnowledgeGraph, Node, Position
from .styles import HIGHLIGHT_STROKE, NEUTRAL_STROKE, get_node_size

logger = logging.getLogger(__name__)

ARC_RATIO = 1.2
LABEL_LINE_HEIGHT = 14
LABEL_CHAR_WIDTH = 7.0


class GraphError(Exception):
    """Base error for the knowledge graph engine."""


class InteractionError(GraphError):
    """Raised for an invalid interaction, e.g. dragging an unknown node."""


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass
class NodeGeometry:
    """A node box placed on the canvas."""

    node: Node
    x: float
    y: float
    width: float
    height: float
    fx: float | None = None
    fy: float | None = None
    state: DragState = DragState.IDLE


# =============================================================================
# Geometry
# =============================================================================


def boundary_point(
    cx: float, cy: float, width: float, height: float, angle: float
) -> tuple[float, float]:
    """Point where a ray from a box centre at ``angle`` leaves the box."""
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    half_w, half_h = width / 2, height / 2
    scales = []
    if abs(cos_a) > 1e-12:
        scales.append(half_w / abs(cos_a))
    if abs(sin_a) > 1e-12:
        scales.append(half_h / abs(sin_a))
    t = min(scales) if scales else 0.0
    return cx + t * cos_a, cy + t * sin_a


def edge_path(source: NodeGeometry, target: NodeGeometry) -> str:
    """SVG arc path between the facing boundaries of two node boxes.

    Args:
        source: Source node geometry
        target: Target node geometry

    Returns:
        Path ``d`` attribute, empty for a self-loop
    """
    if source.node.id == target.node.id:
        return ""
    angle = math.atan2(target.y - source.y, target.x - source.x)
    sx, sy = boundary_point(source.x, source.y, source.width, source.height, angle)
    tx, ty = boundary_point(target.x, target.y, target.width, target.height, angle + math.pi)
    dr = math.hypot(tx - sx, ty - sy) * ARC_RATIO
    return f"M{sx:.2f},{sy:.2f}A{dr:.2f},{dr:.2f} 0 0,1 {tx:.2f},{ty:.2f}"


def wrap_label(label: str, box_width: float) -> list[str]:
    """Split a label into lines that fit inside a node box."""
    chars = max(1, int((box_width - 10) / LABEL_CHAR_WIDTH))
    return textwrap.wrap(label, width=chars, break_long_words=False) or [label]


def _escape(text: Any) -> str:
    """Escape HTML entities in text."""
    return html.escape(str(text)) if text is not None else ""


# =============================================================================
# Render Surface
# =============================================================================


class RenderSurface:
    """Holds the drawn graph and dispatches interactions back to the host.

    Layout runs once per distinct node/edge set; highlight changes only
    recompute styles.
    """

    def __init__(
        self,
        store: PositionStore | None = None,
        engine: LayoutEngine | None = None,
        width: float = 900.0,
        height: float = 600.0,
        on_node_click: Callable[[str], Any] | None = None,
    ):
        """Initialize the surface.

        Args:
            store: Position store; defaults to the process-wide store
            engine: Layout engine; defaults to one sharing ``store``
            width: Canvas width
            height: Canvas height
            on_node_click: Host callback receiving clicked node ids
        """
        self.store = store if store is not None else get_position_store()
        self.engine = engine or LayoutEngine(
            self.store, LayoutConfig(width=width, height=height)
        )
        self.width = width
        self.height = height
        self.on_node_click = on_node_click

        self.graph = KnowledgeGraph()
        self.edges: list[Edge] = []
        self.geometry: dict[str, NodeGeometry] = {}
        self.projection = HighlightProjection(highlight=frozenset())
        self._signature: tuple | None = None

    # =========================================================================
    # Updates
    # =========================================================================

    def update(
        self,
        graph: KnowledgeGraph,
        highlight: set[str] | frozenset[str] = frozenset(),
    ) -> HighlightProjection:
        """Draw ``graph`` with ``highlight`` applied.

        Args:
            graph: Graph to draw
            highlight: Highlighted node ids

        Returns:
            The resulting highlight projection
        """
        self.graph = graph
        self.edges = graph.valid_edges()
        dropped = len(graph.edges) - len(self.edges)
        if dropped:
            logger.info(f"Filtered {dropped} dangling edge(s) before rendering")

        signature = graph.signature()
        if signature != self._signature:
            positions = self.engine.layout(graph.nodes, self.edges)
            self._signature = signature
        else:
            positions = {}
            for node in graph.nodes:
                stored = self.store.get(node.id)
                if stored is not None:
                    positions[node.id] = stored

        self._place(graph.nodes, positions)
        return self.highlight(highlight)

    def highlight(self, highlight: set[str] | frozenset[str]) -> HighlightProjection:
        """Re-style the current graph for a new highlight set."""
        self.projection = classify(
            self.graph,
            highlight,
            self.positions(),
            viewport=self.projection.viewport,
            width=self.width,
            height=self.height,
        )
        return self.projection

    def positions(self) -> dict[str, Position]:
        """Current node centre positions."""
        return {nid: Position(x=g.x, y=g.y) for nid, g in self.geometry.items()}

    def _place(self, nodes: list[Node], positions: dict[str, Position]) -> None:
        geometry: dict[str, NodeGeometry] = {}
        for node in nodes:
            pos = positions.get(node.id)
            if pos is None or node.id in geometry:
                continue
            width, height = get_node_size(node.type)
            previous = self.geometry.get(node.id)
            geometry[node.id] = NodeGeometry(
                node=node,
                x=pos.x,
                y=pos.y,
                width=width,
                height=height,
                state=previous.state if previous else DragState.IDLE,
                fx=previous.fx if previous else None,
                fy=previous.fy if previous else None,
            )
        self.geometry = geometry

    # =========================================================================
    # Interactions
    # =========================================================================

    def click(self, node_id: str) -> Any:
        """Forward a node click to the host callback."""
        if self.on_node_click is None:
            return None
        return self.on_node_click(node_id)

    def drag_start(self, node_id: str) -> None:
        """Pin a node at its current position (idle -> dragging)."""
        geometry = self._geometry(node_id)
        if geometry.state is DragState.DRAGGING:
            raise InteractionError(f"Node {node_id!r} is already being dragged")
        geometry.state = DragState.DRAGGING
        geometry.fx, geometry.fy = geometry.x, geometry.y

    def drag(self, node_id: str, position: Position) -> dict[str, str]:
        """Move a dragged node and redraw the edges touching it.

        Args:
            node_id: Node being dragged
            position: New centre position

        Returns:
            Mapping of edge id to recomputed path for incident edges only
        """
        geometry = self._geometry(node_id)
        if geometry.state is not DragState.DRAGGING:
            raise InteractionError(f"Node {node_id!r} is not being dragged")
        geometry.x = geometry.fx = position.x
        geometry.y = geometry.fy = position.y
        self.store.set(node_id, position)
        return {
            edge.id: self.edge_path(edge)
            for edge in self.edges
            if node_id in (edge.source, edge.target)
        }

    def drag_end(self, node_id: str, position: Position | None = None) -> Position:
        """Release a dragged node (dragging -> idle) and store its position."""
        if position is not None:
            self.drag(node_id, position)
        geometry = self._geometry(node_id)
        if geometry.state is not DragState.DRAGGING:
            raise InteractionError(f"Node {node_id!r} is not being dragged")
        geometry.state = DragState.IDLE
        geometry.fx = geometry.fy = None
        final = Position(x=geometry.x, y=geometry.y)
        self.store.set(node_id, final)
        return final

    def resize(self, width: float, height: float) -> None:
        """Change the drawing viewport without moving nodes.

        Nodes placed by later layouts are seeded around the new centre.
        """
        if width <= 0 or height <= 0:
            raise InteractionError(f"Invalid canvas size {width}x{height}")
        self.width = width
        self.height = height
        self.engine.config.width = float(width)
        self.engine.config.height = float(height)

    def _geometry(self, node_id: str) -> NodeGeometry:
        try:
            return self.geometry[node_id]
        except KeyError:
            raise InteractionError(f"Unknown node {node_id!r}") from None

    # =========================================================================
    # SVG
    # =========================================================================

    def edge_path(self, edge: Edge) -> str:
        """Path for an edge, empty if either endpoint is not placed."""
        source = self.geometry.get(edge.source)
        target = self.geometry.get(edge.target)
        if source is None or target is None:
            return ""
        return edge_path(source, target)

    def to_svg(self) -> str:
        """Render the current graph as a standalone SVG document."""
        viewport: Viewport = self.projection.viewport

        edges_svg = "\n".join(
            self._edge_svg(edge, self.projection.edge_styles.get(edge.id))
            for edge in self.edges
        )
        # Highlighted nodes are drawn last so they sit on top
        ordered = sorted(self.geometry.values(), key=self._z_index)
        nodes_svg = "\n".join(self._node_svg(g) for g in ordered)

        return f'''<svg xmlns="http://www.w3.org/2000/svg" class="knowledge-graph"
     width="{self.width:g}" height="{self.height:g}" viewBox="0 0 {self.width:g} {self.height:g}">
    <defs>
        <filter id="glow" x="-50%" y="-50%" width="200%" height="200%">
            <feGaussianBlur stdDeviation="3" result="coloredBlur"/>
            <feMerge>
                <feMergeNode in="coloredBlur"/>
                <feMergeNode in="SourceGraphic"/>
            </feMerge>
        </filter>
        <marker id="arrowhead" viewBox="0 -5 10 10" refX="10" refY="0"
                markerWidth="6" markerHeight="6" orient="auto">
            <path d="M0,-5L10,0L0,5" fill="{NEUTRAL_STROKE}"/>
        </marker>
        <marker id="arrowhead-highlighted" viewBox="0 -5 10 10" refX="10" refY="0"
                markerWidth="6" markerHeight="6" orient="auto">
            <path d="M0,-5L10,0L0,5" fill="{HIGHLIGHT_STROKE}"/>
        </marker>
        <style>
            .link path.animated {{ stroke-dasharray: 6 4; animation: dash 1s linear infinite; }}
            @keyframes dash {{ to {{ stroke-dashoffset: -10; }} }}
            .node text {{ font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; fill: white; }}
        </style>
    </defs>
    <g class="graph-container" transform="{viewport.to_svg()}">
{edges_svg}
{nodes_svg}
    </g>
</svg>'''

    def _node_style(self, geometry: NodeGeometry) -> NodeStyle | None:
        return self.projection.node_styles.get(geometry.node.id)

    def _z_index(self, geometry: NodeGeometry) -> int:
        style = self._node_style(geometry)
        return style.z_index if style else 0

    def _edge_svg(self, edge: Edge, style: EdgeStyle | None) -> str:
        path = self.edge_path(edge)
        if not path:
            return ""
        stroke = style.stroke if style else NEUTRAL_STROKE
        width = style.stroke_width if style else 1
        opacity = style.opacity if style else 0.5
        marker = style.marker if style else "arrowhead"
        animated = ' class="animated"' if style and style.animated else ""
        state = style.state.value if style else "background"
        return (
            f'        <g class="link {state}" data-edge-id="{_escape(edge.id)}">'
            f'<path{animated} id="link-{_escape(edge.id)}" d="{path}" fill="none" '
            f'stroke="{stroke}" stroke-width="{width:g}" opacity="{opacity:g}" '
            f'marker-end="url(#{marker})"/></g>'
        )

    def _node_svg(self, geometry: NodeGeometry) -> str:
        style = self._node_style(geometry)
        node = geometry.node
        w, h = geometry.width, geometry.height
        fill = style.fill if style else "#999999"
        stroke = style.stroke if style else "#666666"
        stroke_width = style.stroke_width if style else 1
        opacity = style.opacity if style else 1.0
        glow = ' filter="url(#glow)"' if style and style.glow else ""
        weight = style.font_weight if style else "normal"

        lines = wrap_label(node.label, w)
        top = -(len(lines) * LABEL_LINE_HEIGHT) / 2 + 10
        tspans = "".join(
            f'<tspan x="0" y="{top + i * LABEL_LINE_HEIGHT:g}">{_escape(line)}</tspan>'
            for i, line in enumerate(lines)
        )
        title = _escape(node.description or node.label)

        return (
            f'        <g class="node" data-node-id="{_escape(node.id)}" '
            f'transform="translate({geometry.x:.2f},{geometry.y:.2f})" opacity="{opacity:g}">'
            f'<title>{title}</title>'
            f'<rect x="{-w / 2:g}" y="{-h / 2:g}" width="{w:g}" height="{h:g}" rx="5" ry="5" '
            f'fill="{fill}" stroke="{stroke}" stroke-width="{stroke_width:g}"{glow}/>'
            f'<text class="type-label" text-anchor="middle" dominant-baseline="hanging" '
            f'font-size="8px" font-weight="bold" x="0" y="{-h / 2 + 3:g}">'
            f'{_escape(node.type.value.upper())}</text>'
            f'<text class="main-label" text-anchor="middle" dominant-baseline="middle" '
            f'font-size="12px" font-weight="{weight}">{tspans}</text>'
            f'</g>'
        )
