"""Layout Engine - force-directed placement of guidelines graph nodes.

Nodes are seeded in per-type angular sectors around the canvas centre and
relaxed by a force simulation that runs a fixed number of ticks. The
simulation follows the d3-force model:

- alpha starts at 1 and decays toward 0 each tick
- link, many-body, centering and collision forces add to node velocity
- velocity decays before being integrated into position
- pinned nodes (``fx``/``fy``) ignore velocity and stay put

Nodes that already have a stored position are pinned for the whole run, so
re-running layout never moves nodes the user has already oriented.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import networkx as nx
import numpy as np

from .positions import InMemoryPositionStore, PositionStore
from .schemas import Edge, Node, NodeType, Position
from .styles import get_node_size

if TYPE_CHECKING:
    from governance.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class LayoutConfig:
    """Parameters of the force simulation."""

    width: float = 900.0
    height: float = 600.0
    max_iterations: int = 100

    # Forces
    link_distance: float = 150.0
    charge_strength: float = -500.0
    collision_ratio: float = 1.5  # radius = max(width, height) / ratio

    # Simulation cooling
    alpha: float = 1.0
    alpha_decay: float = 0.1
    velocity_decay: float = 0.4

    # Initial placement
    sector_count: int = 5
    sector_radius_ratio: float = 0.35
    spread_factor: float = 50.0

    seed: int | None = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> LayoutConfig:
        """Build a config from application settings."""
        return cls(
            width=float(settings.canvas_width),
            height=float(settings.canvas_height),
            max_iterations=settings.layout_iterations,
            seed=settings.layout_seed,
        )


@dataclass
class _Links:
    source: np.ndarray
    target: np.ndarray
    strength: np.ndarray
    bias: np.ndarray

    def __len__(self) -> int:
        return len(self.source)


class LayoutEngine:
    """Assigns coordinates to nodes that have no stored position."""

    def __init__(
        self,
        store: PositionStore | None = None,
        config: LayoutConfig | None = None,
    ):
        """Initialize the layout engine.

        Args:
            store: Position store read for pinned nodes and written for new ones
            config: Simulation parameters
        """
        self.store = store if store is not None else InMemoryPositionStore()
        self.config = config or LayoutConfig()

    def layout(self, nodes: list[Node], edges: list[Edge]) -> dict[str, Position]:
        """Place every node lacking a stored position.

        Args:
            nodes: Graph nodes; duplicate ids keep the first occurrence
            edges: Graph edges; dangling edges and self-loops are ignored

        Returns:
            Mapping of node id to position for all nodes
        """
        nodes = _unique_nodes(nodes)
        if not nodes:
            return {}

        stored = {node.id: self.store.get(node.id) for node in nodes}
        missing = [node for node in nodes if stored[node.id] is None]
        if not missing:
            return {node_id: pos for node_id, pos in stored.items() if pos is not None}

        rng = np.random.default_rng(self.config.seed)
        pinned = np.array([stored[node.id] is not None for node in nodes])
        xy = self._initial_positions(nodes, stored, rng)
        radii = np.array([
            max(get_node_size(node.type)) / self.config.collision_ratio for node in nodes
        ])
        links = self._build_links(nodes, edges)

        logger.debug(
            f"Laying out {len(missing)} of {len(nodes)} nodes "
            f"with {len(links)} links for {self.config.max_iterations} ticks"
        )
        xy = self._simulate(xy, pinned, radii, links, rng)

        positions: dict[str, Position] = {}
        for i, node in enumerate(nodes):
            existing = stored[node.id]
            if existing is not None:
                positions[node.id] = existing
                continue
            position = Position(x=float(xy[i, 0]), y=float(xy[i, 1]))
            self.store.set(node.id, position)
            positions[node.id] = position
        return positions

    # =========================================================================
    # Initial placement
    # =========================================================================

    def _initial_positions(
        self,
        nodes: list[Node],
        stored: dict[str, Position | None],
        rng: np.random.Generator,
    ) -> np.ndarray:
        """Seed unplaced nodes in the angular sector of their type."""
        cfg = self.config
        cx, cy = cfg.width / 2, cfg.height / 2
        radius = min(cfg.width, cfg.height) * cfg.sector_radius_ratio

        type_counts: dict[NodeType, int] = {}
        for node in nodes:
            type_counts[node.type] = type_counts.get(node.type, 0) + 1

        anchors: dict[NodeType, tuple[float, float]] = {}
        for i, node_type in enumerate(type_counts):
            angle = (i + 1) / cfg.sector_count * 2 * math.pi
            anchors[node_type] = (cx + radius * math.cos(angle), cy + radius * math.sin(angle))

        xy = np.zeros((len(nodes), 2))
        for i, node in enumerate(nodes):
            existing = stored[node.id]
            if existing is not None:
                xy[i] = (existing.x, existing.y)
                continue
            ax, ay = anchors[node.type]
            spread = cfg.spread_factor * math.sqrt(type_counts[node.type])
            jitter = (rng.random(2) - 0.5) * spread
            xy[i] = (ax + jitter[0], ay + jitter[1])
        return xy

    def _build_links(self, nodes: list[Node], edges: list[Edge]) -> _Links:
        """Index valid links and derive d3 link strength and bias from degree."""
        index = {node.id: i for i, node in enumerate(nodes)}

        graph = nx.MultiDiGraph()
        graph.add_nodes_from(index)
        for edge in edges:
            if edge.source not in index or edge.target not in index:
                logger.debug(f"Dropping dangling edge {edge.id!r}")
                continue
            if edge.source == edge.target:
                continue
            graph.add_edge(edge.source, edge.target)

        degree = dict(graph.degree())
        pairs = list(graph.edges())
        if not pairs:
            empty = np.zeros(0)
            return _Links(empty.astype(int), empty.astype(int), empty, empty)

        source = np.array([index[s] for s, _ in pairs])
        target = np.array([index[t] for _, t in pairs])
        deg_s = np.array([degree[s] for s, _ in pairs], dtype=float)
        deg_t = np.array([degree[t] for _, t in pairs], dtype=float)
        return _Links(
            source=source,
            target=target,
            strength=1.0 / np.minimum(deg_s, deg_t),
            bias=deg_s / (deg_s + deg_t),
        )

    # =========================================================================
    # Simulation
    # =========================================================================

    def _simulate(
        self,
        xy: np.ndarray,
        pinned: np.ndarray,
        radii: np.ndarray,
        links: _Links,
        rng: np.random.Generator,
    ) -> np.ndarray:
        """Run exactly ``max_iterations`` ticks of the force simulation."""
        cfg = self.config
        xy = xy.copy()
        fixed = xy.copy()
        velocity = np.zeros_like(xy)
        alpha = cfg.alpha

        for _ in range(cfg.max_iterations):
            alpha += (0.0 - alpha) * cfg.alpha_decay

            self._apply_links(xy, velocity, links, alpha, rng)
            self._apply_charge(xy, velocity, alpha, rng)
            self._apply_center(xy, pinned)
            self._apply_collision(xy, velocity, radii, rng)

            velocity *= 1.0 - cfg.velocity_decay
            xy += velocity
            xy[pinned] = fixed[pinned]
            velocity[pinned] = 0.0

        return xy

    def _apply_links(
        self,
        xy: np.ndarray,
        velocity: np.ndarray,
        links: _Links,
        alpha: float,
        rng: np.random.Generator,
    ) -> None:
        if not len(links):
            return
        s, t = links.source, links.target
        delta = (xy[t] + velocity[t]) - (xy[s] + velocity[s])
        _jiggle_zeros(delta, rng)
        length = np.hypot(delta[:, 0], delta[:, 1])
        scale = (length - self.config.link_distance) / length * alpha * links.strength
        delta *= scale[:, None]
        np.add.at(velocity, t, -delta * links.bias[:, None])
        np.add.at(velocity, s, delta * (1.0 - links.bias)[:, None])

    def _apply_charge(
        self,
        xy: np.ndarray,
        velocity: np.ndarray,
        alpha: float,
        rng: np.random.Generator,
    ) -> None:
        n = len(xy)
        if n < 2:
            return
        # delta[i, j] points from node i to node j
        delta = xy[None, :, :] - xy[:, None, :]
        off_diagonal = ~np.eye(n, dtype=bool)
        coincident = off_diagonal & (delta[..., 0] == 0) & (delta[..., 1] == 0)
        if coincident.any():
            delta[coincident, 0] = (rng.random(int(coincident.sum())) - 0.5) * 1e-6
        dist2 = (delta ** 2).sum(axis=-1)
        # Distances under 1 are softened the way d3's distanceMin does
        dist2 = np.where(dist2 < 1.0, np.sqrt(dist2), dist2)
        dist2[~off_diagonal] = np.inf
        weight = self.config.charge_strength * alpha / dist2
        velocity += (delta * weight[..., None]).sum(axis=1)

    def _apply_center(self, xy: np.ndarray, pinned: np.ndarray) -> None:
        free = ~pinned
        if not free.any():
            return
        center = np.array([self.config.width / 2, self.config.height / 2])
        shift = xy[free].mean(axis=0) - center
        xy[free] -= shift

    def _apply_collision(
        self,
        xy: np.ndarray,
        velocity: np.ndarray,
        radii: np.ndarray,
        rng: np.random.Generator,
    ) -> None:
        n = len(xy)
        if n < 2:
            return
        predicted = xy + velocity
        # delta[i, j] points from node j to node i
        delta = predicted[:, None, :] - predicted[None, :, :]
        reach = radii[:, None] + radii[None, :]
        dist2 = (delta ** 2).sum(axis=-1)
        overlap = (dist2 < reach ** 2) & ~np.eye(n, dtype=bool)
        if not overlap.any():
            return

        coincident = overlap & (dist2 == 0)
        if coincident.any():
            jitter = (rng.random(int(coincident.sum())) - 0.5) * 1e-6
            delta[coincident, 0] = jitter
            dist2 = (delta ** 2).sum(axis=-1)

        dist = np.sqrt(np.where(overlap, dist2, 1.0))
        push = np.where(overlap, (reach - dist) / dist, 0.0)
        r2 = radii ** 2
        share = r2[None, :] / (r2[:, None] + r2[None, :])
        velocity += (delta * (push * share)[..., None]).sum(axis=1)


def _jiggle_zeros(delta: np.ndarray, rng: np.random.Generator) -> None:
    """Replace exactly-zero link vectors with a tiny random x offset."""
    zero = (delta[:, 0] == 0) & (delta[:, 1] == 0)
    if zero.any():
        delta[zero, 0] = (rng.random(int(zero.sum())) - 0.5) * 1e-6


def _unique_nodes(nodes: list[Node]) -> list[Node]:
    seen: set[str] = set()
    unique = []
    for node in nodes:
        if node.id in seen:
            continue
        seen.add(node.id)
        unique.append(node)
    return unique
