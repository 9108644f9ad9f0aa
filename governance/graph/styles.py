"""Node tier colours and sizes."""

from __future__ import annotations

from typing import NamedTuple

from .schemas import NodeType


class TierColor(NamedTuple):
    fill: str
    stroke: str


class TierSize(NamedTuple):
    width: float
    height: float


NODE_COLORS: dict[NodeType, TierColor] = {
    NodeType.POLICY: TierColor("#4A90E2", "#2171C7"),
    NodeType.CATEGORY: TierColor("#E67E22", "#B35C0F"),
    NodeType.SUBCATEGORY: TierColor("#67B7DC", "#4295BA"),
    NodeType.RULE: TierColor("#E74C3C", "#B83024"),
    NodeType.PRODUCT_TYPE: TierColor("#F5B041", "#D4932A"),
}
DEFAULT_COLOR = TierColor("#999999", "#666666")

NODE_SIZES: dict[NodeType, TierSize] = {
    NodeType.POLICY: TierSize(140, 60),
    NodeType.CATEGORY: TierSize(120, 50),
    NodeType.SUBCATEGORY: TierSize(110, 45),
}
DEFAULT_SIZE = TierSize(100, 40)

HIGHLIGHT_STROKE = "#4A90E2"
NEUTRAL_STROKE = "#aaaaaa"


def get_node_color(node_type: NodeType) -> TierColor:
    """Get fill and stroke colours for a node tier."""
    return NODE_COLORS.get(node_type, DEFAULT_COLOR)


def get_node_size(node_type: NodeType) -> TierSize:
    """Get box width and height for a node tier."""
    return NODE_SIZES.get(node_type, DEFAULT_SIZE)


def with_alpha(hex_color: str, alpha: float) -> str:
    """Convert ``#rrggbb`` to an ``rgba()`` string with the given alpha.

    Args:
        hex_color: Colour as ``#rgb`` or ``#rrggbb``
        alpha: Opacity between 0 and 1

    Returns:
        CSS rgba colour string
    """
    value = hex_color.lstrip("#")
    if len(value) == 3:
        value = "".join(c * 2 for c in value)
    r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    alpha = min(max(alpha, 0.0), 1.0)
    return f"rgba({r}, {g}, {b}, {alpha:g})"
