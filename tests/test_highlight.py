"""Tests for the highlight projector."""

import pytest

from governance.graph import (
    Edge,
    EdgeState,
    KnowledgeGraph,
    Node,
    NodeType,
    Position,
    Viewport,
    classify,
    classify_edge,
    focus_viewport,
)
from governance.graph.highlight import (
    BACKGROUND_EDGE_OPACITY,
    DIMMED_OPACITY,
    NEUTRAL_EDGE_OPACITY,
    NEUTRAL_OPACITY,
)


@pytest.fixture
def chain_graph() -> KnowledgeGraph:
    """a -> b -> c -> d."""
    return KnowledgeGraph(
        nodes=[Node(id=n, type=NodeType.RULE) for n in "abcd"],
        edges=[
            Edge(id="ab", source="a", target="b"),
            Edge(id="bc", source="b", target="c"),
            Edge(id="cd", source="c", target="d"),
        ],
    )


class TestEdgeClassification:
    """Tests for the three-way edge partition."""

    def test_states(self):
        edge = Edge(id="e", source="a", target="b")
        assert classify_edge(edge, {"a", "b"}) is EdgeState.ACTIVE
        assert classify_edge(edge, {"b"}) is EdgeState.ADJACENT
        assert classify_edge(edge, {"z"}) is EdgeState.BACKGROUND

    def test_partition_covers_every_valid_edge(self, chain_graph):
        projection = classify(chain_graph, {"b", "c"})
        active = projection.edges_in(EdgeState.ACTIVE)
        adjacent = projection.edges_in(EdgeState.ADJACENT)
        background = projection.edges_in(EdgeState.BACKGROUND)

        assert active == ["bc"]
        assert sorted(adjacent) == ["ab", "cd"]
        assert background == []
        assert len(active) + len(adjacent) + len(background) == len(chain_graph.edges)

    def test_privacy_example(self, privacy_graph):
        projection = classify(privacy_graph, {"privacy", "pii"})

        assert set(projection.edge_styles) == {"e1"}
        style = projection.edge_styles["e1"]
        assert style.state is EdgeState.ACTIVE
        assert style.stroke == "#4A90E2"
        assert style.animated is True
        assert style.marker == "arrowhead-highlighted"

        gdpr = projection.node_styles["gdpr"]
        assert gdpr.highlighted is False
        assert gdpr.opacity == DIMMED_OPACITY


class TestNodeStyles:
    """Tests for per-node styling."""

    def test_highlighted_node(self, privacy_graph):
        style = classify(privacy_graph, {"privacy"}).node_styles["privacy"]
        assert style.highlighted
        assert style.opacity == 1.0
        assert style.glow
        assert style.font_weight == "bold"
        assert style.fill == "#4A90E2"
        assert style.z_index > classify(privacy_graph, {"privacy"}).node_styles["pii"].z_index

    def test_dimmed_fill_is_translucent(self, privacy_graph):
        style = classify(privacy_graph, {"privacy"}).node_styles["pii"]
        assert style.fill.startswith("rgba(")
        assert style.fill.endswith("0.6)")

    def test_neutral_state_when_empty(self, privacy_graph):
        projection = classify(privacy_graph, set())
        assert projection.highlight == frozenset()
        for style in projection.node_styles.values():
            assert not style.highlighted
            assert style.opacity == NEUTRAL_OPACITY
        assert projection.edge_styles["e1"].opacity == NEUTRAL_EDGE_OPACITY

    def test_background_edges_fade_under_highlight(self, chain_graph):
        projection = classify(chain_graph, {"a"})
        assert projection.edge_styles["cd"].opacity == BACKGROUND_EDGE_OPACITY

    def test_unknown_ids_ignored(self, privacy_graph):
        projection = classify(privacy_graph, {"ghost", "nowhere"})
        assert projection.highlight == frozenset()
        assert not any(s.highlighted for s in projection.node_styles.values())

    def test_idempotent(self, chain_graph):
        assert classify(chain_graph, {"b"}) == classify(chain_graph, {"b"})


class TestFocusViewport:
    """Tests for framing the highlighted nodes."""

    def test_empty_highlight_keeps_viewport(self, privacy_graph):
        current = Viewport(x=12, y=-8, k=0.7)
        positions = {"privacy": Position(x=0, y=0)}
        projection = classify(privacy_graph, set(), positions, viewport=current)
        assert projection.viewport == current

    def test_unplaced_highlight_keeps_viewport(self, privacy_graph):
        current = Viewport(x=3, y=4, k=1.1)
        projection = classify(privacy_graph, {"pii"}, {}, viewport=current)
        assert projection.viewport == current

    def test_single_node_clamped_to_max_scale(self):
        nodes = [Node(id="p", type=NodeType.POLICY)]
        viewport = focus_viewport(
            nodes, {"p": Position(x=100, y=200)}, frozenset({"p"}), 900, 600
        )
        assert viewport.k == pytest.approx(1.5)
        # node centre lands in the middle of the canvas
        assert viewport.x + viewport.k * 100 == pytest.approx(450)
        assert viewport.y + viewport.k * 200 == pytest.approx(300)

    def test_wide_selection_zooms_out(self):
        nodes = [Node(id="a", type=NodeType.RULE), Node(id="b", type=NodeType.RULE)]
        positions = {"a": Position(x=0, y=0), "b": Position(x=2000, y=0)}
        viewport = focus_viewport(nodes, positions, frozenset({"a", "b"}), 900, 600)
        # bounding box 2100 wide plus 100 padding
        assert viewport.k == pytest.approx(900 / 2200)

    def test_no_boxes(self):
        assert focus_viewport([Node(id="a")], {}, frozenset({"a"}), 900, 600) is None

    def test_to_svg(self):
        assert Viewport(x=10, y=20, k=1.5).to_svg() == "translate(10,20) scale(1.5)"
