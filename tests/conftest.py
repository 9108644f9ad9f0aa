"""Pytest fixtures for test suite."""

import pytest
from unittest.mock import MagicMock

from governance.chat import GuidelinesClient, QueryResponse
from governance.graph import (
    Edge,
    InMemoryPositionStore,
    KnowledgeGraph,
    LayoutConfig,
    LayoutEngine,
    Node,
    NodeType,
    RenderSurface,
    load_seed_graph,
)


# =============================================================================
# Graph Fixtures
# =============================================================================


@pytest.fixture
def store() -> InMemoryPositionStore:
    """Empty in-memory position store."""
    return InMemoryPositionStore()


@pytest.fixture
def layout_config() -> LayoutConfig:
    """Seeded layout config for deterministic positions."""
    return LayoutConfig(width=800, height=600, seed=7)


@pytest.fixture
def engine(store: InMemoryPositionStore, layout_config: LayoutConfig) -> LayoutEngine:
    """Layout engine writing to the test store."""
    return LayoutEngine(store, layout_config)


@pytest.fixture
def privacy_graph() -> KnowledgeGraph:
    """Three nodes with one valid and one dangling edge."""
    return KnowledgeGraph(
        nodes=[
            Node(id="privacy", label="Privacy", type=NodeType.POLICY),
            Node(id="pii", label="PII Detection", type=NodeType.SUBCATEGORY),
            Node(id="gdpr", label="GDPR Compliance", type=NodeType.SUBCATEGORY),
        ],
        edges=[
            Edge(id="e1", source="privacy", target="pii"),
            Edge(id="e2", source="privacy", target="ghost"),
        ],
    )


@pytest.fixture
def seed_graph() -> KnowledgeGraph:
    """The bundled seed graph."""
    return load_seed_graph()


@pytest.fixture
def surface(store: InMemoryPositionStore, engine: LayoutEngine) -> RenderSurface:
    """Render surface sharing the test store."""
    return RenderSurface(store=store, engine=engine, width=800, height=600)


# =============================================================================
# Client Fixtures
# =============================================================================


@pytest.fixture
def client() -> MagicMock:
    """Guidelines client double answering every question with no highlight."""
    mock = MagicMock(spec=GuidelinesClient)
    mock.query.return_value = QueryResponse(answer="ok", highlighted_nodes=[])
    return mock
