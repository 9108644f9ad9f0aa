"""Schemas for the guidelines knowledge graph."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class NodeType(str, Enum):
    """Tier of a node in the guidelines graph."""

    POLICY = "Policy"
    CATEGORY = "Category"
    SUBCATEGORY = "Subcategory"
    RULE = "Rule"
    PRODUCT_TYPE = "ProductType"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> NodeType:
        """Parse a raw type string, falling back to UNKNOWN."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class Position(BaseModel):
    """A 2D canvas coordinate."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class Node(BaseModel):
    """A policy node in the guidelines graph."""

    id: str
    label: str = ""
    type: NodeType = NodeType.UNKNOWN
    description: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, value: Any) -> NodeType:
        return NodeType.parse(value)

    @field_validator("description", mode="before")
    @classmethod
    def _none_description(cls, value: Any) -> str:
        return value or ""

    @model_validator(mode="after")
    def _default_label(self) -> Node:
        if not self.label:
            self.label = self.id
        return self


class Edge(BaseModel):
    """A directed relation between two nodes."""

    id: str
    source: str
    target: str
    label: str = ""

    @field_validator("label", mode="before")
    @classmethod
    def _none_label(cls, value: Any) -> str:
        return value or ""


class KnowledgeGraph(BaseModel):
    """Nodes and edges of the guidelines graph.

    Edges may reference node ids that are not present (dangling edges).
    They are kept as received and dropped by ``valid_edges``.
    """

    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)

    def node_ids(self) -> set[str]:
        """Ids of every node in the graph."""
        return {node.id for node in self.nodes}

    def get_node(self, node_id: str) -> Node | None:
        """Get a node by ID."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def valid_edges(self) -> list[Edge]:
        """Edges whose source and target both exist, in input order."""
        return filter_edges(self.nodes, self.edges)

    def signature(self) -> tuple[frozenset[str], frozenset[tuple[str, str, str]]]:
        """Hashable identity of the node set and valid edge set."""
        return (
            frozenset(self.node_ids()),
            frozenset((e.id, e.source, e.target) for e in self.valid_edges()),
        )

    @classmethod
    def from_api(cls, payload: dict) -> KnowledgeGraph:
        """Build a graph from the ``/api/graph`` wire shape.

        Args:
            payload: Dict with ``nodes`` (``{id, data: {label, type,
                description}, style?}``) and ``edges`` (``{id, source,
                target, label?}``)

        Returns:
            KnowledgeGraph with duplicate node ids collapsed to the first
            occurrence; node and edge entries that are not objects are skipped

        Raises:
            ValueError: If the payload is not an object
        """
        if not isinstance(payload, dict):
            raise ValueError(f"Graph payload must be an object, got {type(payload).__name__}")

        nodes: list[Node] = []
        seen: set[str] = set()
        for raw in payload.get("nodes") or []:
            if not isinstance(raw, dict):
                continue
            node_id = str(raw.get("id", ""))
            if not node_id or node_id in seen:
                continue
            seen.add(node_id)
            data = raw.get("data")
            if not isinstance(data, dict):
                data = {}
            nodes.append(Node(
                id=node_id,
                label=data.get("label") or node_id,
                type=data.get("type"),
                description=data.get("description"),
            ))

        edges: list[Edge] = []
        for index, raw in enumerate(payload.get("edges") or []):
            if not isinstance(raw, dict):
                continue
            source = raw.get("source")
            target = raw.get("target")
            if not source or not target:
                continue
            edges.append(Edge(
                id=str(raw.get("id") or f"{source}-{target}-{index}"),
                source=str(source),
                target=str(target),
                label=raw.get("label"),
            ))

        return cls(nodes=nodes, edges=edges)


def filter_edges(nodes: list[Node], edges: list[Edge]) -> list[Edge]:
    """Drop edges whose source or target is not in ``nodes``.

    Args:
        nodes: Known nodes
        edges: Candidate edges

    Returns:
        Edges with both endpoints present
    """
    known = {node.id for node in nodes}
    return [e for e in edges if e.source in known and e.target in known]
