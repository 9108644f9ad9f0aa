"""Seed guidelines graph shipped with the console."""

from __future__ import annotations

from pathlib import Path

import yaml

from .schemas import Edge, KnowledgeGraph, Node

DEFAULT_SEED_PATH = Path(__file__).parent / "data" / "seed_graph.yaml"


def load_seed_graph(path: str | Path | None = None) -> KnowledgeGraph:
    """Load the seed graph from YAML.

    Args:
        path: Optional YAML file; defaults to the bundled seed graph

    Returns:
        KnowledgeGraph with the seed nodes and edges
    """
    path = Path(path) if path else DEFAULT_SEED_PATH
    with open(path, encoding="utf-8") as f:
        content = yaml.safe_load(f) or {}

    nodes = [Node(**raw) for raw in content.get("nodes", [])]
    edges = [Edge(**raw) for raw in content.get("edges", [])]
    return KnowledgeGraph(nodes=nodes, edges=edges)
