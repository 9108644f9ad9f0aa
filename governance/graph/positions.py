"""Position Store - node id to last-known canvas coordinate."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator, Protocol

from .schemas import Position

logger = logging.getLogger(__name__)


class PositionStore(Protocol):
    """Key-value store of node positions."""

    def get(self, node_id: str) -> Position | None:
        ...

    def set(self, node_id: str, position: Position) -> None:
        ...


class InMemoryPositionStore:
    """Dict-backed position store.

    No eviction: graphs are tens to low hundreds of nodes.
    """

    def __init__(self, positions: dict[str, Position] | None = None):
        self._positions: dict[str, Position] = dict(positions or {})

    def get(self, node_id: str) -> Position | None:
        return self._positions.get(node_id)

    def set(self, node_id: str, position: Position) -> None:
        self._positions[node_id] = position

    def clear(self) -> None:
        self._positions.clear()

    def items(self) -> Iterator[tuple[str, Position]]:
        return iter(list(self._positions.items()))

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._positions

    def __len__(self) -> int:
        return len(self._positions)


class JsonPositionStore(InMemoryPositionStore):
    """Position store persisted to a JSON file.

    The file is rewritten after every ``set`` and read back on construction,
    so node placement survives process restarts.
    """

    def __init__(self, persist_path: str | Path):
        super().__init__()
        self._persist_path = Path(persist_path)
        if self._persist_path.exists():
            self._load()

    def set(self, node_id: str, position: Position) -> None:
        super().set(node_id, position)
        self._persist()

    def clear(self) -> None:
        super().clear()
        self._persist()

    def _load(self) -> None:
        """Load positions from the JSON file."""
        try:
            data = json.loads(self._persist_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read positions from {self._persist_path}: {e}")
            return

        if not isinstance(data, dict):
            logger.warning(f"Ignoring positions file {self._persist_path}: expected a JSON object")
            return

        for node_id, coords in data.items():
            try:
                self._positions[node_id] = Position(x=coords["x"], y=coords["y"])
            except (KeyError, TypeError, ValueError):
                logger.warning(f"Skipping malformed position for node {node_id!r}")

    def _persist(self) -> None:
        """Write all positions to the JSON file."""
        self._persist_path.parent.mkdir(parents=True, exist_ok=True)
        data = {node_id: pos.model_dump() for node_id, pos in self._positions.items()}
        self._persist_path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# Process-wide store shared across page reruns
_store: PositionStore | None = None


def get_position_store() -> PositionStore:
    """Get or create the process-wide position store.

    Uses a JSON-backed store when ``positions_path`` is configured.
    """
    global _store
    if _store is None:
        from governance.config import get_settings

        path = get_settings().positions_path
        _store = JsonPositionStore(path) if path else InMemoryPositionStore()
    return _store


def reset_position_store() -> None:
    """Reset the process-wide position store."""
    global _store
    _store = None
