"""
Guidelines API client.

Thin wrapper over the three backend endpoints the console consumes:
graph fetch, question answering and feedback submission.
"""

from __future__ import annotations

import requests

from governance.graph.schemas import KnowledgeGraph

from .schemas import (
    ConversationTurn,
    FeedbackRequest,
    FeedbackType,
    QueryRequest,
    QueryResponse,
)

# Default API URL
DEFAULT_API_URL = "http://localhost:8000"


class GuidelinesClient:
    """Client for the guidelines backend."""

    def __init__(self, base_url: str = DEFAULT_API_URL, timeout: float | None = 30.0):
        """Initialize the guidelines client.

        Args:
            base_url: Base URL of the API server
            timeout: Per-request timeout in seconds, None to wait indefinitely
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _get(self, endpoint: str, params: dict | None = None) -> dict:
        """Make a GET request."""
        url = f"{self.base_url}{endpoint}"
        response = requests.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def _post(self, endpoint: str, data: dict) -> requests.Response:
        """Make a POST request."""
        url = f"{self.base_url}{endpoint}"
        response = requests.post(url, json=data, timeout=self.timeout)
        response.raise_for_status()
        return response

    # =========================================================================
    # Graph
    # =========================================================================

    def fetch_graph(self) -> KnowledgeGraph:
        """Fetch the guidelines graph.

        Returns:
            KnowledgeGraph parsed from ``GET /api/graph``
        """
        return KnowledgeGraph.from_api(self._get("/api/graph"))

    # =========================================================================
    # Query
    # =========================================================================

    def query(
        self,
        question: str,
        history: list[ConversationTurn] | None = None,
    ) -> QueryResponse:
        """Ask a question about the guidelines.

        Args:
            question: The user's question
            history: Prior turns, oldest first

        Returns:
            QueryResponse with answer and highlighted node ids
        """
        body = QueryRequest(question=question, conversation_history=history or [])
        response = self._post("/api/query", body.model_dump(mode="json"))
        return QueryResponse.model_validate(response.json())

    # =========================================================================
    # Feedback
    # =========================================================================

    def send_feedback(
        self,
        message_id: int | str,
        feedback_type: FeedbackType | str,
        comment: str = "",
    ) -> None:
        """Submit feedback on an assistant message.

        Args:
            message_id: Id of the rated message
            feedback_type: One of irrelevant, outdated, unclear
            comment: Free-text comment
        """
        body = FeedbackRequest(
            message_id=str(message_id),
            feedback_type=feedback_type,
            comment=comment,
        )
        self._post("/api/feedback", body.model_dump(mode="json"))


# Global client instance
_client: GuidelinesClient | None = None


def get_guidelines_client(base_url: str | None = None) -> GuidelinesClient:
    """Get or create the global guidelines client.

    Args:
        base_url: API base URL; defaults to ``Settings.api_base_url``

    Returns:
        GuidelinesClient instance
    """
    global _client
    if _client is None:
        from governance.config import get_settings

        settings = get_settings()
        _client = GuidelinesClient(
            base_url or settings.api_base_url,
            timeout=settings.request_timeout,
        )
    return _client


def reset_guidelines_client() -> None:
    """Reset the global guidelines client."""
    global _client
    _client = None
