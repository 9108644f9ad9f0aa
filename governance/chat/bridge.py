"""Chat/Graph bridge - connects the guidelines assistant to the graph view.

Each question resets the graph to a neutral state, goes to the query
endpoint together with the prior turns, and the node ids returned with the
answer become the new highlight set.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

import requests

from governance.graph.render import RenderSurface
from governance.graph.schemas import KnowledgeGraph, NodeType
from governance.graph.seed import load_seed_graph

from .schemas import ChatMessage, ConversationTurn, FeedbackType, PolicyReference

if TYPE_CHECKING:
    from governance.graph.highlight import HighlightProjection

    from .client import GuidelinesClient

logger = logging.getLogger(__name__)

WELCOME_TEXT = (
    "Welcome to Guidelines Guru! I'm here to help you understand and navigate "
    "our AI guidelines and policies. What would you like to know?"
)
NO_ANSWER_TEXT = "I'm sorry, I couldn't find an answer to that question."
ERROR_TEXT = "I'm sorry, there was an error processing your request. Please try again."


class GuidelinesChat:
    """Transcript, highlight state and backend calls for one chat session."""

    def __init__(
        self,
        client: "GuidelinesClient",
        surface: RenderSurface | None = None,
        graph: KnowledgeGraph | None = None,
    ):
        """Initialize the chat session.

        Args:
            client: Backend client
            surface: Render surface the highlight set is projected onto
            graph: Starting graph; defaults to the seed graph
        """
        self.client = client
        self.surface = surface or RenderSurface()
        self.graph = graph if graph is not None else load_seed_graph()
        self.highlight: frozenset[str] = frozenset()
        self.draft = ""
        self.searching = False
        self._messages: list[ChatMessage] = []

        if self.surface.on_node_click is None:
            self.surface.on_node_click = self.node_question

        self._append("ai", WELCOME_TEXT)
        self.surface.update(self.graph, self.highlight)

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        """The transcript, oldest first."""
        return tuple(self._messages)

    @property
    def projection(self) -> "HighlightProjection":
        return self.surface.projection

    @property
    def latest_highlight(self) -> frozenset[str]:
        """Highlight set of the most recent answer that carried one."""
        for message in reversed(self._messages):
            if message.sender == "ai" and message.highlighted_nodes:
                return frozenset(message.highlighted_nodes)
        return frozenset()

    # =========================================================================
    # Graph
    # =========================================================================

    def load_graph(self) -> bool:
        """Replace the graph with the backend's, keeping the current one on failure.

        Returns:
            True if the backend graph was loaded
        """
        try:
            graph = self.client.fetch_graph()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Graph fetch failed, keeping current graph: {e}")
            return False

        if not graph.nodes:
            logger.info("Backend returned an empty graph, keeping current graph")
            return False

        self.graph = graph
        self.surface.update(self.graph, self.highlight)
        return True

    def set_highlight(self, node_ids: set[str] | frozenset[str]) -> "HighlightProjection":
        """Apply a highlight set to the graph view."""
        self.highlight = frozenset(node_ids)
        return self.surface.highlight(self.highlight)

    # =========================================================================
    # Chat
    # =========================================================================

    def send(self, question: str) -> ChatMessage | None:
        """Send a question and record the answer.

        Args:
            question: The user's question; blank input is ignored

        Returns:
            The assistant message, or None for blank input
        """
        if not question or not question.strip():
            return None

        history = self._history()
        self._append("user", question)
        self.draft = ""

        # Neutral state until the answer arrives
        self.set_highlight(frozenset())
        self.searching = True
        try:
            response = self.client.query(question, history)
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Query failed: {e}")
            return self._append("ai", ERROR_TEXT)
        finally:
            self.searching = False

        message = self._append(
            "ai",
            response.answer or NO_ANSWER_TEXT,
            highlighted_nodes=list(response.highlighted_nodes),
        )
        if response.highlighted_nodes:
            logger.debug(f"Highlighting nodes: {response.highlighted_nodes}")
            self.set_highlight(frozenset(response.highlighted_nodes))
        return message

    def node_question(self, node_id: str) -> str:
        """Turn a clicked node into a question and place it in the draft.

        The question is not submitted.
        """
        node = self.graph.get_node(node_id)
        label = node.label if node else node_id

        question = f"Tell me about {label}"
        if node and node.type is not NodeType.UNKNOWN:
            question += f" {node.type.value.lower()}"
        if node and node.description:
            question += f'. The description says: "{node.description}"'

        self.draft = question
        return question

    def submit_feedback(
        self,
        message_id: int,
        feedback_type: FeedbackType | str,
        comment: str = "",
    ) -> bool:
        """Send feedback on an assistant message.

        Args:
            message_id: Id of the rated message
            feedback_type: irrelevant, outdated or unclear
            comment: Optional free-text comment

        Returns:
            True if the backend accepted the feedback

        Raises:
            ValueError: If no valid feedback type is given
        """
        if not feedback_type:
            raise ValueError("A feedback type is required")
        feedback_type = FeedbackType(feedback_type)

        try:
            self.client.send_feedback(message_id, feedback_type, comment)
        except requests.RequestException as e:
            logger.warning(f"Feedback submission failed for message {message_id}: {e}")
            return False

        logger.info(f"Feedback submitted for message {message_id}: {feedback_type.value}")
        return True

    # =========================================================================
    # Transcript
    # =========================================================================

    def _append(
        self,
        sender: str,
        text: str,
        highlighted_nodes: list[str] | None = None,
        references: list[PolicyReference] | None = None,
    ) -> ChatMessage:
        message = ChatMessage(
            id=len(self._messages) + 1,
            sender=sender,
            text=text,
            timestamp=datetime.now().strftime("%H:%M:%S"),
            references=references,
            highlighted_nodes=highlighted_nodes,
        )
        self._messages.append(message)
        return message

    def _history(self) -> list[ConversationTurn]:
        """Prior turns for the query endpoint, welcome message excluded."""
        return [
            ConversationTurn(
                role="user" if m.sender == "user" else "assistant",
                content=m.text,
            )
            for m in self._messages
            if m.id > 1
        ]
