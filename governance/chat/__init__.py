"""Guidelines chat assistant: backend client and chat/graph bridge."""

from .schemas import (
    ChatMessage,
    ConversationTurn,
    FeedbackRequest,
    FeedbackType,
    PolicyReference,
    QueryRequest,
    QueryResponse,
)
from .client import (
    GuidelinesClient,
    get_guidelines_client,
    reset_guidelines_client,
)
from .bridge import GuidelinesChat

__all__ = [
    "ChatMessage",
    "ConversationTurn",
    "FeedbackRequest",
    "FeedbackType",
    "PolicyReference",
    "QueryRequest",
    "QueryResponse",
    "GuidelinesClient",
    "get_guidelines_client",
    "reset_guidelines_client",
    "GuidelinesChat",
]
