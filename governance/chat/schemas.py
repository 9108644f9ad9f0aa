"""Pydantic models for the guidelines chat and its backend calls."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FeedbackType(str, Enum):
    """Reasons a user can flag an assistant answer."""

    IRRELEVANT = "irrelevant"
    OUTDATED = "outdated"
    UNCLEAR = "unclear"


class PolicyReference(BaseModel):
    """A policy section cited by an assistant answer."""

    model_config = ConfigDict(frozen=True)

    policy_id: str
    section: str


class ChatMessage(BaseModel):
    """One turn of the transcript. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    id: int
    sender: Literal["user", "ai"]
    text: str
    timestamp: str
    references: list[PolicyReference] | None = None
    highlighted_nodes: list[str] | None = None


class ConversationTurn(BaseModel):
    """A prior turn sent to the query endpoint."""

    role: Literal["user", "assistant"]
    content: str


class QueryRequest(BaseModel):
    """Request body for ``POST /api/query``."""

    question: str = Field(..., description="The user's question")
    conversation_history: list[ConversationTurn] = Field(default_factory=list)


class QueryResponse(BaseModel):
    """Response body of ``POST /api/query``."""

    answer: str = ""
    highlighted_nodes: list[str] = Field(default_factory=list)

    @field_validator("answer", mode="before")
    @classmethod
    def _none_answer(cls, value: object) -> object:
        return value or ""

    @field_validator("highlighted_nodes", mode="before")
    @classmethod
    def _none_nodes(cls, value: object) -> object:
        return value or []


class FeedbackRequest(BaseModel):
    """Request body for ``POST /api/feedback``."""

    message_id: str
    feedback_type: FeedbackType
    comment: str = ""
