"""Frontend helpers package."""

from frontend.helpers.session import (
    create_chat_session,
    get_chat_session,
    reset_chat_session,
)

__all__ = [
    "create_chat_session",
    "get_chat_session",
    "reset_chat_session",
]
