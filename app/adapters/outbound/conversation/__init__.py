"""Conversation repository adapters."""

from app.adapters.outbound.conversation.conversation_repository import (
    InMemoryConversationRepository,
)
from app.adapters.outbound.conversation.postgres_conversation_repository import (
    PostgresConversationRepository,
)

__all__ = [
    "InMemoryConversationRepository",
    "PostgresConversationRepository",
]
