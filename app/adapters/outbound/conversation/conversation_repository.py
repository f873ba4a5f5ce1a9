"""In-memory conversation repository adapter."""

from dataclasses import replace
from typing import Optional

from app.application.ports.conversation_repository import ConversationRepository
from app.domain.entities.conversation import Conversation, ConversationStatus, Message


class InMemoryConversationRepository(ConversationRepository):
    """In-memory implementation of conversation repository."""

    def __init__(self) -> None:
        """Initialize in-memory repository."""
        self._conversations: dict[int, Conversation] = {}
        self._messages: dict[int, list[Message]] = {}
        self._next_conversation_id = 1
        self._next_message_id = 1

    def _copy(self, conversation: Conversation, with_messages: bool) -> Conversation:
        # Callers mutate what they load; storage only changes through save()
        messages = list(self._messages.get(conversation.id, [])) if with_messages else []
        return replace(conversation, messages=messages)

    async def find_active_by_phone(self, phone_number: str) -> Optional[Conversation]:
        """
        Find the ACTIVE conversation for a phone number.

        Args:
            phone_number: Normalized phone number

        Returns:
            Most recent ACTIVE conversation, or None
        """
        active = [
            conversation
            for conversation in self._conversations.values()
            if conversation.phone_number == phone_number
            and conversation.status == ConversationStatus.ACTIVE
        ]
        if not active:
            return None
        latest = max(active, key=lambda c: (c.created_at, c.id))
        return self._copy(latest, with_messages=False)

    async def get(self, conversation_id: int, with_messages: bool = False) -> Optional[Conversation]:
        """
        Get a conversation by id.

        Args:
            conversation_id: Conversation identifier
            with_messages: Whether to load the transcript

        Returns:
            Conversation entity, or None if not found
        """
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            return None
        return self._copy(conversation, with_messages)

    async def save(self, conversation: Conversation) -> Conversation:
        """
        Insert or update a conversation.

        Args:
            conversation: Conversation entity to save

        Returns:
            The saved conversation with its id assigned
        """
        if conversation.id is None:
            conversation.id = self._next_conversation_id
            self._next_conversation_id += 1
            self._messages[conversation.id] = []
        self._conversations[conversation.id] = replace(conversation, messages=[])
        return conversation

    async def append_message(self, message: Message) -> Message:
        """
        Append a message to a conversation transcript.

        Args:
            message: Message to persist

        Returns:
            The persisted message with its id assigned
        """
        stored = replace(message, id=self._next_message_id)
        self._next_message_id += 1
        self._messages.setdefault(message.conversation_id, []).append(stored)
        return stored
