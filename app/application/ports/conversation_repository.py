"""Conversation repository port."""

from abc import ABC, abstractmethod
from typing import Optional

from app.domain.entities.conversation import Conversation, Message


class ConversationRepository(ABC):
    """Port interface for conversation and transcript persistence."""

    @abstractmethod
    async def find_active_by_phone(self, phone_number: str) -> Optional[Conversation]:
        """
        Find the ACTIVE conversation for a phone number.

        Args:
            phone_number: Normalized phone number

        Returns:
            Conversation entity (without messages), or None if there is none
        """
        pass

    @abstractmethod
    async def get(self, conversation_id: int, with_messages: bool = False) -> Optional[Conversation]:
        """
        Get a conversation by id.

        Args:
            conversation_id: Conversation identifier
            with_messages: Whether to load the transcript in chronological order

        Returns:
            Conversation entity, or None if not found
        """
        pass

    @abstractmethod
    async def save(self, conversation: Conversation) -> Conversation:
        """
        Insert or update a conversation (messages are not written).

        Args:
            conversation: Conversation entity to save

        Returns:
            The saved conversation, with its id assigned
        """
        pass

    @abstractmethod
    async def append_message(self, message: Message) -> Message:
        """
        Append a message to a conversation transcript.

        Args:
            message: Message to persist

        Returns:
            The persisted message, with its id assigned
        """
        pass
