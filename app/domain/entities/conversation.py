"""Conversation and message entities."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class ConversationStatus(str, Enum):
    """Coarse lifecycle flag of a conversation."""

    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    FOLLOWUP_SCHEDULED = "FOLLOWUP_SCHEDULED"


class ConversationState(str, Enum):
    """Fine-grained conversation stage driven by the state machine."""

    INITIAL_GREETING = "INITIAL_GREETING"
    PHARMACY_IDENTIFIED = "PHARMACY_IDENTIFIED"
    COLLECTING_LEAD_INFO = "COLLECTING_LEAD_INFO"
    DISCUSSING_SERVICES = "DISCUSSING_SERVICES"
    SCHEDULING_FOLLOWUP = "SCHEDULING_FOLLOWUP"
    COMPLETED = "COMPLETED"


class MessageRole(str, Enum):
    """Author of a transcript message."""

    USER = "USER"
    ASSISTANT = "ASSISTANT"
    SYSTEM = "SYSTEM"


@dataclass(frozen=True)
class Message:
    """Immutable transcript message."""

    conversation_id: int
    role: MessageRole
    content: str
    metadata: Optional[dict[str, Any]] = None
    id: Optional[int] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class Conversation:
    """Conversation entity keyed by normalized phone number."""

    phone_number: str
    id: Optional[int] = None
    status: ConversationStatus = ConversationStatus.ACTIVE
    state: ConversationState = ConversationState.INITIAL_GREETING
    is_returning_pharmacy: bool = False
    pharmacy_id: Optional[str] = None
    pharmacy_data: Optional[dict[str, Any]] = None  # snapshot taken at creation
    messages: list[Message] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.now(timezone.utc)

    @property
    def is_active(self) -> bool:
        """Whether the conversation still accepts a fresh start_chat continuation."""
        return self.status == ConversationStatus.ACTIVE
