"""Chat DTOs returned by the conversation orchestrator."""

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict

from app.application.dtos.base import CamelDTO
from app.application.dtos.lead import PharmacyLead
from app.application.dtos.pharmacy import Pharmacy
from app.domain.entities.conversation import ConversationState, ConversationStatus, MessageRole


class StartChatResponse(CamelDTO):
    """Result of starting (or resuming) a conversation."""

    conversation_id: int
    is_new_conversation: bool
    is_returning_pharmacy: bool
    message: str
    state: ConversationState
    pharmacy: Optional[Pharmacy] = None
    lead: Optional[PharmacyLead] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "conversationId": 1,
                "isNewConversation": True,
                "isReturningPharmacy": False,
                "message": "Hello! Thank you for calling Pharmesol. ...",
                "state": "COLLECTING_LEAD_INFO",
                "pharmacy": None,
                "lead": None,
            }
        }
    )


class SendMessageResponse(CamelDTO):
    """Result of a conversation turn."""

    message: str
    state: ConversationState
    pharmacy: Optional[Pharmacy] = None
    lead: Optional[PharmacyLead] = None


class ActionResponse(CamelDTO):
    """Result of a directly invoked action (callback, email, end)."""

    success: bool
    message: str
    state: ConversationState
    status: ConversationStatus


class MessageView(CamelDTO):
    """Transcript entry."""

    role: MessageRole
    content: str
    timestamp: datetime


class ConversationView(CamelDTO):
    """Read-only projection of a conversation and its transcript."""

    id: int
    phone_number: str
    status: ConversationStatus
    state: ConversationState
    is_returning_pharmacy: bool
    pharmacy: Optional[Pharmacy] = None
    messages: list[MessageView] = []
