"""HTTP adapter request schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from app.domain.value_objects.phone_number import normalize_phone


class CamelRequest(BaseModel):
    """Request body accepting camelCase keys (snake_case also allowed)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StartChatRequest(CamelRequest):
    """Start chat payload."""

    phone_number: str = Field(min_length=1)

    @field_validator("phone_number")
    @classmethod
    def _has_digits(cls, value: str) -> str:
        if not normalize_phone(value):
            raise ValueError("phone number must contain digits")
        return value

    model_config = ConfigDict(json_schema_extra={"example": {"phoneNumber": "+1-555-123-4567"}})


class SendMessageRequest(CamelRequest):
    """Send message payload."""

    conversation_id: int
    message: str = Field(min_length=1)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"conversationId": 1, "message": "We fill about 300 scripts a day"}
        }
    )


class ScheduleCallbackRequest(CamelRequest):
    """Schedule callback payload."""

    conversation_id: int
    preferred_time: str = Field(min_length=1)
    notes: Optional[str] = None


class SendEmailRequest(CamelRequest):
    """Send follow-up email payload."""

    conversation_id: int
    email: EmailStr
    include_pricing: bool = False


class EndConversationRequest(CamelRequest):
    """End conversation payload."""

    conversation_id: int
