"""Function-call argument records and tool schema exposed to the model."""

import json
import math
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import Field, ValidationError, field_validator

from app.application.dtos.base import DTO
from app.application.errors import MalformedFunctionArgumentsError, UnknownFunctionError
from app.domain.value_objects.rx_volume import RxVolumeTier

COLLECT_PHARMACY_INFO = "collect_pharmacy_info"
SCHEDULE_CALLBACK = "schedule_callback"
SEND_FOLLOWUP_EMAIL = "send_followup_email"
HIGHLIGHT_RX_BENEFITS = "highlight_rx_benefits"


class CollectPharmacyInfoArgs(DTO):
    """Arguments for collect_pharmacy_info (every field optional)."""

    pharmacy_name: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    estimated_rx_volume: Optional[int] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None

    @field_validator("estimated_rx_volume", mode="before")
    @classmethod
    def round_volume(cls, value: Any) -> Any:
        """Round fractional volumes to whole prescriptions."""
        if isinstance(value, float) and math.isfinite(value):
            return round(value)
        return value


class ScheduleCallbackArgs(DTO):
    """Arguments for schedule_callback."""

    preferred_time: str = Field(min_length=1)
    notes: Optional[str] = None


class SendFollowupEmailArgs(DTO):
    """Arguments for send_followup_email."""

    email: str = Field(min_length=1)
    include_pricing: Optional[bool] = False


class HighlightRxBenefitsArgs(DTO):
    """Arguments for highlight_rx_benefits."""

    volume_tier: RxVolumeTier

    @field_validator("volume_tier", mode="before")
    @classmethod
    def normalize_tier(cls, value: Any) -> Any:
        """Accept tier names in any case."""
        if isinstance(value, str):
            return value.strip().upper()
        return value


FunctionArguments = Union[
    CollectPharmacyInfoArgs,
    ScheduleCallbackArgs,
    SendFollowupEmailArgs,
    HighlightRxBenefitsArgs,
]

FUNCTION_ARGUMENT_MODELS: dict[str, type[DTO]] = {
    COLLECT_PHARMACY_INFO: CollectPharmacyInfoArgs,
    SCHEDULE_CALLBACK: ScheduleCallbackArgs,
    SEND_FOLLOWUP_EMAIL: SendFollowupEmailArgs,
    HIGHLIGHT_RX_BENEFITS: HighlightRxBenefitsArgs,
}


def parse_function_arguments(function_name: str, raw_arguments: Optional[str]) -> FunctionArguments:
    """
    Parse and validate the raw JSON arguments of a model function call.

    Args:
        function_name: Name of the function proposed by the model
        raw_arguments: JSON object string (empty means no arguments)

    Returns:
        Validated argument record for the function

    Raises:
        UnknownFunctionError: If the function is not supported
        MalformedFunctionArgumentsError: If the payload is not valid JSON or fails validation
    """
    model = FUNCTION_ARGUMENT_MODELS.get(function_name)
    if model is None:
        raise UnknownFunctionError(function_name)

    try:
        payload = json.loads(raw_arguments) if raw_arguments else {}
    except json.JSONDecodeError as e:
        raise MalformedFunctionArgumentsError(function_name, f"invalid JSON ({e.msg})") from e

    if not isinstance(payload, dict):
        raise MalformedFunctionArgumentsError(function_name, "arguments must be a JSON object")

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        fields = ", ".join(".".join(str(loc) for loc in err["loc"]) for err in e.errors())
        raise MalformedFunctionArgumentsError(function_name, f"invalid fields: {fields}") from e


@dataclass
class FunctionCallOutcome:
    """Result of dispatching one model function call."""

    function_name: str
    arguments: Optional[dict[str, Any]] = None
    result: str = ""
    error: Optional[str] = None
    raw_arguments: Optional[str] = None

    def to_metadata(self) -> dict[str, Any]:
        """
        Build the audit record stored on the assistant message.

        Returns:
            Dictionary with function name and parsed arguments (plus error details if any)
        """
        record: dict[str, Any] = {"function": self.function_name, "arguments": self.arguments}
        if self.error:
            record["error"] = self.error
            record["raw_arguments"] = self.raw_arguments
        return record


# OpenAI "tools" definitions, one entry per supported function
FUNCTION_TOOLS: list[dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": COLLECT_PHARMACY_INFO,
            "description": "Collect information from new pharmacy lead during the conversation",
            "parameters": {
                "type": "object",
                "properties": {
                    "pharmacy_name": {"type": "string", "description": "The name of the pharmacy"},
                    "contact_person": {
                        "type": "string",
                        "description": "Name of the person we are speaking with",
                    },
                    "email": {"type": "string", "description": "Email address for follow-up"},
                    "estimated_rx_volume": {
                        "type": "number",
                        "description": "Estimated monthly prescription volume",
                    },
                    "address": {"type": "string", "description": "Pharmacy physical address"},
                    "city": {"type": "string", "description": "City where pharmacy is located"},
                    "state": {"type": "string", "description": "State where pharmacy is located"},
                },
                "required": [],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": SCHEDULE_CALLBACK,
            "description": "Schedule a callback for the pharmacy at their preferred time",
            "parameters": {
                "type": "object",
                "properties": {
                    "preferred_time": {
                        "type": "string",
                        "description": (
                            "When they would like to be called back "
                            '(e.g., "tomorrow afternoon", "Friday at 2pm")'
                        ),
                    },
                    "notes": {
                        "type": "string",
                        "description": "Additional notes about the callback request",
                    },
                },
                "required": ["preferred_time"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": SEND_FOLLOWUP_EMAIL,
            "description": "Send a follow-up email with information about Pharmesol services",
            "parameters": {
                "type": "object",
                "properties": {
                    "email": {"type": "string", "description": "Email address to send information to"},
                    "include_pricing": {
                        "type": "boolean",
                        "description": "Whether to include pricing information in the email",
                    },
                },
                "required": ["email"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": HIGHLIGHT_RX_BENEFITS,
            "description": "Explain Pharmesol benefits based on the pharmacy's Rx volume tier",
            "parameters": {
                "type": "object",
                "properties": {
                    "volume_tier": {
                        "type": "string",
                        "enum": [tier.value for tier in RxVolumeTier],
                        "description": "The pharmacy's prescription volume tier",
                    },
                },
                "required": ["volume_tier"],
            },
        },
    },
]
