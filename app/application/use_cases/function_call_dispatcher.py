"""Dispatcher for model-issued function calls."""

import json
import logging
from typing import Any, Callable, Optional

from app.application.dtos.function_calls import (
    CollectPharmacyInfoArgs,
    FunctionArguments,
    FunctionCallOutcome,
    HighlightRxBenefitsArgs,
    ScheduleCallbackArgs,
    SendFollowupEmailArgs,
    parse_function_arguments,
)
from app.application.dtos.lead import PharmacyLead
from app.application.dtos.llm import ToolCall
from app.application.dtos.pharmacy import Pharmacy
from app.application.errors import MalformedFunctionArgumentsError, UnknownFunctionError
from app.application.ports.conversation_repository import ConversationRepository
from app.application.ports.lead_repository import LeadRepository
from app.application.ports.notification_gateway import CallbackScheduler, EmailSender
from app.application.use_cases.assistant_messages import AssistantMessages
from app.domain.entities.conversation import Conversation, ConversationStatus
from app.domain.services.conversation_state_machine import (
    ConversationEvent,
    ConversationStateMachine,
)
from app.domain.value_objects.phone_number import mask_phone
from app.domain.value_objects.rx_volume import RxVolumeTier


def _parse_json_object(raw_arguments: Optional[str]) -> Optional[dict[str, Any]]:
    """Best-effort decode of raw arguments for the audit trail."""
    try:
        payload = json.loads(raw_arguments) if raw_arguments else {}
    except json.JSONDecodeError:
        return None
    return payload if isinstance(payload, dict) else None


class FunctionCallDispatcher:
    """Applies model function calls to lead and conversation state."""

    def __init__(
        self,
        conversation_repository: ConversationRepository,
        lead_repository: LeadRepository,
        callback_scheduler: CallbackScheduler,
        email_sender: EmailSender,
        state_machine: Optional[ConversationStateMachine] = None,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        """
        Initialize dispatcher.

        Args:
            conversation_repository: Repository used to commit state changes
            lead_repository: Repository for partial leads
            callback_scheduler: Outbound callback collaborator
            email_sender: Outbound email collaborator
            state_machine: Conversation state machine (default instance if omitted)
            logger: Optional logger function (conversation_id, turn_id, component, **kwargs)
        """
        self._conversation_repository = conversation_repository
        self._lead_repository = lead_repository
        self._callback_scheduler = callback_scheduler
        self._email_sender = email_sender
        self._state_machine = state_machine or ConversationStateMachine()
        self._logger = logger

    def _log(
        self, conversation_id: Optional[int], turn_id: str, component: str, **kwargs: Any
    ) -> None:
        if self._logger:
            self._logger(conversation_id, turn_id, component, **kwargs)

    async def dispatch(
        self, tool_call: ToolCall, conversation: Conversation, turn_id: str = "unknown"
    ) -> FunctionCallOutcome:
        """
        Parse and apply one model function call.

        Unknown functions and malformed arguments are logged and skipped; they
        contribute an empty result and never abort the turn.

        Args:
            tool_call: Function call proposed by the model
            conversation: Conversation the call applies to (mutated in place)
            turn_id: Turn identifier for logging

        Returns:
            Outcome with parsed arguments and the confirmation text ("" for none)
        """
        try:
            arguments = parse_function_arguments(tool_call.name, tool_call.arguments)
        except UnknownFunctionError as e:
            self._log(
                conversation.id,
                turn_id,
                "dispatcher",
                level=logging.WARNING,
                function_name=tool_call.name,
                unknown_function=True,
            )
            return FunctionCallOutcome(
                function_name=tool_call.name,
                arguments=_parse_json_object(tool_call.arguments),
                error=str(e),
                raw_arguments=tool_call.arguments,
            )
        except MalformedFunctionArgumentsError as e:
            self._log(
                conversation.id,
                turn_id,
                "dispatcher",
                level=logging.WARNING,
                function_name=tool_call.name,
                malformed_arguments=e.reason,
            )
            return FunctionCallOutcome(
                function_name=tool_call.name,
                error=str(e),
                raw_arguments=tool_call.arguments,
            )

        self._log(conversation.id, turn_id, "dispatcher", function_name=tool_call.name)
        result = await self.execute(arguments, conversation, turn_id)
        return FunctionCallOutcome(
            function_name=tool_call.name,
            arguments=arguments.model_dump(mode="json", exclude_unset=True),
            result=result,
        )

    async def execute(
        self, arguments: FunctionArguments, conversation: Conversation, turn_id: str = "unknown"
    ) -> str:
        """
        Apply a validated argument record.

        Args:
            arguments: Validated function arguments
            conversation: Conversation the call applies to
            turn_id: Turn identifier for logging

        Returns:
            Confirmation text ("" when the model reply should stand on its own)
        """
        if isinstance(arguments, CollectPharmacyInfoArgs):
            return await self.collect_pharmacy_info(conversation, arguments, turn_id)
        if isinstance(arguments, ScheduleCallbackArgs):
            await self.schedule_callback(
                conversation, arguments.preferred_time, arguments.notes, turn_id
            )
            return AssistantMessages.callback_scheduled(arguments.preferred_time)
        if isinstance(arguments, SendFollowupEmailArgs):
            await self.send_followup_email(
                conversation, arguments.email, bool(arguments.include_pricing), turn_id
            )
            return AssistantMessages.email_sent(arguments.email)
        if isinstance(arguments, HighlightRxBenefitsArgs):
            return self.highlight_rx_benefits(arguments.volume_tier)
        raise TypeError(f"Unsupported function arguments: {type(arguments).__name__}")

    def apply_event(
        self, conversation: Conversation, event: ConversationEvent, turn_id: str = "unknown"
    ) -> bool:
        """
        Fire a state machine event on a conversation.

        Args:
            conversation: Conversation to update in place
            event: Event to fire
            turn_id: Turn identifier for logging

        Returns:
            True if the state changed
        """
        state_before = conversation.state
        conversation.state = self._state_machine.transition(state_before, event)
        changed = conversation.state != state_before
        self._log(
            conversation.id,
            turn_id,
            "state_machine",
            level=logging.INFO if changed else logging.WARNING,
            event=event.value,
            state_before=state_before.value,
            state_after=conversation.state.value,
            transition_applied=changed,
        )
        return changed

    async def collect_pharmacy_info(
        self, conversation: Conversation, arguments: CollectPharmacyInfoArgs, turn_id: str = "unknown"
    ) -> str:
        """
        Merge collected lead fields and advance the conversation when qualified.

        Args:
            conversation: Conversation whose phone number keys the lead
            arguments: Fields supplied by the model
            turn_id: Turn identifier for logging

        Returns:
            Empty string; the model reply carries the conversation forward
        """
        existing = await self._lead_repository.get(conversation.phone_number)
        lead = existing or PharmacyLead(phone_number=conversation.phone_number)
        merged = lead.merge(**arguments.model_dump())

        if merged is not lead:
            await self._lead_repository.save(merged)
            self._log(
                conversation.id,
                turn_id,
                "lead",
                lead_phone=mask_phone(merged.phone_number),
                lead_created=existing is None,
                lead_missing_fields=merged.missing_required_fields(),
            )

        if merged.has_required_info():
            if self.apply_event(conversation, ConversationEvent.INFO_COLLECTED, turn_id):
                conversation.touch()
                await self._conversation_repository.save(conversation)
                self._log(
                    conversation.id,
                    turn_id,
                    "lead",
                    lead_info_collected=merged.pharmacy_name,
                )

        return ""

    async def schedule_callback(
        self,
        conversation: Conversation,
        preferred_time: str,
        notes: Optional[str] = None,
        turn_id: str = "unknown",
    ) -> None:
        """
        Schedule a callback and mark the conversation as followed up.

        Args:
            conversation: Conversation to update
            preferred_time: Requested callback time
            notes: Optional notes for the sales team
            turn_id: Turn identifier for logging
        """
        await self._callback_scheduler.schedule_callback(
            conversation.phone_number, preferred_time, notes
        )
        self.apply_event(conversation, ConversationEvent.FOLLOWUP_REQUESTED, turn_id)
        conversation.status = ConversationStatus.FOLLOWUP_SCHEDULED
        conversation.touch()
        await self._conversation_repository.save(conversation)

    async def send_followup_email(
        self,
        conversation: Conversation,
        email: str,
        include_pricing: bool = False,
        turn_id: str = "unknown",
    ) -> None:
        """
        Send a follow-up email tailored to the conversation's pharmacy snapshot.

        Conversation state is not changed.

        Args:
            conversation: Conversation providing the pharmacy snapshot
            email: Recipient address
            include_pricing: Whether to include the pricing section
            turn_id: Turn identifier for logging
        """
        pharmacy = (
            Pharmacy.model_validate(conversation.pharmacy_data)
            if conversation.pharmacy_data
            else None
        )
        await self._email_sender.send_followup_email(email, pharmacy, include_pricing)
        self._log(conversation.id, turn_id, "dispatcher", followup_email_sent=True)

    def highlight_rx_benefits(self, volume_tier: RxVolumeTier) -> str:
        """Return the canned talking point for a volume tier."""
        return AssistantMessages.volume_message(volume_tier)
