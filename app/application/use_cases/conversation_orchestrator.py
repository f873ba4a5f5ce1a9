"""Conversation orchestrator use case."""

import logging
from collections.abc import Sequence
from typing import Any, Callable, Optional

from app.application.dtos.chat import (
    ActionResponse,
    ConversationView,
    MessageView,
    SendMessageResponse,
    StartChatResponse,
)
from app.application.dtos.function_calls import FunctionCallOutcome
from app.application.dtos.lead import PharmacyLead
from app.application.dtos.pharmacy import Pharmacy
from app.application.errors import ConversationNotFoundError, UpstreamUnavailableError
from app.application.ports.conversation_repository import ConversationRepository
from app.application.ports.lead_repository import LeadRepository
from app.application.ports.pharmacy_directory import PharmacyDirectory
from app.application.use_cases.assistant_messages import AssistantMessages
from app.application.use_cases.function_call_dispatcher import FunctionCallDispatcher
from app.application.use_cases.keyed_locks import KeyedLocks
from app.application.use_cases.pharmacy_sales_assistant import PharmacySalesAssistant
from app.domain.entities.conversation import (
    Conversation,
    ConversationState,
    ConversationStatus,
    Message,
    MessageRole,
)
from app.domain.services.conversation_state_machine import ConversationEvent
from app.domain.value_objects.phone_number import mask_phone, normalize_phone


def compose_assistant_reply(content: Optional[str], function_results: Sequence[str]) -> str:
    """
    Combine the model's own text with function confirmations.

    Args:
        content: Natural-language content returned by the model
        function_results: Confirmation texts in dispatch order ("" entries are dropped)

    Returns:
        Final assistant message, or the fallback reply when everything is empty
    """
    parts = [content] if content else []
    parts.extend(result for result in function_results if result)
    return "\n\n".join(parts) or AssistantMessages.FALLBACK_REPLY


class ConversationOrchestrator:
    """Coordinates conversation start, turns, direct actions and transcript reads."""

    def __init__(
        self,
        conversation_repository: ConversationRepository,
        lead_repository: LeadRepository,
        pharmacy_directory: PharmacyDirectory,
        assistant: PharmacySalesAssistant,
        dispatcher: FunctionCallDispatcher,
        locks: Optional[KeyedLocks] = None,
        continuation_enabled: bool = False,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            conversation_repository: Repository for conversations and messages
            lead_repository: Repository for partial leads
            pharmacy_directory: Directory used to identify returning pharmacies
            assistant: Sales assistant wrapping the LLM
            dispatcher: Function call dispatcher
            locks: Per-key lock registry serializing work on the same conversation
            continuation_enabled: Use a model-written resume message for ACTIVE conversations
            logger: Optional logger function (conversation_id, turn_id, component, **kwargs)
        """
        self._conversation_repository = conversation_repository
        self._lead_repository = lead_repository
        self._pharmacy_directory = pharmacy_directory
        self._assistant = assistant
        self._dispatcher = dispatcher
        self._locks = locks or KeyedLocks()
        self._continuation_enabled = continuation_enabled
        self._logger = logger

    def _log(self, conversation_id: Optional[int], turn_id: str, **kwargs: Any) -> None:
        if self._logger:
            self._logger(conversation_id, turn_id, "orchestrator", **kwargs)

    @staticmethod
    def _pharmacy_snapshot(conversation: Conversation) -> Optional[Pharmacy]:
        if not conversation.pharmacy_data:
            return None
        return Pharmacy.model_validate(conversation.pharmacy_data)

    async def _lead_for(self, conversation: Conversation) -> Optional[PharmacyLead]:
        # Directory pharmacies never carry a lead
        if conversation.is_returning_pharmacy:
            return None
        return await self._lead_repository.get(conversation.phone_number)

    async def _load(self, conversation_id: int, with_messages: bool = False) -> Conversation:
        conversation = await self._conversation_repository.get(
            conversation_id, with_messages=with_messages
        )
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        return conversation

    async def start_chat(self, phone_number: str, turn_id: Optional[str] = None) -> StartChatResponse:
        """
        Start a conversation for a phone number, or resume its ACTIVE one.

        Args:
            phone_number: Caller phone number in any format
            turn_id: Optional turn identifier for logging

        Returns:
            Start chat response

        Raises:
            UpstreamUnavailableError: If the pharmacy directory lookup fails
        """
        turn_id = turn_id or "unknown"
        normalized = normalize_phone(phone_number)

        async with self._locks.hold(("phone", normalized)):
            conversation = await self._conversation_repository.find_active_by_phone(normalized)
            if conversation is not None:
                return await self._resume(conversation, turn_id)

            pharmacy = await self._pharmacy_directory.find_by_phone(normalized)
            lead = None if pharmacy else await self._lead_repository.get(normalized)

            # Initial state is assigned directly, not through the state machine
            conversation = Conversation(
                phone_number=normalized,
                is_returning_pharmacy=pharmacy is not None,
                pharmacy_id=pharmacy.id if pharmacy else None,
                pharmacy_data=pharmacy.model_dump(mode="json") if pharmacy else None,
                state=(
                    ConversationState.PHARMACY_IDENTIFIED
                    if pharmacy
                    else ConversationState.COLLECTING_LEAD_INFO
                ),
            )
            conversation = await self._conversation_repository.save(conversation)

            greeting = await self._assistant.generate_greeting(pharmacy)
            greeting_message = await self._conversation_repository.append_message(
                Message(
                    conversation_id=conversation.id,
                    role=MessageRole.ASSISTANT,
                    content=greeting,
                )
            )
            conversation.messages.append(greeting_message)

        self._log(
            conversation.id,
            turn_id,
            action="start_chat",
            phone=mask_phone(normalized),
            is_returning_pharmacy=conversation.is_returning_pharmacy,
            state=conversation.state.value,
        )

        return StartChatResponse(
            conversation_id=conversation.id,
            is_new_conversation=True,
            is_returning_pharmacy=conversation.is_returning_pharmacy,
            message=greeting,
            state=conversation.state,
            pharmacy=pharmacy,
            lead=lead,
        )

    async def _resume(self, conversation: Conversation, turn_id: str) -> StartChatResponse:
        pharmacy = self._pharmacy_snapshot(conversation)
        lead = await self._lead_for(conversation)

        if self._continuation_enabled:
            loaded = await self._load(conversation.id, with_messages=True)
            message = await self._assistant.generate_continuation(
                loaded.messages,
                pharmacy,
                loaded.state,
                conversation_id=conversation.id,
                turn_id=turn_id,
            )
        else:
            message = AssistantMessages.CONTINUING_CONVERSATION

        self._log(
            conversation.id,
            turn_id,
            action="resume_chat",
            phone=mask_phone(conversation.phone_number),
            state=conversation.state.value,
        )

        return StartChatResponse(
            conversation_id=conversation.id,
            is_new_conversation=False,
            is_returning_pharmacy=conversation.is_returning_pharmacy,
            message=message,
            state=conversation.state,
            pharmacy=pharmacy,
            lead=lead,
        )

    async def send_message(
        self, conversation_id: int, user_message: str, turn_id: Optional[str] = None
    ) -> SendMessageResponse:
        """
        Handle one conversation turn.

        The user message is persisted before the model is called. If the model
        call fails no assistant message is written and the error propagates.

        Args:
            conversation_id: Conversation identifier
            user_message: User message text
            turn_id: Optional turn identifier for logging

        Returns:
            Assistant reply with post-dispatch state, pharmacy snapshot and lead

        Raises:
            ConversationNotFoundError: If the conversation does not exist
            UpstreamUnavailableError: If the LLM call fails
        """
        turn_id = turn_id or "unknown"

        async with self._locks.hold(("conversation", conversation_id)):
            conversation = await self._load(conversation_id, with_messages=True)
            history = list(conversation.messages)

            stored_user_message = await self._conversation_repository.append_message(
                Message(conversation_id=conversation.id, role=MessageRole.USER, content=user_message)
            )
            conversation.messages.append(stored_user_message)

            pharmacy = self._pharmacy_snapshot(conversation)
            try:
                reply = await self._assistant.generate_response(
                    history,
                    user_message,
                    pharmacy,
                    is_new_lead=not conversation.is_returning_pharmacy,
                )
            except UpstreamUnavailableError as e:
                self._log(
                    conversation.id,
                    turn_id,
                    level=logging.ERROR,
                    action="send_message",
                    llm_error=str(e),
                )
                raise

            outcomes: list[FunctionCallOutcome] = []
            for tool_call in reply.tool_calls:
                outcomes.append(await self._dispatcher.dispatch(tool_call, conversation, turn_id))

            content = compose_assistant_reply(reply.content, [o.result for o in outcomes])
            metadata = {"tool_calls": [o.to_metadata() for o in outcomes]} if outcomes else None
            assistant_message = await self._conversation_repository.append_message(
                Message(
                    conversation_id=conversation.id,
                    role=MessageRole.ASSISTANT,
                    content=content,
                    metadata=metadata,
                )
            )
            conversation.messages.append(assistant_message)

            conversation.touch()
            await self._conversation_repository.save(conversation)
            lead = await self._lead_for(conversation)

        self._log(
            conversation.id,
            turn_id,
            action="send_message",
            function_calls=[o.function_name for o in outcomes],
            state=conversation.state.value,
            reply_length=len(content),
        )

        return SendMessageResponse(
            message=content,
            state=conversation.state,
            pharmacy=pharmacy,
            lead=lead,
        )

    async def schedule_callback(
        self,
        conversation_id: int,
        preferred_time: str,
        notes: Optional[str] = None,
        turn_id: Optional[str] = None,
    ) -> ActionResponse:
        """
        Schedule a callback outside the model loop.

        Args:
            conversation_id: Conversation identifier
            preferred_time: Requested callback time
            notes: Optional notes for the sales team
            turn_id: Optional turn identifier for logging

        Returns:
            Action response with the confirmation sentence

        Raises:
            ConversationNotFoundError: If the conversation does not exist
        """
        turn_id = turn_id or "unknown"
        async with self._locks.hold(("conversation", conversation_id)):
            conversation = await self._load(conversation_id)
            await self._dispatcher.schedule_callback(conversation, preferred_time, notes, turn_id)

        self._log(conversation.id, turn_id, action="schedule_callback")
        return ActionResponse(
            success=True,
            message=AssistantMessages.callback_scheduled_direct(preferred_time),
            state=conversation.state,
            status=conversation.status,
        )

    async def send_email(
        self,
        conversation_id: int,
        email: str,
        include_pricing: bool = False,
        turn_id: Optional[str] = None,
    ) -> ActionResponse:
        """
        Send a follow-up email outside the model loop.

        Unlike the model-issued send_followup_email call, this also fires
        FOLLOWUP_REQUESTED on the conversation (status is left unchanged).

        Args:
            conversation_id: Conversation identifier
            email: Recipient address
            include_pricing: Whether to include pricing information
            turn_id: Optional turn identifier for logging

        Returns:
            Action response with the confirmation sentence

        Raises:
            ConversationNotFoundError: If the conversation does not exist
        """
        turn_id = turn_id or "unknown"
        async with self._locks.hold(("conversation", conversation_id)):
            conversation = await self._load(conversation_id)
            await self._dispatcher.send_followup_email(conversation, email, include_pricing, turn_id)
            if self._dispatcher.apply_event(
                conversation, ConversationEvent.FOLLOWUP_REQUESTED, turn_id
            ):
                conversation.touch()
                await self._conversation_repository.save(conversation)

        self._log(conversation.id, turn_id, action="send_email", include_pricing=include_pricing)
        return ActionResponse(
            success=True,
            message=AssistantMessages.email_sent_direct(email),
            state=conversation.state,
            status=conversation.status,
        )

    async def end_conversation(
        self, conversation_id: int, turn_id: Optional[str] = None
    ) -> ActionResponse:
        """
        Close a conversation so the phone number can start a fresh one.

        Args:
            conversation_id: Conversation identifier
            turn_id: Optional turn identifier for logging

        Returns:
            Action response

        Raises:
            ConversationNotFoundError: If the conversation does not exist
        """
        turn_id = turn_id or "unknown"
        async with self._locks.hold(("conversation", conversation_id)):
            conversation = await self._load(conversation_id)
            self._dispatcher.apply_event(conversation, ConversationEvent.CONVERSATION_ENDED, turn_id)
            conversation.status = ConversationStatus.COMPLETED
            conversation.touch()
            await self._conversation_repository.save(conversation)

        self._log(conversation.id, turn_id, action="end_conversation", state=conversation.state.value)
        return ActionResponse(
            success=True,
            message=AssistantMessages.CONVERSATION_ENDED,
            state=conversation.state,
            status=conversation.status,
        )

    async def get_conversation(self, conversation_id: int) -> ConversationView:
        """
        Read a conversation and its transcript.

        Args:
            conversation_id: Conversation identifier

        Returns:
            Conversation view with messages in chronological order

        Raises:
            ConversationNotFoundError: If the conversation does not exist
        """
        conversation = await self._load(conversation_id, with_messages=True)
        return ConversationView(
            id=conversation.id,
            phone_number=conversation.phone_number,
            status=conversation.status,
            is_returning_pharmacy=conversation.is_returning_pharmacy,
            state=conversation.state,
            pharmacy=self._pharmacy_snapshot(conversation),
            messages=[
                MessageView(role=m.role, content=m.content, timestamp=m.timestamp)
                for m in conversation.messages
            ],
        )
