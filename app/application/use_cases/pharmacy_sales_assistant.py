"""Pharmacy sales assistant: prompts and bounded calls to the LLM."""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any, Callable, Optional

from app.application.dtos.function_calls import FUNCTION_TOOLS
from app.application.dtos.llm import LLMReply
from app.application.dtos.pharmacy import Pharmacy
from app.application.errors import UpstreamUnavailableError
from app.application.ports.llm_client import LLMClient
from app.application.use_cases.assistant_messages import AssistantMessages
from app.domain.entities.conversation import ConversationState, Message, MessageRole


class PharmacySalesAssistant:
    """Builds prompts for the sales conversation and calls the LLM with a timeout."""

    # Last three exchanges are enough context for a resume message
    CONTINUATION_HISTORY_WINDOW = 6
    CONTINUATION_MAX_TOKENS = 150

    BASE_SYSTEM_PROMPT = """You are a professional sales assistant for Pharmesol, a company that provides Voice AI and Messaging AI solutions for pharmacies.

Your role:
- Be professional, friendly, and helpful
- Listen carefully and respond naturally
- Use function calls to take actions when appropriate
- Keep responses concise and conversational (2-3 sentences max)
- Focus on understanding their needs and how Pharmesol's AI solutions can help

Pharmesol Services:
- Voice AI and Messaging AI for pharmacies
- AI-enabled pharmacy assistant that automates conversations
- Patient inquiry automation (prescription refills, appointment scheduling, etc.)
- Administrative task automation
- 24/7 automated patient communication
- LLM technology specifically designed for pharmaceutical contexts
- Reduces staff workload and improves patient service
"""

    NEW_LEAD_INSTRUCTIONS = """
This is a new lead. Your goal is to:
1. Collect basic information about their pharmacy (name, contact person, location)
2. Understand their prescription volume
3. Get their email for follow-up
4. Explain how Pharmesol can help based on their volume
5. Offer to schedule a callback or send more information

Use the collect_pharmacy_info function as you learn details about their pharmacy.
Don't ask all questions at once - make it conversational and natural.
"""

    def __init__(
        self,
        llm_client: Optional[LLMClient],
        timeout_seconds: float = 30.0,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        """
        Initialize the sales assistant.

        Args:
            llm_client: LLM port implementation (None when the LLM is disabled)
            timeout_seconds: Upper bound for a single LLM call
            logger: Optional logger function (conversation_id, turn_id, component, **kwargs)
        """
        self._llm_client = llm_client
        self._timeout_seconds = timeout_seconds
        self._logger = logger

    def _log(self, conversation_id: Optional[int], turn_id: str, **kwargs: Any) -> None:
        if self._logger:
            self._logger(conversation_id, turn_id, "assistant", **kwargs)

    def build_system_prompt(self, pharmacy: Optional[Pharmacy], is_new_lead: bool) -> str:
        """
        Build the turn system prompt.

        Args:
            pharmacy: Pharmacy snapshot for returning pharmacies
            is_new_lead: Whether the caller is not in the directory

        Returns:
            System prompt text
        """
        prompt = self.BASE_SYSTEM_PROMPT

        if pharmacy is not None:
            tier = pharmacy.volume_tier
            if pharmacy.address:
                address = f"{pharmacy.address}, {pharmacy.city}, {pharmacy.state}"
            else:
                address = "Not specified"
            prompt += f"""
Current Pharmacy Information:
- Name: {pharmacy.name}
- Contact: {pharmacy.contact_person or 'Not specified'}
- Address: {address}
- Monthly Rx Volume: ~{pharmacy.rx_volume:,} prescriptions
- Volume Tier: {tier.value}
- Email: {pharmacy.email or 'Not provided'}

Talking Points:
{AssistantMessages.volume_message(tier)}

Reference their pharmacy details naturally in conversation to show familiarity.
"""
        elif is_new_lead:
            prompt += self.NEW_LEAD_INSTRUCTIONS

        return prompt

    @staticmethod
    def to_chat_history(messages: Sequence[Message]) -> list[dict[str, str]]:
        """
        Convert transcript messages to LLM chat history (SYSTEM messages are skipped).

        Args:
            messages: Transcript in chronological order

        Returns:
            List of {"role", "content"} dictionaries
        """
        return [
            {
                "role": "user" if message.role == MessageRole.USER else "assistant",
                "content": message.content,
            }
            for message in messages
            if message.role != MessageRole.SYSTEM
        ]

    async def _call_llm(self, **kwargs: Any) -> LLMReply:
        if self._llm_client is None:
            raise UpstreamUnavailableError("LLM client is not configured")
        try:
            return await asyncio.wait_for(
                self._llm_client.generate_reply(**kwargs), timeout=self._timeout_seconds
            )
        except asyncio.TimeoutError as e:
            raise UpstreamUnavailableError(
                f"LLM call timed out after {self._timeout_seconds}s"
            ) from e

    async def generate_response(
        self,
        history: Sequence[Message],
        user_message: str,
        pharmacy: Optional[Pharmacy],
        is_new_lead: bool,
    ) -> LLMReply:
        """
        Generate the assistant reply for a turn, with function calling enabled.

        Args:
            history: Transcript before the current user message
            user_message: Current user message
            pharmacy: Pharmacy snapshot, if any
            is_new_lead: Whether the caller is not in the directory

        Returns:
            Model reply with proposed tool calls

        Raises:
            UpstreamUnavailableError: If the LLM is unavailable, fails or times out
        """
        return await self._call_llm(
            system_prompt=self.build_system_prompt(pharmacy, is_new_lead),
            history=self.to_chat_history(history),
            user_message=user_message,
            tools=FUNCTION_TOOLS,
        )

    async def generate_greeting(self, pharmacy: Optional[Pharmacy]) -> str:
        """
        Generate the first message of a new conversation.

        Args:
            pharmacy: Pharmacy snapshot, or None for a new lead

        Returns:
            Greeting text
        """
        return AssistantMessages.greeting(pharmacy)

    async def generate_continuation(
        self,
        history: Sequence[Message],
        pharmacy: Optional[Pharmacy],
        state: ConversationState,
        conversation_id: Optional[int] = None,
        turn_id: str = "unknown",
    ) -> str:
        """
        Generate a short resume message for an ACTIVE conversation.

        Failures never propagate: a fixed welcome-back sentence is returned instead.

        Args:
            history: Conversation transcript
            pharmacy: Pharmacy snapshot, if any
            state: Current conversation state
            conversation_id: Conversation identifier (for logging)
            turn_id: Turn identifier (for logging)

        Returns:
            Resume message
        """
        if pharmacy is not None:
            contact = f" ({pharmacy.contact_person})" if pharmacy.contact_person else ""
            speaking_with = f"Speaking with: {pharmacy.name}{contact}"
        else:
            speaking_with = "New lead conversation"

        system_prompt = f"""You are a professional sales assistant for Pharmesol resuming a previous conversation.

Your task: Generate a brief, friendly message that:
1. Acknowledges you're continuing from a previous conversation
2. Provides a 1-sentence summary of what was discussed
3. Smoothly transitions to continue helping them

Guidelines:
- Be warm and professional
- Keep it concise (2-3 sentences total)
- Reference specific details from the conversation if available
- Match the conversation stage: {state.value}
- Don't repeat information unnecessarily

{speaking_with}"""

        recent = list(history)[-self.CONTINUATION_HISTORY_WINDOW :]
        try:
            reply = await self._call_llm(
                system_prompt=system_prompt,
                history=self.to_chat_history(recent),
                max_tokens=self.CONTINUATION_MAX_TOKENS,
            )
        except UpstreamUnavailableError as e:
            self._log(
                conversation_id,
                turn_id,
                level=logging.ERROR,
                continuation_failed=True,
                error=str(e),
            )
            return AssistantMessages.CONTINUATION_FALLBACK

        return reply.content or AssistantMessages.CONTINUATION_EMPTY
