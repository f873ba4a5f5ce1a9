"""LLM client port interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from app.application.dtos.llm import LLMReply


class LLMClient(ABC):
    """Port interface for LLM client."""

    @abstractmethod
    async def generate_reply(
        self,
        system_prompt: str,
        history: list[dict[str, str]],
        user_message: Optional[str] = None,
        tools: Optional[list[dict[str, Any]]] = None,
        max_tokens: int = 500,
    ) -> LLMReply:
        """
        Generate a reply, optionally proposing function calls.

        Args:
            system_prompt: System prompt to guide LLM behavior
            history: Prior turns as {"role": "user"|"assistant", "content": ...}
            user_message: Current user message, if any
            tools: Function definitions the model may call
            max_tokens: Upper bound on the reply length

        Returns:
            Reply text and proposed tool calls

        Raises:
            UpstreamUnavailableError: If the LLM call fails
        """
        pass
