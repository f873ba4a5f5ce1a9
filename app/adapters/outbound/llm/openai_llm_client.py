"""OpenAI LLM client adapter."""

from typing import Any, Optional

from openai import AsyncOpenAI, OpenAIError

from app.application.dtos.llm import LLMReply, ToolCall
from app.application.errors import UpstreamUnavailableError
from app.application.ports.llm_client import LLMClient
from app.infrastructure.config.settings import settings


class OpenAILLMClient(LLMClient):
    """OpenAI LLM client implementation using official SDK."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[int] = None,
    ) -> None:
        """
        Initialize OpenAI LLM client.

        Args:
            api_key: OpenAI API key (defaults to settings.openai_api_key)
            model: Model name (defaults to settings.openai_model)
            timeout_seconds: Request timeout in seconds (defaults to settings.openai_timeout_seconds)
        """
        self._api_key = api_key or settings.openai_api_key
        self._model = model or settings.openai_model
        self._timeout = timeout_seconds or settings.openai_timeout_seconds

        if not self._api_key:
            raise ValueError("OpenAI API key is required")

        self._client = AsyncOpenAI(
            api_key=self._api_key,
            timeout=self._timeout,
            max_retries=1,  # Minimal retry for deterministic behavior
        )

    @staticmethod
    def build_messages(
        system_prompt: str, history: list[dict[str, str]], user_message: Optional[str]
    ) -> list[dict[str, str]]:
        """
        Build the chat completion message list.

        Args:
            system_prompt: System prompt
            history: Prior turns in chronological order
            user_message: Current user message, if any

        Returns:
            System message, then history, then the user message
        """
        messages = [{"role": "system", "content": system_prompt}]
        messages.extend(history)
        if user_message:
            messages.append({"role": "user", "content": user_message})
        return messages

    async def generate_reply(
        self,
        system_prompt: str,
        history: list[dict[str, str]],
        user_message: Optional[str] = None,
        tools: Optional[list[dict[str, Any]]] = None,
        max_tokens: int = 500,
    ) -> LLMReply:
        """
        Generate a reply using OpenAI API.

        Args:
            system_prompt: System prompt to guide LLM behavior
            history: Prior turns as {"role", "content"} dictionaries
            user_message: Current user message, if any
            tools: Function definitions the model may call
            max_tokens: Upper bound on the reply length

        Returns:
            Reply text and proposed tool calls

        Raises:
            UpstreamUnavailableError: If the API call fails or returns no choices
        """
        request: dict[str, Any] = {
            "model": self._model,
            "messages": self.build_messages(system_prompt, history, user_message),
            "temperature": 0.7,  # Balance between creativity and consistency
            "max_tokens": max_tokens,
        }
        if tools:
            request["tools"] = tools
            request["tool_choice"] = "auto"

        try:
            response = await self._client.chat.completions.create(**request)
        except OpenAIError as e:
            raise UpstreamUnavailableError(f"OpenAI API call failed: {str(e)}") from e

        if not response.choices:
            raise UpstreamUnavailableError("Empty response from OpenAI API")

        choice = response.choices[0]
        tool_calls = [
            ToolCall(
                id=call.id,
                name=call.function.name,
                arguments=call.function.arguments or "{}",
            )
            for call in choice.message.tool_calls or []
            if getattr(call, "function", None) is not None
        ]
        return LLMReply(
            content=(choice.message.content or "").strip(),
            tool_calls=tool_calls,
            finish_reason=choice.finish_reason,
        )
