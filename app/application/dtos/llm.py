"""LLM exchange DTOs."""

from typing import Optional

from app.application.dtos.base import DTO


class ToolCall(DTO):
    """Function invocation proposed by the model, arguments still as raw JSON."""

    name: str
    arguments: str = "{}"
    id: Optional[str] = None


class LLMReply(DTO):
    """Model output for one turn."""

    content: str = ""
    tool_calls: list[ToolCall] = []
    finish_reason: Optional[str] = None
