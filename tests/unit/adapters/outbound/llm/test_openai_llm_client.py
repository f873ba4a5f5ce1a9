"""Unit tests for OpenAILLMClient."""

from unittest.mock import AsyncMock, Mock, patch

import httpx
import openai
import pytest

from app.adapters.outbound.llm.openai_llm_client import OpenAILLMClient
from app.application.errors import UpstreamUnavailableError
from app.application.ports.llm_client import LLMClient


def _response(content="Hello from the model.", tool_calls=None, choices=True):
    """Create a mock OpenAI chat completion response."""
    mock_choice = Mock()
    mock_choice.message.content = content
    mock_choice.message.tool_calls = tool_calls
    mock_choice.finish_reason = "tool_calls" if tool_calls else "stop"

    mock_response = Mock()
    mock_response.choices = [mock_choice] if choices else []
    return mock_response


def _tool_call(call_id, name, arguments):
    """Create a mock tool call."""
    call = Mock()
    call.id = call_id
    call.function.name = name
    call.function.arguments = arguments
    return call


@pytest.fixture
def openai_client():
    """Create OpenAILLMClient with test API key."""
    with patch("app.adapters.outbound.llm.openai_llm_client.AsyncOpenAI") as mock_openai_class:
        mock_client_instance = Mock()
        mock_client_instance.chat.completions.create = AsyncMock()
        mock_openai_class.return_value = mock_client_instance
        client = OpenAILLMClient(api_key="test-api-key", model="gpt-4o-mini", timeout_seconds=5)
        yield client


def test_openai_client_implements_llm_client_port(openai_client):
    """Test that OpenAILLMClient implements LLMClient port."""
    assert isinstance(openai_client, LLMClient)


def test_openai_client_raises_error_when_api_key_missing(monkeypatch):
    """Test that OpenAILLMClient raises error when API key is missing."""
    monkeypatch.setattr(
        "app.adapters.outbound.llm.openai_llm_client.settings.openai_api_key", ""
    )
    with patch("app.adapters.outbound.llm.openai_llm_client.AsyncOpenAI"):
        with pytest.raises(ValueError, match="OpenAI API key is required"):
            OpenAILLMClient(api_key="")


def test_build_messages_orders_system_history_user():
    """Test message list layout."""
    history = [
        {"role": "assistant", "content": "Hi"},
        {"role": "user", "content": "Hello"},
    ]

    messages = OpenAILLMClient.build_messages("System", history, "Question")

    assert [m["role"] for m in messages] == ["system", "assistant", "user", "user"]
    assert messages[-1]["content"] == "Question"
    assert OpenAILLMClient.build_messages("System", [], None) == [
        {"role": "system", "content": "System"}
    ]


@pytest.mark.asyncio
async def test_generate_reply_without_tools(openai_client):
    """Test request parameters and plain text reply."""
    openai_client._client.chat.completions.create.return_value = _response("  Hi there.  ")

    reply = await openai_client.generate_reply("System", [], "Hello", max_tokens=150)

    call_args = openai_client._client.chat.completions.create.call_args
    assert call_args.kwargs["model"] == "gpt-4o-mini"
    assert call_args.kwargs["max_tokens"] == 150
    assert "tools" not in call_args.kwargs
    assert reply.content == "Hi there."
    assert reply.tool_calls == []


@pytest.mark.asyncio
async def test_generate_reply_with_tool_calls(openai_client):
    """Test tool definitions are sent and tool calls are mapped."""
    tools = [{"type": "function", "function": {"name": "schedule_callback"}}]
    openai_client._client.chat.completions.create.return_value = _response(
        None,
        tool_calls=[
            _tool_call("call_1", "schedule_callback", '{"preferred_time": "Friday"}'),
            _tool_call("call_2", "collect_pharmacy_info", None),
        ],
    )

    reply = await openai_client.generate_reply("System", [], "Call me", tools=tools)

    call_args = openai_client._client.chat.completions.create.call_args
    assert call_args.kwargs["tools"] == tools
    assert call_args.kwargs["tool_choice"] == "auto"
    assert reply.content == ""
    assert [(c.id, c.name) for c in reply.tool_calls] == [
        ("call_1", "schedule_callback"),
        ("call_2", "collect_pharmacy_info"),
    ]
    assert reply.tool_calls[1].arguments == "{}"


@pytest.mark.asyncio
async def test_generate_reply_raises_on_empty_response(openai_client):
    """Test that an empty choice list is an upstream failure."""
    openai_client._client.chat.completions.create.return_value = _response(choices=False)

    with pytest.raises(UpstreamUnavailableError, match="Empty response from OpenAI API"):
        await openai_client.generate_reply("System", [], "Hello")


@pytest.mark.asyncio
async def test_generate_reply_wraps_api_errors(openai_client):
    """Test that SDK errors become upstream failures."""
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    openai_client._client.chat.completions.create.side_effect = openai.APIConnectionError(
        request=request
    )

    with pytest.raises(UpstreamUnavailableError, match="OpenAI API call failed"):
        await openai_client.generate_reply("System", [], "Hello")
