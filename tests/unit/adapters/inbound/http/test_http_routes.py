"""Unit tests for HTTP routes."""

from unittest.mock import AsyncMock, Mock, patch

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from app.adapters.inbound.http.routes import router
from app.adapters.outbound.conversation import InMemoryConversationRepository
from app.adapters.outbound.lead import InMemoryLeadRepository
from app.adapters.outbound.pharmacy_directory import InMemoryPharmacyDirectory
from app.application.dtos.lead import PharmacyLead
from app.application.dtos.llm import LLMReply, ToolCall
from app.application.errors import ConversationNotFoundError, UpstreamUnavailableError
from app.application.ports.llm_client import LLMClient
from app.infrastructure.config.settings import settings
from app.infrastructure.wiring.dependencies import (
    create_conversation_orchestrator,
    get_conversation_orchestrator,
    get_lead_repository,
    get_pharmacy_directory,
)

DIRECTORY_PHONE = "+1-555-123-4567"


class QueuedLLMClient(LLMClient):
    """LLM client returning queued replies."""

    def __init__(self, *replies: LLMReply) -> None:
        self.replies = list(replies)

    async def generate_reply(
        self, system_prompt, history, user_message=None, tools=None, max_tokens=500
    ) -> LLMReply:
        return self.replies.pop(0) if self.replies else LLMReply(content="Happy to help.")


@pytest.fixture
def lead_repository():
    """Create in-memory lead repository."""
    return InMemoryLeadRepository()


@pytest.fixture
def directory():
    """Create in-memory directory with the sample pharmacies."""
    return InMemoryPharmacyDirectory()


@pytest.fixture
def llm_client():
    """Create queued LLM client."""
    return QueuedLLMClient()


@pytest.fixture
def app(lead_repository, directory, llm_client):
    """Create FastAPI app with router and in-memory dependencies."""
    orchestrator = create_conversation_orchestrator(
        conversation_repository=InMemoryConversationRepository(),
        lead_repository=lead_repository,
        pharmacy_directory=directory,
        llm_client=llm_client,
    )
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_conversation_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_lead_repository] = lambda: lead_repository
    app.dependency_overrides[get_pharmacy_directory] = lambda: directory
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok"}


def test_start_chat_for_directory_pharmacy(client):
    """Test start response uses camelCase keys and carries the pharmacy."""
    response = client.post("/api/chatbot/start", json={"phoneNumber": DIRECTORY_PHONE})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["isNewConversation"] is True
    assert data["isReturningPharmacy"] is True
    assert data["state"] == "PHARMACY_IDENTIFIED"
    assert data["pharmacy"]["name"] == "HealthFirst Pharmacy"
    assert data["pharmacy"]["rxVolume"] > 0
    assert data["lead"] is None
    assert "HealthFirst Pharmacy" in data["message"]


def test_start_chat_twice_resumes(client):
    """Test a second start for the same number returns the active conversation."""
    first = client.post("/api/chatbot/start", json={"phoneNumber": "555-000-1111"}).json()
    second = client.post("/api/chatbot/start", json={"phoneNumber": "(555) 000 1111"}).json()

    assert first["state"] == "COLLECTING_LEAD_INFO"
    assert second["conversationId"] == first["conversationId"]
    assert second["isNewConversation"] is False


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"phoneNumber": ""},
        {"phoneNumber": "no digits"},
    ],
)
def test_start_chat_validation(client, payload):
    """Test invalid start requests are rejected."""
    response = client.post("/api/chatbot/start", json=payload)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_message_turn_with_function_call(client, llm_client, lead_repository):
    """Test a turn whose tool call captures lead fields."""
    start = client.post("/api/chatbot/start", json={"phoneNumber": "555-000-1111"}).json()
    llm_client.replies.append(
        LLMReply(
            content="Thanks!",
            tool_calls=[
                ToolCall(
                    id="call_1",
                    name="collect_pharmacy_info",
                    arguments='{"pharmacy_name": "Corner Drug", "contact_person": "Sam", '
                    '"estimated_rx_volume": 3000}',
                )
            ],
        )
    )

    response = client.post(
        "/api/chatbot/message",
        json={"conversationId": start["conversationId"], "message": "We are Corner Drug"},
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["message"].startswith("Thanks!")
    assert data["lead"]["pharmacyName"] == "Corner Drug"
    assert data["lead"]["estimatedRxVolume"] == 3000


def test_message_rejects_empty_text(client):
    """Test empty messages are rejected."""
    response = client.post("/api/chatbot/message", json={"conversationId": 1, "message": ""})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_unknown_conversation_returns_404(client):
    """Test every conversation-scoped route maps not found to 404."""
    assert (
        client.post("/api/chatbot/message", json={"conversationId": 99, "message": "Hi"})
    ).status_code == status.HTTP_404_NOT_FOUND
    assert (
        client.post(
            "/api/chatbot/schedule-callback",
            json={"conversationId": 99, "preferredTime": "Friday"},
        )
    ).status_code == status.HTTP_404_NOT_FOUND
    assert (
        client.post(
            "/api/chatbot/send-email", json={"conversationId": 99, "email": "a@b.com"}
        )
    ).status_code == status.HTTP_404_NOT_FOUND
    assert (
        client.post("/api/chatbot/end", json={"conversationId": 99})
    ).status_code == status.HTTP_404_NOT_FOUND
    assert client.get("/api/chatbot/conversation/99").status_code == status.HTTP_404_NOT_FOUND


def test_upstream_failure_returns_502(app, client):
    """Test upstream failures map to 502 without leaking details."""
    orchestrator = Mock()
    orchestrator.send_message = AsyncMock(side_effect=UpstreamUnavailableError("secret detail"))
    orchestrator.start_chat = AsyncMock(side_effect=UpstreamUnavailableError("secret detail"))
    app.dependency_overrides[get_conversation_orchestrator] = lambda: orchestrator

    for path, payload in [
        ("/api/chatbot/message", {"conversationId": 1, "message": "Hi"}),
        ("/api/chatbot/start", {"phoneNumber": "5551234567"}),
    ]:
        response = client.post(path, json=payload)
        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert "secret" not in response.json()["detail"]


def test_not_found_error_message(app, client):
    """Test the not found detail names the conversation."""
    orchestrator = Mock()
    orchestrator.get_conversation = AsyncMock(side_effect=ConversationNotFoundError(5))
    app.dependency_overrides[get_conversation_orchestrator] = lambda: orchestrator

    response = client.get("/api/chatbot/conversation/5")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_actions_and_transcript(client):
    """Test schedule, email, end and transcript routes on one conversation."""
    start = client.post("/api/chatbot/start", json={"phoneNumber": DIRECTORY_PHONE}).json()
    conversation_id = start["conversationId"]

    callback = client.post(
        "/api/chatbot/schedule-callback",
        json={"conversationId": conversation_id, "preferredTime": "Friday 2pm", "notes": "x"},
    )
    assert callback.status_code == status.HTTP_200_OK
    assert callback.json()["success"] is True
    assert callback.json()["state"] == "SCHEDULING_FOLLOWUP"

    email = client.post(
        "/api/chatbot/send-email",
        json={"conversationId": conversation_id, "email": "owner@example.com"},
    )
    assert email.status_code == status.HTTP_200_OK
    assert email.json()["success"] is True

    ended = client.post("/api/chatbot/end", json={"conversationId": conversation_id})
    assert ended.json()["state"] == "COMPLETED"
    assert ended.json()["status"] == "COMPLETED"

    view = client.get(f"/api/chatbot/conversation/{conversation_id}").json()
    assert view["id"] == conversation_id
    assert view["isReturningPharmacy"] is True
    assert view["messages"][0]["role"] == "ASSISTANT"


def test_send_email_validates_address(client):
    """Test malformed email addresses are rejected."""
    response = client.post(
        "/api/chatbot/send-email", json={"conversationId": 1, "email": "not-an-email"}
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_list_pharmacies(client):
    """Test directory listing."""
    response = client.get("/api/pharmacies")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data) == 2
    assert {"id", "name", "phone", "rxVolume"} <= set(data[0])


def test_list_pharmacies_upstream_failure(app, client):
    """Test directory failures map to 502."""
    directory = Mock()
    directory.list_all = AsyncMock(side_effect=UpstreamUnavailableError("down"))
    app.dependency_overrides[get_pharmacy_directory] = lambda: directory

    assert client.get("/api/pharmacies").status_code == status.HTTP_502_BAD_GATEWAY


def test_debug_leads_disabled_returns_404(client):
    """Test that debug endpoint returns 404 when DEBUG_MODE is disabled."""
    with patch.object(settings, "debug_mode", False):
        response = client.get("/debug/leads")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "disabled" in response.json()["detail"].lower()


@pytest.mark.asyncio
async def test_debug_leads_enabled_returns_leads(client, lead_repository):
    """Test that debug endpoint lists leads when DEBUG_MODE is enabled."""
    await lead_repository.save(PharmacyLead(phone_number="5550001111", pharmacy_name="A"))

    with patch.object(settings, "debug_mode", True):
        response = client.get("/debug/leads")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["count"] == 1
    assert data["leads"][0]["phoneNumber"] == "5550001111"
    assert data["leads"][0]["pharmacyName"] == "A"
