"""HTTP routes."""

from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, status

from app.adapters.inbound.http.schemas import (
    EndConversationRequest,
    ScheduleCallbackRequest,
    SendEmailRequest,
    SendMessageRequest,
    StartChatRequest,
)
from app.application.dtos.chat import (
    ActionResponse,
    ConversationView,
    SendMessageResponse,
    StartChatResponse,
)
from app.application.dtos.pharmacy import Pharmacy
from app.application.errors import ConversationNotFoundError, UpstreamUnavailableError
from app.application.ports.lead_repository import LeadRepository
from app.application.ports.pharmacy_directory import PharmacyDirectory
from app.application.use_cases.conversation_orchestrator import ConversationOrchestrator
from app.domain.value_objects.phone_number import mask_phone
from app.infrastructure.config.settings import settings
from app.infrastructure.logging.logger import log_turn
from app.infrastructure.wiring.dependencies import (
    get_conversation_orchestrator,
    get_lead_repository,
    get_pharmacy_directory,
)

router = APIRouter()


def _to_http_error(error: Exception) -> HTTPException:
    """
    Translate an application error to an HTTP error.

    Args:
        error: ConversationNotFoundError or UpstreamUnavailableError

    Returns:
        HTTPException with a client-safe detail
    """
    if isinstance(error, ConversationNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail="An upstream service is temporarily unavailable. Please try again.",
    )


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> dict[str, str]:
    """
    Health check endpoint for liveness/readiness.

    Returns:
        Health status
    """
    return {"status": "ok"}


@router.post(
    "/api/chatbot/start", status_code=status.HTTP_200_OK, response_model=StartChatResponse
)
async def start_chat(
    request: StartChatRequest,
    orchestrator: ConversationOrchestrator = Depends(get_conversation_orchestrator),
) -> StartChatResponse:
    """
    Start a conversation for a phone number, or resume its active one.

    Args:
        request: Start chat request with the caller's phone number

    Returns:
        Conversation id, greeting or resume message, state, pharmacy and lead
    """
    turn_id = str(uuid4())
    log_turn(None, turn_id, "http", route="start", phone=mask_phone(request.phone_number))

    try:
        return await orchestrator.start_chat(request.phone_number, turn_id=turn_id)
    except UpstreamUnavailableError as e:
        log_turn(None, turn_id, "http", route="start", upstream_error=str(e))
        raise _to_http_error(e) from e


@router.post(
    "/api/chatbot/message", status_code=status.HTTP_200_OK, response_model=SendMessageResponse
)
async def send_message(
    request: SendMessageRequest,
    orchestrator: ConversationOrchestrator = Depends(get_conversation_orchestrator),
) -> SendMessageResponse:
    """
    Handle a conversation turn.

    Args:
        request: Conversation id and user message

    Returns:
        Assistant reply with the post-turn state, pharmacy and lead
    """
    turn_id = str(uuid4())
    log_turn(
        request.conversation_id,
        turn_id,
        "http",
        route="message",
        message_length=len(request.message),
    )

    try:
        response = await orchestrator.send_message(
            request.conversation_id, request.message, turn_id=turn_id
        )
    except (ConversationNotFoundError, UpstreamUnavailableError) as e:
        raise _to_http_error(e) from e

    log_turn(
        request.conversation_id,
        turn_id,
        "http",
        route="message",
        state=response.state.value,
        reply_length=len(response.message),
    )
    return response


@router.post(
    "/api/chatbot/schedule-callback",
    status_code=status.HTTP_200_OK,
    response_model=ActionResponse,
)
async def schedule_callback(
    request: ScheduleCallbackRequest,
    orchestrator: ConversationOrchestrator = Depends(get_conversation_orchestrator),
) -> ActionResponse:
    """
    Schedule a sales callback for a conversation.

    Args:
        request: Conversation id, preferred time and optional notes

    Returns:
        Action confirmation
    """
    turn_id = str(uuid4())
    log_turn(request.conversation_id, turn_id, "http", route="schedule-callback")

    try:
        return await orchestrator.schedule_callback(
            request.conversation_id, request.preferred_time, request.notes, turn_id=turn_id
        )
    except ConversationNotFoundError as e:
        raise _to_http_error(e) from e


@router.post(
    "/api/chatbot/send-email", status_code=status.HTTP_200_OK, response_model=ActionResponse
)
async def send_email(
    request: SendEmailRequest,
    orchestrator: ConversationOrchestrator = Depends(get_conversation_orchestrator),
) -> ActionResponse:
    """
    Send a follow-up email for a conversation.

    Args:
        request: Conversation id, recipient and pricing flag

    Returns:
        Action confirmation
    """
    turn_id = str(uuid4())
    log_turn(request.conversation_id, turn_id, "http", route="send-email")

    try:
        return await orchestrator.send_email(
            request.conversation_id,
            str(request.email),
            include_pricing=request.include_pricing,
            turn_id=turn_id,
        )
    except ConversationNotFoundError as e:
        raise _to_http_error(e) from e


@router.post("/api/chatbot/end", status_code=status.HTTP_200_OK, response_model=ActionResponse)
async def end_conversation(
    request: EndConversationRequest,
    orchestrator: ConversationOrchestrator = Depends(get_conversation_orchestrator),
) -> ActionResponse:
    """
    End a conversation so the phone number can start a new one.

    Args:
        request: Conversation id

    Returns:
        Action confirmation
    """
    turn_id = str(uuid4())
    log_turn(request.conversation_id, turn_id, "http", route="end")

    try:
        return await orchestrator.end_conversation(request.conversation_id, turn_id=turn_id)
    except ConversationNotFoundError as e:
        raise _to_http_error(e) from e


@router.get(
    "/api/chatbot/conversation/{conversation_id}",
    status_code=status.HTTP_200_OK,
    response_model=ConversationView,
)
async def get_conversation(
    conversation_id: int,
    orchestrator: ConversationOrchestrator = Depends(get_conversation_orchestrator),
) -> ConversationView:
    """
    Get a conversation and its transcript.

    Args:
        conversation_id: Conversation identifier

    Returns:
        Conversation with messages in chronological order
    """
    try:
        return await orchestrator.get_conversation(conversation_id)
    except ConversationNotFoundError as e:
        raise _to_http_error(e) from e


@router.get("/api/pharmacies", status_code=status.HTTP_200_OK, response_model=list[Pharmacy])
async def list_pharmacies(
    directory: PharmacyDirectory = Depends(get_pharmacy_directory),
) -> list[Pharmacy]:
    """
    List the pharmacy directory.

    Returns:
        Every pharmacy with its estimated monthly rx volume
    """
    try:
        return await directory.list_all()
    except UpstreamUnavailableError as e:
        raise _to_http_error(e) from e


@router.get("/debug/leads", status_code=status.HTTP_200_OK)
async def get_leads_debug(
    lead_repository: LeadRepository = Depends(get_lead_repository),
) -> dict:
    """
    Get all captured leads (only enabled if DEBUG_MODE=true).

    Returns:
        List of captured leads

    Raises:
        HTTPException: 404 if DEBUG_MODE is disabled
    """
    if not settings.debug_mode:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Debug endpoint is disabled",
        )

    leads = await lead_repository.list()

    return {
        "leads": [lead.model_dump(mode="json", by_alias=True) for lead in leads],
        "count": len(leads),
    }
