"""Dependency injection factory functions."""

from functools import lru_cache
from typing import Optional, Union

from app.adapters.outbound.conversation import (
    InMemoryConversationRepository,
    PostgresConversationRepository,
)
from app.adapters.outbound.lead import (
    InMemoryLeadRepository,
    PostgresLeadRepository,
)
from app.adapters.outbound.llm.openai_llm_client import OpenAILLMClient
from app.adapters.outbound.notifications import LoggingCallbackScheduler, LoggingEmailSender
from app.adapters.outbound.pharmacy_directory import (
    CachedPharmacyDirectory,
    HttpPharmacyDirectory,
    InMemoryPharmacyDirectory,
    PharmacyCache,
    RedisPharmacyCache,
)
from app.application.ports.conversation_repository import ConversationRepository
from app.application.ports.lead_repository import LeadRepository
from app.application.ports.llm_client import LLMClient
from app.application.ports.pharmacy_directory import PharmacyDirectory
from app.application.use_cases.conversation_orchestrator import ConversationOrchestrator
from app.application.use_cases.function_call_dispatcher import FunctionCallDispatcher
from app.application.use_cases.pharmacy_sales_assistant import PharmacySalesAssistant
from app.infrastructure.config.settings import settings
from app.infrastructure.logging.logger import log_turn, logger


def create_conversation_repository() -> ConversationRepository:
    """
    Factory function to create conversation repository.

    Returns:
        ConversationRepository instance
    """
    if settings.conversation_repository == "postgres":
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required when CONVERSATION_REPOSITORY=postgres")
        return PostgresConversationRepository()
    else:
        return InMemoryConversationRepository()


def create_lead_repository() -> LeadRepository:
    """
    Factory function to create lead repository.

    Returns:
        LeadRepository instance
    """
    if settings.lead_repository == "postgres":
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required when LEAD_REPOSITORY=postgres")
        return PostgresLeadRepository()
    else:
        return InMemoryLeadRepository()


def create_pharmacy_cache() -> Union[PharmacyCache, RedisPharmacyCache]:
    """
    Factory function to create the pharmacy lookup cache.

    Returns:
        RedisPharmacyCache if PHARMACY_CACHE_BACKEND=redis, in-process PharmacyCache otherwise
    """
    if settings.pharmacy_cache_backend == "redis":
        if not settings.redis_url:
            raise ValueError("REDIS_URL is required when PHARMACY_CACHE_BACKEND=redis")
        return RedisPharmacyCache(settings.redis_url, settings.pharmacy_cache_ttl_seconds)
    return PharmacyCache(ttl_seconds=settings.pharmacy_cache_ttl_seconds)


def create_pharmacy_directory(
    cache: Union[PharmacyCache, RedisPharmacyCache],
) -> PharmacyDirectory:
    """
    Factory function to create the cached pharmacy directory.

    Args:
        cache: Lookup cache placed in front of the directory

    Returns:
        PharmacyDirectory instance
    """
    if settings.pharmacy_api_url:
        primary: PharmacyDirectory = HttpPharmacyDirectory(
            settings.pharmacy_api_url, timeout_seconds=settings.pharmacy_api_timeout_seconds
        )
    else:
        primary = InMemoryPharmacyDirectory()
    return CachedPharmacyDirectory(primary, cache)


def create_llm_client() -> Optional[LLMClient]:
    """
    Factory function to create LLM client if enabled.

    Returns:
        LLMClient instance if enabled, None otherwise (turns then fail as upstream errors)
    """
    if not settings.llm_enabled:
        return None

    try:
        return OpenAILLMClient()
    except ValueError as e:
        logger.warning(f"LLM client disabled: {str(e)}")
        return None


def create_conversation_orchestrator(
    conversation_repository: Optional[ConversationRepository] = None,
    lead_repository: Optional[LeadRepository] = None,
    pharmacy_directory: Optional[PharmacyDirectory] = None,
    llm_client: Optional[LLMClient] = None,
) -> ConversationOrchestrator:
    """
    Factory function to create ConversationOrchestrator with dependencies.

    Args:
        conversation_repository: Conversation repository (created from settings if omitted)
        lead_repository: Lead repository (created from settings if omitted)
        pharmacy_directory: Pharmacy directory (created from settings if omitted)
        llm_client: LLM client (created from settings if omitted)

    Returns:
        ConversationOrchestrator instance
    """
    conversation_repository = conversation_repository or create_conversation_repository()
    lead_repository = lead_repository or create_lead_repository()
    pharmacy_directory = pharmacy_directory or create_pharmacy_directory(create_pharmacy_cache())
    llm_client = llm_client or create_llm_client()

    # Wire logger function
    def _logger_func(conversation_id, turn_id, component, **kwargs):
        log_turn(conversation_id, turn_id, component, **kwargs)

    assistant = PharmacySalesAssistant(
        llm_client,
        timeout_seconds=settings.llm_timeout_seconds,
        logger=_logger_func,
    )
    dispatcher = FunctionCallDispatcher(
        conversation_repository,
        lead_repository,
        LoggingCallbackScheduler(),
        LoggingEmailSender(),
        logger=_logger_func,
    )
    return ConversationOrchestrator(
        conversation_repository,
        lead_repository,
        pharmacy_directory,
        assistant,
        dispatcher,
        continuation_enabled=settings.llm_continuation_enabled,
        logger=_logger_func,
    )


# Process-wide singletons used by the HTTP routes


@lru_cache
def get_pharmacy_cache() -> Union[PharmacyCache, RedisPharmacyCache]:
    """Get the shared pharmacy lookup cache."""
    return create_pharmacy_cache()


@lru_cache
def get_pharmacy_directory() -> PharmacyDirectory:
    """Get the shared pharmacy directory."""
    return create_pharmacy_directory(get_pharmacy_cache())


@lru_cache
def get_lead_repository() -> LeadRepository:
    """Get the shared lead repository."""
    return create_lead_repository()


@lru_cache
def get_conversation_orchestrator() -> ConversationOrchestrator:
    """Get the shared conversation orchestrator."""
    return create_conversation_orchestrator(
        lead_repository=get_lead_repository(),
        pharmacy_directory=get_pharmacy_directory(),
    )
