"""Structured logger for observability."""

import logging
from typing import Any, Optional

# Configure root logger with JSON-like structured format
_logger = logging.getLogger("pharmacy_sales_assistant")
_logger.setLevel(logging.INFO)

# Create console handler if not exists
if not _logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    _logger.addHandler(handler)


def log_turn(
    conversation_id: Optional[int],
    turn_id: str,
    component: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """
    Log structured event for a conversation turn.

    Args:
        conversation_id: Conversation identifier (None before it is created)
        turn_id: Turn identifier (UUID string)
        component: Component name (e.g., 'http', 'orchestrator', 'dispatcher')
        level: Log level (default: INFO)
        **kwargs: Additional structured fields to log
    """
    fields = {
        "conversation_id": conversation_id,
        "turn_id": turn_id,
        "component": component,
    }
    fields.update(kwargs)

    # Format as key=value pairs for readability
    log_parts = [f"{k}={v!r}" for k, v in fields.items()]
    log_message = " | ".join(log_parts)

    _logger.log(level, log_message)


# Export logger instance for direct use by adapters
logger = _logger
