"""Notification adapters."""

from app.adapters.outbound.notifications.logging_callback_scheduler import (
    LoggingCallbackScheduler,
)
from app.adapters.outbound.notifications.logging_email_sender import LoggingEmailSender

__all__ = [
    "LoggingCallbackScheduler",
    "LoggingEmailSender",
]
