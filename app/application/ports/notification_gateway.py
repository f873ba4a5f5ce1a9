"""Outbound notification ports."""

from abc import ABC, abstractmethod
from typing import Optional

from app.application.dtos.pharmacy import Pharmacy


class CallbackScheduler(ABC):
    """Port interface for scheduling sales callbacks."""

    @abstractmethod
    async def schedule_callback(
        self, phone_number: str, preferred_time: str, notes: Optional[str] = None
    ) -> bool:
        """
        Schedule a callback.

        Args:
            phone_number: Normalized phone number to call back
            preferred_time: Free-text preferred time (e.g., "Friday at 2pm")
            notes: Optional notes for the sales team

        Returns:
            True when the request was accepted
        """
        pass


class EmailSender(ABC):
    """Port interface for sending follow-up emails."""

    @abstractmethod
    async def send_followup_email(
        self, email: str, pharmacy: Optional[Pharmacy], include_pricing: bool = False
    ) -> bool:
        """
        Send a follow-up email about the vendor's services.

        Args:
            email: Recipient address
            pharmacy: Pharmacy snapshot used to tailor the content, if known
            include_pricing: Whether to include the pricing section

        Returns:
            True when the email was queued
        """
        pass
