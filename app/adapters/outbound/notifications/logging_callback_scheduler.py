"""Callback scheduler that records requests in the application log."""

from typing import Optional

from app.application.ports.notification_gateway import CallbackScheduler
from app.domain.value_objects.phone_number import mask_phone
from app.infrastructure.logging.logger import logger


class LoggingCallbackScheduler(CallbackScheduler):
    """Callback scheduler without a telephony or CRM backend; requests are logged."""

    async def schedule_callback(
        self, phone_number: str, preferred_time: str, notes: Optional[str] = None
    ) -> bool:
        """
        Record a callback request.

        Args:
            phone_number: Normalized phone number to call back
            preferred_time: Free-text preferred time
            notes: Optional notes for the sales team

        Returns:
            True
        """
        logger.info(f"Scheduling callback for: {mask_phone(phone_number)}")
        logger.info(f"Preferred time: {preferred_time}")
        if notes:
            logger.info(f"Notes: {notes}")
        return True
