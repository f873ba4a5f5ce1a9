"""Email sender that renders follow-up emails into the application log."""

from typing import Optional

from app.application.dtos.pharmacy import Pharmacy
from app.application.ports.notification_gateway import EmailSender
from app.domain.value_objects.rx_volume import RxVolumeTier
from app.infrastructure.logging.logger import logger

VOLUME_EMAIL_MESSAGES = {
    RxVolumeTier.HIGH: (
        "our enterprise-level solutions are designed to handle high-volume operations "
        "with maximum efficiency."
    ),
    RxVolumeTier.MEDIUM: (
        "our mid-tier solutions offer the perfect balance of automation and flexibility "
        "for growing pharmacies."
    ),
    RxVolumeTier.LOW: "our scalable solutions will grow with your pharmacy as your volume increases.",
    RxVolumeTier.UNKNOWN: "we have solutions tailored to pharmacies of all sizes.",
}


def build_email_content(pharmacy: Optional[Pharmacy], include_pricing: bool = False) -> str:
    """
    Render the follow-up email body.

    Args:
        pharmacy: Pharmacy snapshot used for personalization, if known
        include_pricing: Whether to include the pricing section

    Returns:
        Email text including the subject line
    """
    name = pharmacy.name if pharmacy else None
    contact = pharmacy.contact_person if pharmacy else None
    lines = [
        f"Subject: Pharmesol Solutions for {name or 'Your Pharmacy'}",
        "",
        f"Dear {contact or 'Pharmacy Manager'},",
        "",
        "Thank you for your interest in Pharmesol's pharmacy AI solutions.",
        "",
    ]

    if pharmacy is not None and pharmacy.rx_volume > 0:
        lines += [
            f"Based on your monthly prescription volume of approximately "
            f"{pharmacy.rx_volume:,} prescriptions, {VOLUME_EMAIL_MESSAGES[pharmacy.volume_tier]}",
            "",
        ]

    lines += [
        "Our Solutions Include:",
        "- Voice AI that answers patient calls around the clock",
        "- Messaging AI for refill reminders and prescription status updates",
        "- Appointment scheduling and routine inquiry automation",
        "- Administrative task automation that frees your staff",
        "",
    ]

    if include_pricing:
        lines += [
            "Pricing Information:",
            "Our solutions are tailored to your pharmacy's specific needs. We offer flexible "
            "pricing models based on volume and features. Contact us for a personalized quote.",
            "",
        ]

    lines += [
        "Next Steps:",
        "Schedule a demo: https://pharmesol.example.com/demo",
        "Call us: 1-800-PHARMA-1",
        "Reply to this email with any questions",
        "",
        "Best regards,",
        "The Pharmesol Team",
    ]
    return "\n".join(lines) + "\n"


class LoggingEmailSender(EmailSender):
    """Email sender without a delivery provider; rendered emails are logged."""

    async def send_followup_email(
        self, email: str, pharmacy: Optional[Pharmacy], include_pricing: bool = False
    ) -> bool:
        """
        Render and record a follow-up email.

        Args:
            email: Recipient address
            pharmacy: Pharmacy snapshot, if known
            include_pricing: Whether to include the pricing section

        Returns:
            True
        """
        logger.info(f"Sending follow-up email to: {email}")
        logger.info(f"Email content:\n{build_email_content(pharmacy, include_pricing)}")
        return True
