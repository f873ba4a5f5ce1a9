"""English assistant-facing messages for the pharmacy sales assistant."""

from typing import Optional

from app.application.dtos.pharmacy import Pharmacy
from app.domain.value_objects.rx_volume import RxVolumeTier


class AssistantMessages:
    """Centralized assistant-facing messages."""

    # Used when neither the model nor any function produced text
    FALLBACK_REPLY = "I understand. How else can I help you?"

    # Resuming an ACTIVE conversation
    CONTINUING_CONVERSATION = "Continuing previous conversation"
    CONTINUATION_FALLBACK = (
        "Welcome back! I recall our previous conversation. How can I help you today?"
    )
    CONTINUATION_EMPTY = "Welcome back! How can I continue to assist you today?"

    CONVERSATION_ENDED = "Thank you for your time! Feel free to reach out whenever you need us."

    BASE_INTRODUCTION = (
        "Pharmesol provides Voice AI and Messaging AI solutions specifically designed for "
        "pharmacies. Our AI-enabled pharmacy assistant automates frequent conversations and "
        "administrative tasks, helping you handle patient inquiries, prescription refills, "
        "appointment scheduling, and other routine interactions efficiently. Using advanced "
        "LLM technology tailored for pharmaceutical contexts, we help pharmacies reduce staff "
        "workload, improve response times, and deliver exceptional patient service 24/7."
    )

    VOLUME_MESSAGES = {
        RxVolumeTier.HIGH: (
            "With your high prescription volume, our AI automation can handle the influx of "
            "patient calls and messages, freeing your staff to focus on in-person care and "
            "complex pharmaceutical services."
        ),
        RxVolumeTier.MEDIUM: (
            "Your pharmacy is in an excellent position to benefit from AI-powered communication "
            "automation that scales with your growing patient base without increasing "
            "administrative overhead."
        ),
        RxVolumeTier.LOW: (
            "Our AI solutions can help you deliver responsive patient service 24/7 while "
            "keeping operational costs manageable as you grow."
        ),
        RxVolumeTier.UNKNOWN: (
            "Pharmesol offers Voice AI and Messaging AI solutions to help pharmacies of all "
            "sizes automate patient communications and administrative tasks."
        ),
    }

    @classmethod
    def volume_message(cls, tier: RxVolumeTier) -> str:
        """Get the persuasive talking point for a volume tier."""
        return cls.VOLUME_MESSAGES.get(tier, cls.VOLUME_MESSAGES[RxVolumeTier.UNKNOWN])

    @classmethod
    def introduction(cls, pharmacy: Optional[Pharmacy] = None) -> str:
        """
        Build the vendor introduction, tailored to the pharmacy's volume when known.

        Args:
            pharmacy: Pharmacy snapshot, if the caller is in the directory

        Returns:
            Introduction paragraph
        """
        if pharmacy is None or not pharmacy.rx_volume:
            return cls.BASE_INTRODUCTION

        volume = f"{pharmacy.rx_volume:,}"
        tier = pharmacy.volume_tier
        if tier == RxVolumeTier.HIGH:
            context = (
                f" With your impressive volume of approximately {volume} prescriptions per "
                "month, our AI solutions can significantly reduce the administrative burden on "
                "your team, allowing them to focus on high-value patient care while we handle "
                "routine inquiries and communications at scale."
            )
        elif tier == RxVolumeTier.MEDIUM:
            context = (
                f" Processing around {volume} prescriptions monthly, you're in an excellent "
                "position to benefit from AI automation. Our solutions can help you manage "
                "growing patient communication demands without proportionally increasing "
                "staff, positioning your pharmacy for efficient growth."
            )
        elif tier == RxVolumeTier.LOW:
            context = (
                f" Even at {volume} prescriptions per month, our AI solutions can free up your "
                "team's time by handling routine calls and messages, allowing you to deliver "
                "more personalized service to your patients while keeping operational costs "
                "manageable."
            )
        else:
            context = ""
        return cls.BASE_INTRODUCTION + context

    @classmethod
    def greeting(cls, pharmacy: Optional[Pharmacy] = None) -> str:
        """
        Build the first assistant message of a new conversation.

        Args:
            pharmacy: Pharmacy snapshot, or None for a new lead

        Returns:
            Greeting text
        """
        if pharmacy is None:
            return (
                "Hello! Thank you for calling Pharmesol.\n\n"
                f"{cls.introduction()}\n\n"
                "May I get your pharmacy's name to better understand how we can assist you?"
            )

        greeting = f"Hello! Thank you for calling Pharmesol. I see you're calling from {pharmacy.name}."
        if pharmacy.contact_person:
            greeting += f" Am I speaking with {pharmacy.contact_person}?"
        return f"{greeting}\n\n{cls.introduction(pharmacy)}"

    # Function-call confirmations
    @staticmethod
    def callback_scheduled(preferred_time: str) -> str:
        """Confirmation appended to a turn that scheduled a callback."""
        return f"I've scheduled a callback for {preferred_time}. Our team will reach out to you then."

    @staticmethod
    def email_sent(email: str) -> str:
        """Confirmation appended to a turn that sent a follow-up email."""
        return f"I've sent detailed information to {email}. Check your inbox shortly!"

    # Direct action confirmations
    @staticmethod
    def callback_scheduled_direct(preferred_time: str) -> str:
        """Confirmation for an explicitly requested callback."""
        return (
            f"Great! I've scheduled a callback for {preferred_time}. "
            "Someone from our team will reach out to you then."
        )

    @staticmethod
    def email_sent_direct(email: str) -> str:
        """Confirmation for an explicitly requested follow-up email."""
        return (
            f"Perfect! I've sent detailed information about our solutions to {email}. "
            "You should receive it shortly."
        )
