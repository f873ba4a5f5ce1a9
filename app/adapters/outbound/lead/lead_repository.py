"""In-memory lead repository adapter."""

from typing import Optional

from app.application.dtos.lead import PharmacyLead
from app.application.ports.lead_repository import LeadRepository


class InMemoryLeadRepository(LeadRepository):
    """In-memory implementation of lead repository."""

    def __init__(self) -> None:
        """Initialize in-memory repository."""
        self._storage: dict[str, PharmacyLead] = {}

    async def get(self, phone_number: str) -> Optional[PharmacyLead]:
        """
        Get a lead by phone number.

        Args:
            phone_number: Normalized phone number

        Returns:
            Lead DTO, or None if not found
        """
        return self._storage.get(phone_number)

    async def save(self, lead: PharmacyLead) -> None:
        """
        Save a lead, replacing any lead for the same phone number.

        Args:
            lead: Lead DTO to save
        """
        self._storage[lead.phone_number] = lead

    async def list(self) -> list[PharmacyLead]:
        """
        List all leads.

        Returns:
            List of all leads
        """
        return list(self._storage.values())
