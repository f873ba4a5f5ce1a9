"""Lead repository port."""

from abc import ABC, abstractmethod
from typing import Optional

from app.application.dtos.lead import PharmacyLead


class LeadRepository(ABC):
    """Port interface for lead repository."""

    @abstractmethod
    async def get(self, phone_number: str) -> Optional[PharmacyLead]:
        """
        Get a lead by phone number.

        Args:
            phone_number: Normalized phone number

        Returns:
            Lead DTO, or None if not found
        """
        pass

    @abstractmethod
    async def save(self, lead: PharmacyLead) -> None:
        """
        Save a lead (upsert by phone number).

        Args:
            lead: Lead DTO to save
        """
        pass

    @abstractmethod
    async def list(self) -> list[PharmacyLead]:
        """
        List all leads.

        Returns:
            List of all leads (used for debug/demo purposes)
        """
        pass
