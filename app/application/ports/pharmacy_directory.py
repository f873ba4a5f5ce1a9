"""Pharmacy directory port."""

from abc import ABC, abstractmethod
from typing import Optional

from app.application.dtos.pharmacy import Pharmacy


class PharmacyDirectory(ABC):
    """Port interface for the external pharmacy directory."""

    @abstractmethod
    async def find_by_phone(self, phone_number: str) -> Optional[Pharmacy]:
        """
        Resolve a phone number to a pharmacy.

        Args:
            phone_number: Normalized phone number

        Returns:
            Pharmacy snapshot, or None if the number is not in the directory

        Raises:
            UpstreamUnavailableError: If the directory cannot be queried
        """
        pass

    @abstractmethod
    async def list_all(self) -> list[Pharmacy]:
        """
        List every pharmacy in the directory.

        Returns:
            List of pharmacies

        Raises:
            UpstreamUnavailableError: If the directory cannot be queried
        """
        pass
