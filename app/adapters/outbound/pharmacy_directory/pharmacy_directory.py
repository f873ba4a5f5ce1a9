"""In-memory pharmacy directory adapter."""

from typing import Any, Optional

from app.application.dtos.pharmacy import Pharmacy
from app.application.ports.pharmacy_directory import PharmacyDirectory
from app.domain.value_objects.phone_number import normalize_phone

from .http_pharmacy_directory import to_pharmacy

# Sample records in the directory API's format, used when no PHARMACY_API_URL is set
SAMPLE_PHARMACIES: list[dict[str, Any]] = [
    {
        "id": 1,
        "name": "HealthFirst Pharmacy",
        "phone": "+1-555-123-4567",
        "address": "123 Main St",
        "city": "New York",
        "state": "NY",
        "contactPerson": "John Smith",
        "email": "contact@healthfirst.com",
        "prescriptions": [
            {"drug": "Lisinopril", "count": 180},
            {"drug": "Metformin", "count": 220},
        ],
    },
    {
        "id": 2,
        "name": "QuickCare Pharmacy",
        "phone": "+1-555-987-6543",
        "address": "45 Elm Ave",
        "city": "Austin",
        "state": "TX",
        "contactPerson": "Maria Lopez",
        "prescriptions": [{"drug": "Atorvastatin", "count": 60}],
    },
]


class InMemoryPharmacyDirectory(PharmacyDirectory):
    """In-memory implementation of the pharmacy directory."""

    def __init__(self, records: Optional[list[dict[str, Any]]] = None) -> None:
        """
        Initialize in-memory directory.

        Args:
            records: Directory records in API format (defaults to SAMPLE_PHARMACIES)
        """
        source = SAMPLE_PHARMACIES if records is None else records
        self._pharmacies = [to_pharmacy(record) for record in source]

    async def find_by_phone(self, phone_number: str) -> Optional[Pharmacy]:
        """
        Resolve a phone number to a pharmacy.

        Args:
            phone_number: Phone number (normalized before matching)

        Returns:
            Pharmacy snapshot, or None if not listed
        """
        normalized = normalize_phone(phone_number)
        for pharmacy in self._pharmacies:
            if normalize_phone(pharmacy.phone) == normalized:
                return pharmacy
        return None

    async def list_all(self) -> list[Pharmacy]:
        """
        List every pharmacy in the directory.

        Returns:
            List of pharmacies
        """
        return list(self._pharmacies)
