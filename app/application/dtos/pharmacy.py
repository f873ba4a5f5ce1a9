"""Pharmacy directory DTOs."""

from typing import Optional

from pydantic import ConfigDict

from app.application.dtos.base import CamelDTO, DTO
from app.domain.value_objects.rx_volume import RxVolumeTier


class Prescription(DTO):
    """Daily prescription count for a single drug."""

    drug: str
    count: int = 0


class Pharmacy(CamelDTO):
    """Read-only snapshot of a pharmacy from the external directory."""

    id: str
    name: str
    phone: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    last_contact: Optional[str] = None
    rx_volume: int = 0  # monthly estimate
    prescriptions: list[Prescription] = []

    @property
    def volume_tier(self) -> RxVolumeTier:
        """Get the prescription volume tier."""
        return RxVolumeTier.from_volume(self.rx_volume)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "1",
                "name": "HealthFirst Pharmacy",
                "phone": "+1-555-123-4567",
                "city": "New York",
                "state": "NY",
                "contact_person": "John Smith",
                "email": "contact@healthfirst.com",
                "rx_volume": 12000,
                "prescriptions": [{"drug": "Lisinopril", "count": 400}],
            }
        }
    )
