"""Pharmacy lead DTOs."""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import Field

from app.application.dtos.base import CamelDTO

# Fields that must all be present before the lead is considered qualified
REQUIRED_LEAD_FIELDS = ("pharmacy_name", "contact_person", "estimated_rx_volume")

MERGEABLE_LEAD_FIELDS = (
    "pharmacy_name",
    "contact_person",
    "email",
    "estimated_rx_volume",
    "notes",
    "address",
    "city",
    "state",
)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    # Zero volume counts as not collected
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0:
        return True
    return False


class PharmacyLead(CamelDTO):
    """Prospective pharmacy accumulated from conversation content, keyed by phone."""

    phone_number: str
    pharmacy_name: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    estimated_rx_volume: Optional[int] = None
    notes: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def merge(self, **fields: Any) -> "PharmacyLead":
        """
        Merge newly collected fields into a copy of this lead.

        Only non-empty values are applied, so a partial update never clears a
        value collected earlier. Unknown field names are ignored.

        Args:
            **fields: Candidate field values (e.g., pharmacy_name="A")

        Returns:
            Updated lead (self when nothing changed)
        """
        updates = {
            name: value
            for name, value in fields.items()
            if name in MERGEABLE_LEAD_FIELDS and not _is_empty(value)
        }
        if not updates:
            return self
        updates["updated_at"] = datetime.now(timezone.utc)
        return self.model_copy(update=updates)

    def has_required_info(self) -> bool:
        """
        Check if the qualifying fields are collected.

        Returns:
            True if pharmacy_name, contact_person and a non-zero estimated_rx_volume are set
        """
        return not self.missing_required_fields()

    def missing_required_fields(self) -> list[str]:
        """Return the qualifying fields that are still missing."""
        return [name for name in REQUIRED_LEAD_FIELDS if _is_empty(getattr(self, name))]
