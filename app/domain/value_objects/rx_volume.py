"""Prescription volume value objects."""

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Optional

# Daily prescription counts are extrapolated to a 30-day month
DAYS_PER_MONTH = 30


class RxVolumeTier(str, Enum):
    """Coarse bucket of monthly prescription volume."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_volume(cls, rx_volume: Optional[float]) -> "RxVolumeTier":
        """
        Classify a monthly prescription volume.

        Bands are inclusive on the lower bound: HIGH >= 10000,
        MEDIUM >= 5000, LOW >= 1000, anything else is UNKNOWN.

        Args:
            rx_volume: Monthly prescription volume

        Returns:
            Matching volume tier
        """
        volume = rx_volume or 0
        if volume >= 10000:
            return cls.HIGH
        if volume >= 5000:
            return cls.MEDIUM
        if volume >= 1000:
            return cls.LOW
        return cls.UNKNOWN


def _daily_count(prescription: Any) -> int:
    if isinstance(prescription, Mapping):
        count = prescription.get("count")
    else:
        count = getattr(prescription, "count", None)
    return count or 0


def calculate_rx_volume(prescriptions: Optional[Iterable[Any]]) -> int:
    """
    Estimate monthly prescription volume from daily per-drug counts.

    Args:
        prescriptions: Items with a daily ``count`` (mappings or objects)

    Returns:
        Sum of daily counts times 30, or 0 when there are no prescriptions
    """
    if not prescriptions:
        return 0
    return sum(_daily_count(p) for p in prescriptions) * DAYS_PER_MONTH
