"""HTTP pharmacy directory adapter."""

from typing import Any, Optional

import httpx
from pydantic import ValidationError

from app.application.dtos.pharmacy import Pharmacy
from app.application.errors import UpstreamUnavailableError
from app.application.ports.pharmacy_directory import PharmacyDirectory
from app.domain.value_objects.phone_number import mask_phone, normalize_phone
from app.domain.value_objects.rx_volume import calculate_rx_volume
from app.infrastructure.logging.logger import logger


def to_pharmacy(payload: dict[str, Any]) -> Pharmacy:
    """
    Map a directory record (camelCase JSON) to a Pharmacy snapshot.

    Args:
        payload: Raw directory record

    Returns:
        Pharmacy with the monthly rx volume estimated from daily counts
    """
    prescriptions = payload.get("prescriptions") or []
    return Pharmacy.model_validate(
        {
            **payload,
            "id": str(payload.get("id")),
            "email": payload.get("email") or None,
            "prescriptions": prescriptions,
            "rxVolume": calculate_rx_volume(prescriptions),
        }
    )


class HttpPharmacyDirectory(PharmacyDirectory):
    """Pharmacy directory backed by a JSON endpoint returning every pharmacy."""

    def __init__(
        self,
        api_url: str,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize HTTP directory.

        Args:
            api_url: Directory endpoint URL
            timeout_seconds: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        if not api_url:
            raise ValueError("PHARMACY_API_URL is required for the HTTP pharmacy directory")
        self._api_url = api_url
        self._timeout = timeout_seconds
        self._transport = transport

    async def _fetch_records(self) -> list[dict[str, Any]]:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(self._api_url)
                response.raise_for_status()
                records = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching pharmacy data: {str(e)}")
            raise UpstreamUnavailableError(f"Pharmacy directory unavailable: {str(e)}") from e

        if not isinstance(records, list):
            logger.error("Pharmacy directory returned a non-list payload")
            raise UpstreamUnavailableError("Pharmacy directory returned an unexpected payload")
        return records

    def _to_pharmacy(self, record: dict[str, Any]) -> Pharmacy:
        try:
            return to_pharmacy(record)
        except ValidationError as e:
            logger.error(f"Invalid pharmacy record from directory: {str(e)}")
            raise UpstreamUnavailableError("Pharmacy directory returned an invalid record") from e

    async def find_by_phone(self, phone_number: str) -> Optional[Pharmacy]:
        """
        Resolve a phone number to a pharmacy.

        Args:
            phone_number: Phone number (normalized before matching)

        Returns:
            Pharmacy snapshot, or None if not listed

        Raises:
            UpstreamUnavailableError: If the directory cannot be queried
        """
        normalized = normalize_phone(phone_number)
        for record in await self._fetch_records():
            if normalize_phone(str(record.get("phone", ""))) == normalized:
                pharmacy = self._to_pharmacy(record)
                logger.info(f"Found pharmacy: {pharmacy.name}")
                return pharmacy

        logger.info(f"No pharmacy found for phone: {mask_phone(normalized)}")
        return None

    async def list_all(self) -> list[Pharmacy]:
        """
        List every pharmacy in the directory.

        Returns:
            List of pharmacies

        Raises:
            UpstreamUnavailableError: If the directory cannot be queried
        """
        return [self._to_pharmacy(record) for record in await self._fetch_records()]
