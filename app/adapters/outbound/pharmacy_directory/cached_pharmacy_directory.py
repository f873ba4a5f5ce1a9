"""Pharmacy directory with a cache-aside lookup cache."""

from typing import Optional, Protocol

from app.application.dtos.pharmacy import Pharmacy
from app.application.ports.pharmacy_directory import PharmacyDirectory
from app.domain.value_objects.phone_number import mask_phone, normalize_phone
from app.infrastructure.logging.logger import log_turn


class PharmacyLookupCache(Protocol):
    """Cache contract shared by the in-process and Redis caches."""

    async def get(self, phone_number: str) -> Optional[Pharmacy]: ...

    async def set(self, phone_number: str, pharmacy: Pharmacy) -> None: ...


class CachedPharmacyDirectory(PharmacyDirectory):
    """Pharmacy directory with a lookup cache (cache-aside pattern)."""

    def __init__(self, primary_directory: PharmacyDirectory, cache: PharmacyLookupCache) -> None:
        """
        Initialize cached directory.

        Args:
            primary_directory: Upstream directory - source of truth
            cache: Cache for found pharmacies
        """
        self._primary = primary_directory
        self._cache = cache

    async def find_by_phone(self, phone_number: str) -> Optional[Pharmacy]:
        """
        Resolve a phone number (cache-aside pattern).

        Only found pharmacies are cached; a miss always queries upstream.

        Args:
            phone_number: Phone number (normalized before lookup)

        Returns:
            Pharmacy snapshot, or None if not listed
        """
        normalized = normalize_phone(phone_number)
        cached = await self._cache.get(normalized)
        if cached is not None:
            log_turn(
                conversation_id=None,
                turn_id="cache",
                component="pharmacy_cache",
                phone=mask_phone(normalized),
                pharmacy_cache_hit=True,
            )
            return cached

        log_turn(
            conversation_id=None,
            turn_id="cache",
            component="pharmacy_cache",
            phone=mask_phone(normalized),
            pharmacy_cache_hit=False,
        )
        pharmacy = await self._primary.find_by_phone(normalized)
        if pharmacy is not None:
            await self._cache.set(normalized, pharmacy)
        return pharmacy

    async def list_all(self) -> list[Pharmacy]:
        """
        List every pharmacy (never cached).

        Returns:
            List of pharmacies
        """
        return await self._primary.list_all()
