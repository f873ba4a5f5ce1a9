"""Pharmacy directory adapters."""

from app.adapters.outbound.pharmacy_directory.cached_pharmacy_directory import (
    CachedPharmacyDirectory,
)
from app.adapters.outbound.pharmacy_directory.http_pharmacy_directory import (
    HttpPharmacyDirectory,
)
from app.adapters.outbound.pharmacy_directory.pharmacy_cache import PharmacyCache
from app.adapters.outbound.pharmacy_directory.pharmacy_directory import (
    InMemoryPharmacyDirectory,
)
from app.adapters.outbound.pharmacy_directory.redis_pharmacy_cache import RedisPharmacyCache

__all__ = [
    "CachedPharmacyDirectory",
    "HttpPharmacyDirectory",
    "InMemoryPharmacyDirectory",
    "PharmacyCache",
    "RedisPharmacyCache",
]
