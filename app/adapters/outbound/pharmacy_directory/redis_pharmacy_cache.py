"""Redis cache adapter for pharmacy directory lookups."""

import json
from typing import Optional

from pydantic import ValidationError
from redis import asyncio as aioredis
from redis.exceptions import RedisError

from app.application.dtos.pharmacy import Pharmacy
from app.domain.value_objects.phone_number import mask_phone
from app.infrastructure.logging.logger import logger


class RedisPharmacyCache:
    """Redis cache for pharmacy snapshots, shared across workers."""

    KEY_PREFIX = "pharmacy:phone:"

    def __init__(self, redis_url: str, ttl_seconds: int) -> None:
        """
        Initialize Redis pharmacy cache.

        Args:
            redis_url: Redis connection URL
            ttl_seconds: Time-to-live in seconds for cached pharmacies
        """
        self._redis_url = redis_url
        self._ttl_seconds = ttl_seconds
        self._client: Optional[aioredis.Redis] = None

    async def _get_client(self) -> aioredis.Redis:
        """
        Get or create Redis client.

        Returns:
            Redis client instance
        """
        if self._client is None:
            self._client = aioredis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._client

    def _make_key(self, phone_number: str) -> str:
        return f"{self.KEY_PREFIX}{phone_number}"

    async def get(self, phone_number: str) -> Optional[Pharmacy]:
        """
        Get a cached pharmacy.

        Read failures are logged and treated as a cache miss.

        Args:
            phone_number: Normalized phone number

        Returns:
            Pharmacy, or None if not cached
        """
        try:
            client = await self._get_client()
            cached_data = await client.get(self._make_key(phone_number))
            if cached_data is None:
                return None
            return Pharmacy.model_validate(json.loads(cached_data))
        except (RedisError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(
                f"Error reading pharmacy cache for {mask_phone(phone_number)}: {str(e)}"
            )
            return None

    async def set(self, phone_number: str, pharmacy: Pharmacy) -> None:
        """
        Store a pharmacy with TTL (Redis expires the key itself).

        Args:
            phone_number: Normalized phone number
            pharmacy: Pharmacy snapshot
        """
        try:
            client = await self._get_client()
            await client.setex(
                self._make_key(phone_number),
                self._ttl_seconds,
                json.dumps(pharmacy.model_dump(mode="json"), sort_keys=True),
            )
        except RedisError as e:
            logger.warning(
                f"Error writing pharmacy cache for {mask_phone(phone_number)}: {str(e)}"
            )

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
