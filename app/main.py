"""FastAPI application entrypoint."""

import asyncio
import contextlib
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

from app.adapters.inbound.http.routes import router
from app.adapters.outbound.pharmacy_directory import PharmacyCache, RedisPharmacyCache
from app.infrastructure.config.settings import settings
from app.infrastructure.db import reset_db_engine
from app.infrastructure.wiring.dependencies import get_pharmacy_cache

# Load environment variables from .env file
load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run the pharmacy cache sweeper for the lifetime of the app."""
    cache = get_pharmacy_cache()
    sweeper = None
    # Redis expires keys on its own
    if isinstance(cache, PharmacyCache):
        sweeper = asyncio.create_task(
            cache.run_sweeper(settings.pharmacy_cache_sweep_interval_seconds)
        )
    try:
        yield
    finally:
        if sweeper is not None:
            sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper
        if isinstance(cache, RedisPharmacyCache):
            await cache.close()
        reset_db_engine()


app = FastAPI(
    title="Pharmacy Sales Assistant",
    description="Inbound sales conversation assistant for pharmacies using Clean Architecture",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(router)
