"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (record store
client, cache, token verifier, file storage, telemetry). Everything is
kept on app.state; dependencies read it from there.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.airtable import init_record_store
from app.infrastructure.cache import MemoryCache
from app.infrastructure.external.storage import StorageFactory
from app.infrastructure.security import Auth0TokenVerifier

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: telemetry (if enabled), cache, record store, token
    verifier, storage. Missing Airtable or Auth0 settings leave the matching
    state as None (routes answer 503) so health checks still work.
    Shutdown order: token verifier HTTP client, record store client,
    telemetry.
    """
    settings = get_settings()

    # ---- Startup ----
    if settings.telemetry_enabled:
        from app.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig.from_settings(settings)
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        telemetry.instrument_logging()
        logger.info("Telemetry initialized")

    app.state.cache = MemoryCache(default_ttl=settings.cache_ttl_default)
    app.state.record_store = init_record_store(settings)

    if settings.auth0_configured:
        app.state.token_verifier = Auth0TokenVerifier.from_settings(settings)
        logger.info("Auth0 token verification enabled for %s", settings.auth0_issuer)
    else:
        app.state.token_verifier = None
        logger.warning("Auth0 not configured (AUTH0_DOMAIN / AUTH0_AUDIENCE); authenticated routes disabled")

    try:
        app.state.storage = StorageFactory.create_storage_service(settings)
    except (ValueError, OSError) as e:
        logger.error("File storage unavailable: %s", e)
        app.state.storage = None

    yield

    # ---- Shutdown ----
    if getattr(app.state, "token_verifier", None) is not None:
        await app.state.token_verifier.aclose()
        app.state.token_verifier = None
        logger.info("JWKS HTTP client closed")

    if getattr(app.state, "record_store", None) is not None:
        await app.state.record_store.aclose()
        app.state.record_store = None
        logger.info("Airtable HTTP client closed")

    app.state.cache.clear()

    from app.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)
