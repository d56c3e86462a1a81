"""Airtable client construction.

The lifespan builds one client per process from AIRTABLE_API_KEY /
AIRTABLE_BASE_ID and the per-table AIRTABLE_<NAME>_TABLE_ID settings, keeps
it on app.state and closes it at shutdown.
"""

import logging

from app.core.config import Settings
from app.infrastructure.airtable._rest_client import AirtableRESTClient

logger = logging.getLogger(__name__)


def build_record_store(settings: Settings) -> AirtableRESTClient:
    """Create a client from settings (no global state touched)."""
    return AirtableRESTClient(
        settings.airtable_api_key.get_secret_value(),
        settings.airtable_base_id,
        settings.airtable_table_ids(),
        api_url=settings.airtable_api_url,
        timeout=settings.airtable_timeout_seconds,
        max_retries=settings.airtable_max_retries,
        backoff_seconds=settings.airtable_backoff_seconds,
    )


def init_record_store(settings: Settings) -> AirtableRESTClient | None:
    """Build the client if configured.

    Safe to call when the API key or base id is not set: logs and returns
    None so the app can start (health answers, data routes fail with 503).
    """
    if not settings.airtable_configured:
        logger.warning(
            "Airtable not configured (AIRTABLE_API_KEY / AIRTABLE_BASE_ID); record store disabled"
        )
        return None
    missing = [name for name, table_id in settings.airtable_table_ids().items() if not table_id]
    if missing:
        logger.warning("Airtable tables without ids (calls will fail): %s", ", ".join(sorted(missing)))
    logger.info("Airtable client initialized for base %s", settings.airtable_base_id)
    return build_record_store(settings)
