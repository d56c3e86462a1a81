"""Picks the upload backend (local directory or S3 bucket) from settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.infrastructure.external.storage.protocol import StorageProtocol

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def _local(settings: Settings) -> StorageProtocol:
    from app.infrastructure.external.storage.local_storage import LocalStorageService

    if not settings.storage_root:
        raise ValueError("STORAGE_ROOT required for local backend")
    if not settings.storage_base_url:
        logger.warning("STORAGE_BASE_URL not set; upload URLs will be relative (/files/...)")
    return LocalStorageService(settings.storage_root, base_url=settings.storage_base_url)


def _s3(settings: Settings) -> StorageProtocol:
    if not settings.s3_bucket:
        raise ValueError("S3_BUCKET required for s3 backend")
    from app.infrastructure.external.storage.s3_storage import S3StorageService

    secret = settings.s3_secret_key.get_secret_value() if settings.s3_secret_key else None
    return S3StorageService(
        bucket=settings.s3_bucket,
        region=settings.s3_region,
        endpoint_url=settings.s3_endpoint_url,
        access_key=settings.s3_access_key,
        secret_key=secret,
        base_url=settings.storage_base_url,
    )


_BACKENDS = {"local": _local, "s3": _s3}


class StorageFactory:
    """Builds the storage backend used for deliverable uploads."""

    @staticmethod
    def create_storage_service(settings: Settings) -> StorageProtocol:
        """Backend for settings.storage_backend.

        Raises:
            ValueError: Unknown backend or missing required config.
            OSError: Local storage root cannot be created.
        """
        backend = settings.storage_backend.lower()
        build = _BACKENDS.get(backend)
        if build is None:
            raise ValueError(f"Unknown storage backend: {backend}. Supported: {', '.join(_BACKENDS)}")
        storage = build(settings)
        logger.info("Upload storage backend: %s", backend)
        return storage
