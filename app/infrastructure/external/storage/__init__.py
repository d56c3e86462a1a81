"""Storage: local filesystem and S3-compatible backends for uploaded files.

StorageFactory picks the backend from app.core.config. The S3 backend is
imported lazily so local deployments never load boto3.
"""

from app.infrastructure.external.storage.factory import StorageFactory
from app.infrastructure.external.storage.protocol import StorageProtocol

__all__ = [
    "StorageFactory",
    "StorageProtocol",
]
