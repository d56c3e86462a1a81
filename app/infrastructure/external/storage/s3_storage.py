"""S3-compatible object storage (AWS S3, MinIO, etc.) with checksum metadata."""

from __future__ import annotations

import asyncio
import hashlib
import logging
from typing import Any, BinaryIO

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.infrastructure.exceptions import StorageDeleteError, StorageUploadError

logger = logging.getLogger(__name__)


def _is_missing(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound")


class S3StorageService:
    """S3-compatible storage with server-side encryption.

    Uses boto3 (sync) via asyncio.to_thread for the async API. Compatible
    with AWS S3, MinIO, DigitalOcean Spaces.
    """

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        base_url: str | None = None,
    ) -> None:
        """Initialize S3 client.

        Args:
            bucket: Bucket name.
            region: AWS region.
            endpoint_url: Custom endpoint (MinIO/Spaces).
            access_key: Optional; uses env/IAM if not set.
            secret_key: Optional.
            base_url: Public origin for object URLs (CDN); defaults to the bucket URL.
        """
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
        self._client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            **extra,
        )
        if base_url:
            self.base_url = base_url.rstrip("/")
        elif endpoint_url:
            self.base_url = f"{endpoint_url.rstrip('/')}/{bucket}"
        else:
            self.base_url = f"https://{bucket}.s3.{region}.amazonaws.com"

    def _head(self, storage_ref: str) -> dict[str, Any] | None:
        try:
            return self._client.head_object(Bucket=self.bucket, Key=storage_ref)
        except ClientError as e:
            if _is_missing(e):
                return None
            raise

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        expected_checksum: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Upload with checksum validation. Idempotent if same checksum."""

        def _upload() -> dict[str, Any]:
            head = self._head(storage_ref)
            if head is not None:
                existing = (head.get("Metadata") or {}).get("sha256")
                if existing == expected_checksum:
                    return {
                        "storage_ref": storage_ref,
                        "checksum": existing,
                        "size": head["ContentLength"],
                        "uploaded_at": head["LastModified"].isoformat(),
                    }
                raise StorageUploadError(storage_ref, "a different object already exists")

            file_data.seek(0)
            body = file_data.read()
            computed = hashlib.sha256(body).hexdigest()
            if computed != expected_checksum:
                raise StorageUploadError(storage_ref, "checksum mismatch")
            meta = {"sha256": computed}
            for k, v in (metadata or {}).items():
                meta[k.lower().replace("_", "-")] = v
            self._client.put_object(
                Bucket=self.bucket,
                Key=storage_ref,
                Body=body,
                ContentType=content_type,
                ServerSideEncryption="AES256",
                Metadata=meta,
            )
            return {"storage_ref": storage_ref, "checksum": computed, "size": len(body)}

        try:
            return await asyncio.to_thread(_upload)
        except StorageUploadError:
            raise
        except (ClientError, BotoCoreError) as e:
            logger.error("S3 upload of %s failed: %s", storage_ref, e)
            raise StorageUploadError(storage_ref, str(e)) from e

    async def delete(self, storage_ref: str) -> bool:
        """Delete object. Returns True if deleted."""

        def _delete() -> bool:
            if self._head(storage_ref) is None:
                return False
            self._client.delete_object(Bucket=self.bucket, Key=storage_ref)
            return True

        try:
            return await asyncio.to_thread(_delete)
        except (ClientError, BotoCoreError) as e:
            raise StorageDeleteError(storage_ref, str(e)) from e

    async def exists(self, storage_ref: str) -> bool:
        return await asyncio.to_thread(lambda: self._head(storage_ref) is not None)

    def public_url(self, storage_ref: str) -> str:
        return f"{self.base_url}/{storage_ref}"
