"""Local filesystem storage with path validation and atomic writes."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, BinaryIO, cast

import aiofiles
import aiofiles.os

from app.infrastructure.exceptions import (
    StorageDeleteError,
    StoragePermissionError,
    StorageUploadError,
)
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

PUBLIC_PATH = "/files"


class LocalStorageService:
    """Local filesystem storage with atomic writes and path traversal protection.

    Paths are validated against storage_root. Writes use temp file + rename.
    Metadata is kept in a .meta.json sidecar. Files are served read-only
    under PUBLIC_PATH by the application.
    """

    CHUNK_SIZE = 64 * 1024  # 64KB

    def __init__(self, storage_root: str, base_url: str | None = None) -> None:
        """Initialize local storage.

        Args:
            storage_root: Base directory for all files.
            base_url: Public origin of the API (e.g. https://api.example.com).
        """
        self.storage_root = Path(storage_root).resolve()
        self.base_url = base_url.rstrip("/") if base_url else ""
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, storage_ref: str) -> Path:
        """Resolve and validate path under storage_root. Raises StoragePermissionError if traversal."""
        full_path = (self.storage_root / storage_ref).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(storage_ref, "path_validation") from e
        return full_path

    @staticmethod
    def _meta_path(file_path: Path) -> Path:
        return file_path.with_suffix(file_path.suffix + ".meta.json")

    async def _compute_checksum(self, file_path: Path) -> str:
        sha256 = hashlib.sha256()
        async with aiofiles.open(file_path, "rb") as f:
            while chunk := await f.read(self.CHUNK_SIZE):
                sha256.update(chunk)
        return sha256.hexdigest()

    async def _read_metadata(self, file_path: Path) -> dict[str, Any]:
        meta_path = self._meta_path(file_path)
        if not meta_path.exists():
            return {}
        async with aiofiles.open(meta_path) as f:
            result = json.loads(await f.read())
        return cast(dict[str, Any], result) if isinstance(result, dict) else {}

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        expected_checksum: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Write file atomically; same ref with same checksum is a no-op."""
        target_path = self._get_full_path(storage_ref)
        try:
            if target_path.exists():
                existing_checksum = await self._compute_checksum(target_path)
                if existing_checksum == expected_checksum:
                    existing_meta = await self._read_metadata(target_path)
                    return {
                        "storage_ref": storage_ref,
                        "checksum": existing_checksum,
                        "size": target_path.stat().st_size,
                        "uploaded_at": existing_meta.get("uploaded_at", utc_now().isoformat()),
                    }
                raise StorageUploadError(storage_ref, "a different file already exists")

            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            content = file_data.read()
            computed = hashlib.sha256(content).hexdigest()
            if computed != expected_checksum:
                raise StorageUploadError(storage_ref, "checksum mismatch")

            temp_fd, temp_path = tempfile.mkstemp(
                dir=target_path.parent, prefix=".tmp_", suffix=target_path.suffix
            )
            os.close(temp_fd)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(content)
                os.chmod(temp_path, 0o640)
                os.replace(temp_path, target_path)
            finally:
                if Path(temp_path).exists():
                    os.unlink(temp_path)

            uploaded_at = utc_now().isoformat()
            async with aiofiles.open(self._meta_path(target_path), "w") as f:
                await f.write(
                    json.dumps(
                        {
                            "storage_ref": storage_ref,
                            "checksum": computed,
                            "size": len(content),
                            "content_type": content_type,
                            "uploaded_at": uploaded_at,
                            "custom": metadata or {},
                        },
                        indent=2,
                    )
                )
        except StorageUploadError:
            raise
        except OSError as e:
            logger.error("Local upload of %s failed: %s", storage_ref, e)
            raise StorageUploadError(storage_ref, str(e)) from e
        return {
            "storage_ref": storage_ref,
            "checksum": computed,
            "size": len(content),
            "uploaded_at": uploaded_at,
        }

    async def delete(self, storage_ref: str) -> bool:
        """Delete file and its sidecar. Returns True if deleted."""
        file_path = self._get_full_path(storage_ref)
        if not file_path.exists():
            return False
        try:
            await aiofiles.os.remove(file_path)
            meta_path = self._meta_path(file_path)
            if meta_path.exists():
                await aiofiles.os.remove(meta_path)
        except OSError as e:
            raise StorageDeleteError(storage_ref, str(e)) from e
        return True

    async def exists(self, storage_ref: str) -> bool:
        return self._get_full_path(storage_ref).exists()

    def public_url(self, storage_ref: str) -> str:
        return f"{self.base_url}{PUBLIC_PATH}/{storage_ref}"
