"""Deliverable upload: validate, checksum and store a file for a submission."""

from __future__ import annotations

import asyncio
import hashlib
import logging
import os
from typing import BinaryIO

from app.application.dtos.upload import UploadedFile
from app.application.interfaces.storage import IStorageService
from app.core.constants import UPLOAD_KEY_PREFIX
from app.domain.exceptions import ValidationException
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)


def _rewind_if_seekable(file_data: BinaryIO) -> None:
    if getattr(file_data, "seekable", lambda: False)():
        file_data.seek(0)


def sanitize_filename(filename: str) -> str:
    """Strip path separators and dangerous characters from filename."""
    name = os.path.basename(filename.replace("\\", "/"))
    name = name.replace("\x00", "").strip(". ")
    if not name:
        raise ValidationException("Filename is empty or invalid", field="file")
    return name


def _checksum_and_size_sync(file_data: BinaryIO, limit: int) -> tuple[str, int]:
    """Blocking: one pass over file_data. Stops once size exceeds limit."""
    sha256 = hashlib.sha256()
    total = 0
    while chunk := file_data.read(65536):
        sha256.update(chunk)
        total += len(chunk)
        if total > limit:
            break
    _rewind_if_seekable(file_data)
    return sha256.hexdigest(), total


class UploadFileUseCase:
    """Stores one uploaded deliverable under uploads/<yyyy>/<mm>/<cuid>/<name>."""

    def __init__(
        self,
        storage: IStorageService,
        allowed_content_types: frozenset[str],
        max_size: int,
    ) -> None:
        self.storage = storage
        self.allowed_content_types = allowed_content_types
        self.max_size = max_size

    def _storage_ref(self, filename: str) -> str:
        now = utc_now()
        return f"{UPLOAD_KEY_PREFIX}/{now:%Y}/{now:%m}/{generate_cuid()}/{filename}"

    async def execute(
        self,
        file_data: BinaryIO,
        filename: str,
        content_type: str | None,
        uploaded_by: str | None = None,
    ) -> UploadedFile:
        """Validate type and size, then write to storage.

        Raises:
            ValidationException: Empty file, disallowed type or file too large.
            StorageUploadError: Backend write failed.
        """
        safe_name = sanitize_filename(filename or "")
        mime_type = (content_type or "").split(";")[0].strip().lower()
        if mime_type not in self.allowed_content_types:
            raise ValidationException(
                f"File type '{mime_type or 'unknown'}' is not allowed", field="file"
            )
        checksum, size = await asyncio.to_thread(
            _checksum_and_size_sync, file_data, self.max_size
        )
        if size == 0:
            raise ValidationException("File is empty", field="file")
        if size > self.max_size:
            raise ValidationException(
                f"File exceeds the maximum size of {self.max_size // (1024 * 1024)} MB",
                field="file",
            )
        storage_ref = self._storage_ref(safe_name)
        metadata = {"original_filename": safe_name}
        if uploaded_by:
            metadata["uploaded_by"] = uploaded_by
        await self.storage.upload(
            file_data=file_data,
            storage_ref=storage_ref,
            expected_checksum=checksum,
            content_type=mime_type,
            metadata=metadata,
        )
        logger.info("Stored upload %s (%d bytes)", storage_ref, size)
        return UploadedFile(
            url=self.storage.public_url(storage_ref),
            filename=safe_name,
            size=size,
            content_type=mime_type,
            storage_ref=storage_ref,
            checksum=checksum,
        )
