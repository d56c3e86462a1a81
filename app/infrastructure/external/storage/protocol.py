"""Storage service protocol (DIP). Implementations: LocalStorageService, S3StorageService."""

from typing import Any, BinaryIO, Protocol


class StorageProtocol(Protocol):
    """Protocol for object storage backends holding uploaded deliverables."""

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        expected_checksum: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Store file with checksum verification. Idempotent if same checksum."""
        ...

    async def delete(self, storage_ref: str) -> bool:
        """Delete file. Returns True if deleted, False if not found."""
        ...

    async def exists(self, storage_ref: str) -> bool:
        """Return True if file exists."""
        ...

    def public_url(self, storage_ref: str) -> str:
        """URL a submission can link to for this file."""
        ...
