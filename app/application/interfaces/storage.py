"""Storage service interface (port) used by the upload use case."""

from typing import Any, BinaryIO, Protocol


class IStorageService(Protocol):
    """Protocol for storage backends (DIP)."""

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        expected_checksum: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Store file; returns storage_ref, checksum and size."""
        ...

    async def delete(self, storage_ref: str) -> bool:
        """Delete file. Returns True if deleted."""
        ...

    def public_url(self, storage_ref: str) -> str:
        """URL for the stored file."""
        ...
