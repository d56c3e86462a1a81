"""DTO for a stored deliverable file."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UploadedFile:
    """A file written to storage, ready to go on a submission's files column."""

    url: str
    filename: str
    size: int
    content_type: str
    storage_ref: str
    checksum: str
