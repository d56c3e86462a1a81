"""Attachment DTO shared by submissions and resources."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Attachment:
    """One file on an attachment column (url is the only required key on write)."""

    id: str
    url: str
    filename: str
    size: int
    content_type: str
