"""Upload API schemas."""

from pydantic import BaseModel


class UploadedFileOut(BaseModel):
    url: str
    filename: str
    size: int
    content_type: str


class UploadResponse(BaseModel):
    file: UploadedFileOut
