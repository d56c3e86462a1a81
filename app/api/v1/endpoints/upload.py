"""Deliverable upload route (multipart)."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Request, UploadFile

from app.api.v1.dependencies import CurrentUser, get_upload_use_case
from app.application.use_cases import UploadFileUseCase
from app.core.limiter import limit_upload
from app.schemas.upload import UploadedFileOut, UploadResponse

router = APIRouter()


@router.post("", response_model=UploadResponse, status_code=201)
@limit_upload
async def upload_file(
    request: Request,
    file: Annotated[UploadFile, File(description="Deliverable to attach to a submission")],
    user: CurrentUser,
    use_case: Annotated[UploadFileUseCase, Depends(get_upload_use_case)],
) -> UploadResponse:
    """Store a file; the returned url goes into a submission's files."""
    try:
        stored = await use_case.execute(
            file.file, file.filename or "", file.content_type, uploaded_by=user.sub
        )
    finally:
        await file.close()
    return UploadResponse(
        file=UploadedFileOut(
            url=stored.url,
            filename=stored.filename,
            size=stored.size,
            content_type=stored.content_type,
        )
    )
