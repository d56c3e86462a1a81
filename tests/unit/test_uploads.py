"""Upload use case and local storage backend (tmp_path)."""

import hashlib
import io

import pytest

from app.application.use_cases import UploadFileUseCase
from app.application.use_cases.uploads import sanitize_filename
from app.core.config import Settings
from app.domain.exceptions import ValidationException
from app.infrastructure.exceptions import StoragePermissionError, StorageUploadError
from app.infrastructure.external.storage import StorageFactory
from app.infrastructure.external.storage.local_storage import LocalStorageService

ALLOWED = frozenset({"application/pdf", "image/png"})


@pytest.fixture
def storage(tmp_path) -> LocalStorageService:
    return LocalStorageService(str(tmp_path / "uploads"), base_url="https://api.example.com/")


def test_sanitize_filename_strips_directories() -> None:
    assert sanitize_filename("../../etc/passwd") == "passwd"
    assert sanitize_filename("C:\\Users\\ada\\pitch.pdf") == "pitch.pdf"
    with pytest.raises(ValidationException):
        sanitize_filename("..")


async def test_upload_stores_file_and_returns_public_url(storage, tmp_path) -> None:
    use_case = UploadFileUseCase(storage, ALLOWED, max_size=1024)
    uploaded = await use_case.execute(
        io.BytesIO(b"%PDF-1.4 deck"), "Pitch Deck.pdf", "application/pdf; charset=binary", "auth0|ada"
    )
    assert uploaded.filename == "Pitch Deck.pdf"
    assert uploaded.size == len(b"%PDF-1.4 deck")
    assert uploaded.content_type == "application/pdf"
    assert uploaded.checksum == hashlib.sha256(b"%PDF-1.4 deck").hexdigest()
    assert uploaded.storage_ref.startswith("uploads/")
    assert uploaded.url == f"https://api.example.com/files/{uploaded.storage_ref}"
    stored = tmp_path / "uploads" / uploaded.storage_ref
    assert stored.read_bytes() == b"%PDF-1.4 deck"
    assert stored.with_suffix(".pdf.meta.json").exists()


async def test_disallowed_type_is_rejected_before_storage(storage) -> None:
    use_case = UploadFileUseCase(storage, ALLOWED, max_size=1024)
    with pytest.raises(ValidationException, match="not allowed"):
        await use_case.execute(io.BytesIO(b"MZ"), "tool.exe", "application/x-msdownload")


async def test_empty_and_oversized_files_are_rejected(storage) -> None:
    use_case = UploadFileUseCase(storage, ALLOWED, max_size=4)
    with pytest.raises(ValidationException, match="empty"):
        await use_case.execute(io.BytesIO(b""), "a.pdf", "application/pdf")
    with pytest.raises(ValidationException, match="maximum size"):
        await use_case.execute(io.BytesIO(b"12345"), "a.pdf", "application/pdf")


async def test_local_upload_rejects_checksum_mismatch(storage) -> None:
    with pytest.raises(StorageUploadError):
        await storage.upload(io.BytesIO(b"data"), "uploads/x/a.pdf", "0" * 64, "application/pdf")


async def test_local_upload_same_content_is_idempotent(storage) -> None:
    checksum = hashlib.sha256(b"data").hexdigest()
    first = await storage.upload(io.BytesIO(b"data"), "uploads/x/a.pdf", checksum, "application/pdf")
    second = await storage.upload(io.BytesIO(b"data"), "uploads/x/a.pdf", checksum, "application/pdf")
    assert first["checksum"] == second["checksum"] == checksum
    assert second["size"] == 4


async def test_local_storage_rejects_path_traversal(storage) -> None:
    with pytest.raises(StoragePermissionError):
        await storage.exists("../outside.txt")


async def test_local_delete(storage) -> None:
    checksum = hashlib.sha256(b"data").hexdigest()
    await storage.upload(io.BytesIO(b"data"), "uploads/x/a.pdf", checksum, "application/pdf")
    assert await storage.delete("uploads/x/a.pdf") is True
    assert await storage.exists("uploads/x/a.pdf") is False
    assert await storage.delete("uploads/x/a.pdf") is False


def test_factory_builds_local_backend(tmp_path) -> None:
    settings = Settings(storage_backend="local", storage_root=str(tmp_path / "files"))
    storage = StorageFactory.create_storage_service(settings)
    assert isinstance(storage, LocalStorageService)
    assert storage.public_url("uploads/a.pdf") == "/files/uploads/a.pdf"


def test_factory_rejects_unknown_backend() -> None:
    settings = Settings.model_construct(storage_backend="ftp")
    with pytest.raises(ValueError, match="Unknown storage backend"):
        StorageFactory.create_storage_service(settings)
