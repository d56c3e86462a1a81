"""Multipart upload route against the local storage backend."""

import pytest

from app.infrastructure.external.storage.local_storage import LocalStorageService
from app.main import app as fastapi_app


@pytest.fixture
def local_storage(client, tmp_path) -> LocalStorageService:
    storage = LocalStorageService(str(tmp_path), base_url="https://api.example.com")
    fastapi_app.state.storage = storage
    yield storage
    fastapi_app.state.storage = None


async def test_upload_returns_public_url(client, local_storage, tmp_path) -> None:
    response = await client.post(
        "/api/v1/upload",
        files={"file": ("deck.pdf", b"%PDF-1.4 pitch", "application/pdf")},
    )
    assert response.status_code == 201
    uploaded = response.json()["file"]
    assert uploaded["filename"] == "deck.pdf"
    assert uploaded["size"] == len(b"%PDF-1.4 pitch")
    assert uploaded["url"].startswith("https://api.example.com/files/uploads/")
    ref = uploaded["url"].removeprefix("https://api.example.com/files/")
    assert (tmp_path / ref).read_bytes() == b"%PDF-1.4 pitch"


async def test_upload_rejects_disallowed_type(client, local_storage) -> None:
    response = await client.post(
        "/api/v1/upload",
        files={"file": ("run.sh", b"#!/bin/sh", "text/x-shellscript")},
    )
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "file"}


async def test_upload_without_storage_is_503(client) -> None:
    response = await client.post(
        "/api/v1/upload",
        files={"file": ("deck.pdf", b"%PDF", "application/pdf")},
    )
    assert response.status_code == 503
