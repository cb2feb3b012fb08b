from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from codeportfolio.data.db import init_db, reset_engine
from codeportfolio.models.caller import CallerContext
from codeportfolio.services.image_storage import BlobStore, ImageUpload

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32


@pytest.fixture(autouse=True)
def temp_db(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Point every test at its own SQLite database and upload directory."""
    db_path = tmp_path / "portfolio.db"
    monkeypatch.setenv("DB_URL", f"sqlite:///{db_path.as_posix()}")
    monkeypatch.setenv("CODEPORTFOLIO_UPLOAD_DIR", (tmp_path / "uploads").as_posix())
    monkeypatch.delenv("CODEPORTFOLIO_MEDIA_BASE_URL", raising=False)
    monkeypatch.delenv("CODEPORTFOLIO_PUBLIC_BASE_URL", raising=False)
    reset_engine()
    init_db()
    yield
    reset_engine()


@pytest.fixture
def caller() -> CallerContext:
    return CallerContext(user_id="user-1")


@pytest.fixture
def other_caller() -> CallerContext:
    return CallerContext(user_id="user-2")


@pytest.fixture
def store(tmp_path: Path) -> BlobStore:
    return BlobStore(tmp_path / "uploads", "/media")


@pytest.fixture
def client() -> TestClient:
    from codeportfolio.api.main import app

    return TestClient(app)


def png_upload(name: str = "shot.png") -> ImageUpload:
    return ImageUpload(filename=name, content_type="image/png", data=PNG_BYTES)
