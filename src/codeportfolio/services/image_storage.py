"""Blob storage for portfolio images kept on local disk.

Objects are written under ``CODEPORTFOLIO_UPLOAD_DIR`` and served from
``CODEPORTFOLIO_MEDIA_BASE_URL``. Uploaded bytes are sniffed to make sure they
really are images before anything is stored.
"""

from __future__ import annotations

import asyncio
import logging
import os
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from codeportfolio.constants.portfolio_constants import MAX_IMAGE_BYTES
from codeportfolio.models.errors import CapacityError, StorageError, ValidationError

logger = logging.getLogger(__name__)

PROJECT_IMAGE_FOLDER = "project-images"
AVATAR_FOLDER = "avatars"

IMAGE_TYPE_TO_MIME = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "bmp": "image/bmp",
}
IMAGE_TYPE_TO_EXTENSION = {
    "png": ".png",
    "jpeg": ".jpg",
    "gif": ".gif",
    "webp": ".webp",
    "bmp": ".bmp",
}
EXTENSION_TO_MIME = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
}
CONTENT_TYPE_ALIASES = {
    "image/jpg": "image/jpeg",
    "image/pjpeg": "image/jpeg",
}


@dataclass(frozen=True, slots=True)
class ImageUpload:
    """One file selected by the user for upload."""

    filename: str | None
    content_type: str | None
    data: bytes


@dataclass(frozen=True, slots=True)
class ImageInfo:
    image_type: str
    mime_type: str
    extension: str


def get_upload_storage_root() -> Path:
    """Return the root directory for stored blobs."""
    env_root = os.getenv("CODEPORTFOLIO_UPLOAD_DIR")
    if env_root:
        return Path(env_root).expanduser().resolve()

    project_root = Path(__file__).resolve().parents[3]
    return project_root / ".codeportfolio_uploads"


def get_media_base_url() -> str:
    return os.getenv("CODEPORTFOLIO_MEDIA_BASE_URL", "/media").rstrip("/")


def get_media_type(path: Path) -> str | None:
    """Return the MIME type for a stored blob path."""
    return EXTENSION_TO_MIME.get(path.suffix.lower())


class BlobStore:
    """Local-disk object store addressed by relative POSIX paths."""

    def __init__(self, root: Path, base_url: str) -> None:
        self.root = root
        self.base_url = base_url.rstrip("/")

    @classmethod
    def from_env(cls) -> BlobStore:
        return cls(get_upload_storage_root(), get_media_base_url())

    def resolve(self, path: str) -> Path:
        """Map a relative object path to a file under the root, refusing escapes."""
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts or not relative.parts:
            raise StorageError(f"Invalid object path: {path}")
        return self.root.joinpath(*relative.parts)

    def get_public_url(self, path: str) -> str:
        return f"{self.base_url}/{path}"

    def path_from_url(self, url: str) -> str | None:
        """Return the object path for a URL this store issued, else None."""
        prefix = f"{self.base_url}/"
        if not url.startswith(prefix):
            return None
        return url[len(prefix) :]

    async def upload(self, path: str, data: bytes) -> str:
        """Write ``data`` at ``path`` and return its public URL."""
        target = self.resolve(path)
        try:
            await asyncio.to_thread(_write_bytes, target, data)
        except OSError as exc:
            logger.exception("Failed to store blob %s", path)
            raise StorageError("Failed to store image.") from exc
        return self.get_public_url(path)

    async def remove(self, path: str) -> None:
        target = self.resolve(path)
        try:
            await asyncio.to_thread(target.unlink, missing_ok=True)
        except OSError as exc:
            logger.exception("Failed to remove blob %s", path)
            raise StorageError("Failed to remove image.") from exc


def _write_bytes(target: Path, data: bytes) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)


def get_blob_store() -> BlobStore:
    """Return a store configured from the current environment."""
    return BlobStore.from_env()


def _normalize_content_type(content_type: str | None) -> str | None:
    if content_type is None:
        return None
    normalized = content_type.strip().lower()
    return CONTENT_TYPE_ALIASES.get(normalized, normalized)


def _detect_image_type(data: bytes) -> str | None:
    if len(data) >= 8 and data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "png"
    if len(data) >= 3 and data[:3] == b"\xff\xd8\xff":
        return "jpeg"
    if len(data) >= 6 and data[:6] in (b"GIF87a", b"GIF89a"):
        return "gif"
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "webp"
    if len(data) >= 2 and data[:2] == b"BM":
        return "bmp"
    return None


def validate_image(upload: ImageUpload) -> ImageInfo:
    """Check one upload, raising CapacityError or ValidationError for that file."""
    name = upload.filename or "file"
    if not upload.data:
        raise ValidationError(f"{name} is empty", field="images")
    if len(upload.data) > MAX_IMAGE_BYTES:
        raise CapacityError(
            f"{name} is too large (max {MAX_IMAGE_BYTES // (1024 * 1024)}MB)", field="images"
        )

    image_type = _detect_image_type(upload.data)
    if image_type is None:
        raise ValidationError(f"{name} is not an image", field="images")

    normalized_type = _normalize_content_type(upload.content_type)
    expected_mime = IMAGE_TYPE_TO_MIME[image_type]
    if normalized_type and normalized_type not in IMAGE_TYPE_TO_MIME.values():
        raise ValidationError(f"{name} is not an image", field="images")
    if normalized_type and normalized_type != expected_mime:
        raise ValidationError(f"{name} content type does not match image data", field="images")

    return ImageInfo(
        image_type=image_type,
        mime_type=expected_mime,
        extension=IMAGE_TYPE_TO_EXTENSION[image_type],
    )


def build_object_path(folder: str, extension: str) -> str:
    return f"{folder}/{uuid.uuid4().hex}{extension}"


async def upload_image_batch(
    uploads: Sequence[ImageUpload],
    *,
    folder: str = PROJECT_IMAGE_FOLDER,
    store: BlobStore | None = None,
) -> list[str]:
    """Upload every file in parallel and return their URLs in selection order.

    The batch is all-or-nothing: every file is validated before the first
    upload starts, and if any upload fails the ones that succeeded are removed
    again before the failure is raised.
    """
    store = store or get_blob_store()
    infos = [validate_image(upload) for upload in uploads]
    paths = [build_object_path(folder, info.extension) for info in infos]

    results = await asyncio.gather(
        *(store.upload(path, upload.data) for path, upload in zip(paths, uploads, strict=True)),
        return_exceptions=True,
    )
    failures = [result for result in results if isinstance(result, BaseException)]
    if not failures:
        return list(results)

    stored = [
        path
        for path, result in zip(paths, results, strict=True)
        if not isinstance(result, BaseException)
    ]
    await discard_blobs(stored, store=store)
    first = failures[0]
    if isinstance(first, StorageError):
        raise first
    raise StorageError("Failed to upload images.") from first


async def discard_blobs(paths: Sequence[str], *, store: BlobStore | None = None) -> None:
    """Remove blobs best-effort; failures are logged and otherwise ignored."""
    store = store or get_blob_store()
    for path in paths:
        try:
            await store.remove(path)
        except StorageError:
            logger.warning("Could not clean up blob %s", path)


async def discard_blob_url(url: str | None, *, store: BlobStore | None = None) -> None:
    """Remove the blob behind a public URL if this store issued it."""
    if not url:
        return
    store = store or get_blob_store()
    path = store.path_from_url(url)
    if path is not None:
        await discard_blobs([path], store=store)
