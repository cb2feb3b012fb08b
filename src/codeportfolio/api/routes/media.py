"""Serve blobs from the local image store."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import FileResponse

from codeportfolio.models.errors import StorageError
from codeportfolio.services.image_storage import get_blob_store, get_media_type

router = APIRouter(prefix="/media", tags=["media"])


@router.get(
    "/{path:path}",
    summary="Get a stored image",
    responses={
        200: {"description": "Image file"},
        404: {"description": "Image not found"},
    },
)
def get_media(path: str) -> FileResponse:
    try:
        target = get_blob_store().resolve(path)
    except StorageError:
        target = None
    if target is None or not target.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found.")
    media_type = get_media_type(target) or "application/octet-stream"
    return FileResponse(target, media_type=media_type)
