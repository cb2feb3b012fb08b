"""Shared dependencies for API routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import Header, HTTPException, UploadFile, status

from codeportfolio.models.caller import CallerContext
from codeportfolio.services.image_storage import ImageUpload

_USER_ID_DESCRIPTION = (
    "Id of the signed-in user. Stands in for the identity provider's session or JWT."
)


def get_current_caller(
    x_user_id: Annotated[str | None, Header(description=_USER_ID_DESCRIPTION)] = None,
) -> CallerContext:
    """Return the caller identity for owner-scoped routes.

    Raises:
        HTTPException: If the X-User-Id header is missing (401).
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authentication. Please provide X-User-Id header.",
        )
    return CallerContext(user_id=x_user_id.strip())


async def read_upload(file: UploadFile) -> ImageUpload:
    """Read a multipart file into the storage layer's upload type."""
    data = await file.read()
    return ImageUpload(filename=file.filename, content_type=file.content_type, data=data)
