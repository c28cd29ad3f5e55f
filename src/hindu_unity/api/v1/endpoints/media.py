"""Pre-signed media upload endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from hindu_unity.api.v1.dependencies import CurrentUserDep, MediaClientDep
from hindu_unity.schemas.media import UploadUrlRequest, UploadUrlResponse
from hindu_unity.services.media import (
    MediaDisabledError,
    MediaServiceError,
    MediaValidationError,
    validate_upload,
)

router = APIRouter(prefix="/media", tags=["media"])


@router.post("/upload-url", response_model=UploadUrlResponse)
async def request_upload_url(
    payload: UploadUrlRequest,
    current_user: CurrentUserDep,
    media: MediaClientDep,
) -> UploadUrlResponse:
    """Obtain a URL the client can PUT a file to, and where it will be served.

    Args:
        payload: File description and upload kind
        current_user: Authenticated uploader
        media: Media companion client

    Returns:
        The pre-signed upload URL and the resulting public URL

    Raises:
        HTTPException: 400 for disallowed files, 503 when uploads are not
            configured, 502 when the media service fails
    """
    try:
        validate_upload(
            payload.kind,
            payload.content_type,
            payload.size,
            media.config.avatar_max_bytes,
        )
    except MediaValidationError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err

    try:
        upload_url, public_url = await media.request_upload_url(
            user_id=current_user.id,
            kind=payload.kind,
            file_type=payload.file_type,
            file_name=payload.file_name,
            content_type=payload.content_type,
        )
    except MediaDisabledError as err:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(err)) from err
    except MediaServiceError as err:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to get upload URL",
        ) from err
    return UploadUrlResponse(upload_url=upload_url, public_url=public_url)
