"""Schemas for pre-signed media uploads."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class UploadUrlRequest(BaseModel):
    """Describes the file the client is about to upload."""

    kind: Literal["post", "avatar"] = "post"
    file_type: Literal["image", "video"] = "image"
    file_name: str = Field(..., min_length=1, max_length=255)
    content_type: str = Field(..., min_length=1, max_length=100)
    size: int | None = Field(None, ge=0, description="File size in bytes")


class UploadUrlResponse(BaseModel):
    upload_url: str
    public_url: str
