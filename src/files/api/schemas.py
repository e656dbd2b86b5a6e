"""Pydantic response schemas for the Files API."""

from __future__ import annotations

from datetime import datetime

from shared.schemas import CamelModel


class ImageResponse(CamelModel):
    id: str
    product_id: str
    public_id: str
    secure_url: str
    created_at: datetime | None = None


class UploadFailureResponse(CamelModel):
    filename: str
    reason: str


class GalleryUploadResponse(CamelModel):
    message: str
    images: list[ImageResponse]
    failed_uploads: list[UploadFailureResponse] = []
