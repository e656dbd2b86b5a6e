"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import Field

from catalogue.product.product import ProductType
from files.api.schemas import ImageResponse, UploadFailureResponse
from shared.schemas import CamelModel, Money

# --- Request Schemas ---


class CreateCategoryRequest(CamelModel):
    model_config = {"json_schema_extra": {"examples": [{"name": "RPG"}]}}

    name: str = Field(..., min_length=1, max_length=100)


class UpdateCategoryRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)


class UpdateProductRequest(CamelModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Elden Ring Collector's Edition",
                    "price": 189.99,
                    "stock": 12,
                }
            ]
        }
    }

    name: str | None = Field(None, min_length=1, max_length=150)
    description: str | None = Field(None, max_length=5000)
    price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    stock: int | None = Field(None, ge=0)
    type: ProductType | None = None
    category_id: uuid.UUID | None = None


# --- Response Schemas ---


class CategoryResponse(CamelModel):
    id: str
    name: str
    created_at: datetime | None = None


class ProductResponse(CamelModel):
    id: str
    name: str
    description: str | None = None
    price: Money
    stock: int
    type: ProductType
    image_url: str
    category_id: str
    is_active: bool
    created_at: datetime | None = None


class ProductCreatedResponse(CamelModel):
    message: str
    product: ProductResponse
    images: list[ImageResponse] = []
    failed_uploads: list[UploadFailureResponse] = []


class ProductCountResponse(CamelModel):
    count: int
