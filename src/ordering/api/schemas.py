"""Pydantic request/response schemas for the Ordering API."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import EmailStr, Field

from catalogue.product.product import ProductType
from ordering.order.order import OrderStatus, ShippingStatus
from shared.schemas import CamelModel, Money

# --- Request Schemas ---


class CartItemRequest(CamelModel):
    product_id: uuid.UUID
    quantity: int = Field(1, ge=1, le=99)


class MergeCartRequest(CamelModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"items": [{"productId": "0b6f4d8e-3c1a-4f55-9a57-2b1f3c7d9e10", "quantity": 3}]}]
        }
    }

    items: list[CartItemRequest] = Field(default_factory=list, max_length=100)


class UpdateCartItemRequest(CamelModel):
    quantity: int = Field(..., ge=1, le=99)


class OrderItemRequest(CamelModel):
    product_id: uuid.UUID
    quantity: int = Field(..., ge=1, le=99)


class CreateOrderRequest(CamelModel):
    products: list[OrderItemRequest] = Field(..., min_length=1, max_length=100)
    coupon_code: str | None = Field(None, max_length=40)


class CreateCouponRequest(CamelModel):
    model_config = {
        "json_schema_extra": {"examples": [{"discountPercentage": 15, "expirationDate": "2026-12-31"}]}
    }

    discount_percentage: int = Field(..., ge=1, le=100)
    expiration_date: date
    code: str | None = Field(None, min_length=3, max_length=40)


class SendCouponsRequest(CamelModel):
    emails: list[EmailStr] = Field(..., min_length=1, max_length=500)
    discount_percentage: int = Field(..., ge=1, le=100)
    expiration_date: date


class UpdateDiscountRequest(CamelModel):
    discount_percentage: int = Field(..., ge=1, le=100)


class CouponStatusRequest(CamelModel):
    is_active: bool


# --- Response Schemas ---


class CartLineResponse(CamelModel):
    product_id: str
    name: str
    unit_price: Money
    quantity: int
    subtotal: Money
    image_url: str


class CartResponse(CamelModel):
    items: list[CartLineResponse]
    total: Money
    item_count: int


class MergeCartResponse(CamelModel):
    cart: CartResponse
    skipped: list[str] = []
    adjusted: list[str] = []


class OrderLineResponse(CamelModel):
    product_id: str
    quantity: int
    price: Money


class OrderResponse(CamelModel):
    id: int = Field(validation_alias="number")
    user_id: str
    status: OrderStatus
    shipping_status: ShippingStatus
    is_paid: bool
    amount: Money
    discount_percentage: int
    coupon_code: str | None = None
    mp_preference_id: str | None = None
    mp_order_id: str | None = None
    created_at: datetime | None = None
    lines: list[OrderLineResponse] = []


class OrderDetailLineResponse(CamelModel):
    product_id: str
    name: str
    type: ProductType
    image_url: str
    quantity: int
    price: Money
    subtotal: Money


class OrderDetailsResponse(CamelModel):
    order: OrderResponse
    lines: list[OrderDetailLineResponse]


class DeliveryResponse(CamelModel):
    message: str
    order_id: int
    already_delivered: bool


class CouponResponse(CamelModel):
    id: str
    code: str
    discount_percentage: int
    expiration_date: date
    is_active: bool
    created_at: datetime | None = None


class CouponValidationResponse(CamelModel):
    valid: bool
    coupon: CouponResponse
