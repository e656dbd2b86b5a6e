"""Pydantic request/response schemas for the Payments API."""

import uuid

from pydantic import Field

from shared.schemas import CamelModel


class CheckoutItemRequest(CamelModel):
    product_id: uuid.UUID
    quantity: int = Field(..., ge=1, le=99)


class CheckoutRequest(CamelModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "products": [{"productId": "0b6f4d8e-3c1a-4f55-9a57-2b1f3c7d9e10", "quantity": 2}],
                    "couponCode": "GV-7K2M9QXA",
                }
            ]
        }
    }

    products: list[CheckoutItemRequest] = Field(..., min_length=1, max_length=100)
    coupon_code: str | None = Field(None, max_length=40)


class CheckoutResponse(CamelModel):
    order_id: int
    preference_id: str
    init_point: str


class WebhookAck(CamelModel):
    received: bool = True
