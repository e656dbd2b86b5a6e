"""Pydantic request/response models for the mail API."""

from pydantic import EmailStr, Field, model_validator

from shared.schemas import CamelModel


class SendCouponEmailsRequest(CamelModel):
    """Pairs ``emails[i]`` with ``coupons[i]``."""

    model_config = {
        "json_schema_extra": {
            "examples": [{"emails": ["ana@example.com", "leo@example.com"], "coupons": ["GV-7K2M9QXA", "GV-P3D8W1ZC"]}]
        }
    }

    emails: list[EmailStr] = Field(..., min_length=1, max_length=500)
    coupons: list[str] = Field(..., min_length=1, max_length=500)

    @model_validator(mode="after")
    def check_pairs(self):
        if len(self.emails) != len(self.coupons):
            raise ValueError("emails and coupons must have the same length")
        return self


class SendOrderEmailRequest(CamelModel):
    order_id: int


class MailQueuedResponse(CamelModel):
    message: str
    queued: int
