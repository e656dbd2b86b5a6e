"""Coupon aggregate: a percentage discount with an expiration date."""

import secrets
from datetime import UTC, date, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, Date, DateTime, Integer, String

from ordering.domain import ordering


def generate_coupon_code() -> str:
    return f"GV-{secrets.token_hex(4).upper()}"


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


def today() -> date:
    return datetime.now(UTC).date()


@ordering.aggregate(schema_name="coupons")
class Coupon:
    code = String(required=True, max_length=40, unique=True)
    discount_percentage = Integer(required=True)
    expiration_date = Date(required=True)
    is_active = Boolean(default=True)
    created_at = DateTime(default=lambda: datetime.now(UTC))

    @classmethod
    def create(cls, discount_percentage: int, expiration_date: date, code: str | None = None) -> "Coupon":
        code = normalize_code(code or generate_coupon_code())
        if not code:
            raise ValidationError({"code": ["Coupon code cannot be blank"]})
        return cls(
            code=code,
            discount_percentage=_validate_discount(discount_percentage),
            expiration_date=expiration_date,
            is_active=True,
        )

    def is_expired(self, on: date | None = None) -> bool:
        return self.expiration_date < (on or today())

    def ensure_redeemable(self, on: date | None = None) -> None:
        if self.is_expired(on):
            raise ValidationError({"coupon": ["Coupon is expired"]})
        if not self.is_active:
            raise ValidationError({"coupon": ["Coupon is inactive"]})

    def change_discount(self, discount_percentage: int) -> None:
        self.discount_percentage = _validate_discount(discount_percentage)

    def set_active(self, active: bool) -> None:
        self.is_active = active

    def toggle(self) -> None:
        self.is_active = not self.is_active


def _validate_discount(discount_percentage: int) -> int:
    if discount_percentage is None or not 1 <= int(discount_percentage) <= 100:
        raise ValidationError({"discountPercentage": ["Discount must be between 1 and 100 percent"]})
    return int(discount_percentage)
