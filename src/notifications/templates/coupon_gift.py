"""Coupon gift template."""

from notifications.types import NotificationType


class CouponGiftTemplate:
    notification_type = NotificationType.COUPON_GIFT.value

    @staticmethod
    def render(context: dict) -> dict:
        code = context["code"]
        discount = context.get("discount_percentage", 0)
        expires = context.get("expiration_date", "")
        return {
            "subject": f"A {discount}% discount from GameVault",
            "body": (
                "You've received a GameVault coupon!\n\n"
                f"Code: {code}\n"
                f"Discount: {discount}%\n"
                f"Valid until: {expires}\n\n"
                "Enter the code at checkout to redeem it."
            ),
            "html": (
                "<p>You've received a GameVault coupon!</p>"
                f"<p style='font-size:20px'><strong>{code}</strong></p>"
                f"<p>{discount}% off, valid until {expires}.</p>"
            ),
        }
