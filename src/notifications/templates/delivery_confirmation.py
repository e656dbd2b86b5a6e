"""Delivery confirmation template, sent when an order is delivered."""

from notifications.types import NotificationType


class DeliveryConfirmationTemplate:
    notification_type = NotificationType.DELIVERY_CONFIRMATION.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        return {
            "subject": "Your Order Has Been Delivered",
            "body": (
                f"Your order #{order_id} has been marked as delivered.\n\n"
                "We hope you enjoy your games! If anything is missing or damaged, "
                "reply to this email and our support team will help.\n\n"
                "Thank you for shopping with GameVault!"
            ),
        }
