"""Template registry: maps NotificationType to template classes.

Each template renders ``{"subject", "body"}`` (and optionally ``"html"``)
from a plain context dict.
"""

from notifications.templates.account_confirmation import AccountConfirmationTemplate
from notifications.templates.coupon_gift import CouponGiftTemplate
from notifications.templates.delivery_confirmation import DeliveryConfirmationTemplate
from notifications.templates.order_details import OrderDetailsTemplate
from notifications.templates.welcome import WelcomeTemplate
from notifications.types import NotificationType

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.WELCOME.value: WelcomeTemplate,
    NotificationType.ACCOUNT_CONFIRMATION.value: AccountConfirmationTemplate,
    NotificationType.ORDER_DETAILS.value: OrderDetailsTemplate,
    NotificationType.DELIVERY_CONFIRMATION.value: DeliveryConfirmationTemplate,
    NotificationType.COUPON_GIFT.value: CouponGiftTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
