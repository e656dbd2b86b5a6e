from enum import Enum


class NotificationType(Enum):
    WELCOME = "Welcome"
    ACCOUNT_CONFIRMATION = "AccountConfirmation"
    ORDER_DETAILS = "OrderDetails"
    DELIVERY_CONFIRMATION = "DeliveryConfirmation"
    COUPON_GIFT = "CouponGift"
