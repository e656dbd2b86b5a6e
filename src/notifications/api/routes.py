"""FastAPI routes for transactional mail.

Mail goes out after the data it describes has been read back; an SMTP
failure is logged and never turns a request into an error. Coupons, orders
and accounts live in other contexts, so each route enters the one it reads.
"""

from fastapi import APIRouter, Depends

from identity.api.security import require_admin
from identity.domain import identity
from identity.user.authentication import Principal
from identity.user.registration import confirm_email
from notifications.api.schemas import MailQueuedResponse, SendCouponEmailsRequest, SendOrderEmailRequest
from notifications.dispatch import Mailer, get_mailer
from ordering.coupon.management import send_coupon_email, validate_coupon_code
from ordering.domain import ordering
from ordering.order.emails import send_order_details_email
from ordering.order.listing import get_order
from shared.schemas import MessageResponse

router = APIRouter(prefix="/mail", tags=["mail"])


@router.post("/send-coupon", response_model=MailQueuedResponse)
def send_coupon_emails(
    body: SendCouponEmailsRequest,
    _: Principal = Depends(require_admin),
    mailer: Mailer = Depends(get_mailer),
):
    """Email existing coupons, one per address."""
    with ordering.domain_context():
        coupons = [validate_coupon_code(code) for code in body.coupons]
        for email, coupon in zip(body.emails, coupons, strict=True):
            send_coupon_email(mailer, email, coupon)
    return MailQueuedResponse(message="Coupons sent", queued=len(body.emails))


@router.post("/send-order", response_model=MailQueuedResponse)
def send_order_email(
    body: SendOrderEmailRequest,
    _: Principal = Depends(require_admin),
    mailer: Mailer = Depends(get_mailer),
):
    """Resend the order-details email to the buyer."""
    with ordering.domain_context():
        get_order(body.order_id)
        send_order_details_email(mailer, body.order_id)
    return MailQueuedResponse(message="Order email sent", queued=1)


@router.get("/verified-email/{token}", response_model=MessageResponse)
def verify_email(token: str):
    with identity.domain_context():
        confirm_email(token)
    return MessageResponse(message="Email verified successfully")
