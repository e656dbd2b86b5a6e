"""FastAPI routes for the Payments domain: Mercado Pago checkout and notifications."""

import json

import structlog
from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from identity.api.security import get_current_user
from identity.user.authentication import Principal
from notifications.dispatch import Mailer, get_mailer
from payments.api.schemas import CheckoutRequest, CheckoutResponse, WebhookAck
from payments.checkout import create_checkout
from payments.gateway import get_gateway
from payments.gateway.port import PaymentGateway
from payments.webhook import process_webhook

logger = structlog.get_logger(__name__)

mercadopago_router = APIRouter(prefix="/mercadopago", tags=["payments"])


@mercadopago_router.post("", status_code=201, response_model=CheckoutResponse)
def create_preference(
    body: CheckoutRequest,
    principal: Principal = Depends(get_current_user),
    gateway: PaymentGateway = Depends(get_gateway),
):
    """Place a pending order and open a Mercado Pago checkout for it."""
    items = [(str(item.product_id), item.quantity) for item in body.products]
    result = create_checkout(gateway, principal.user_id, principal.email, items, coupon_code=body.coupon_code)
    return CheckoutResponse.model_validate(result)


async def _notification_fields(request: Request) -> tuple[str | None, str | None]:
    """Topic and resource id, from the query string or the JSON body.

    Mercado Pago sends ``?type=payment&data.id=123`` for webhooks and
    ``?topic=payment&id=123`` for legacy IPN; the body repeats the same data.
    """
    params = request.query_params
    topic = params.get("type") or params.get("topic")
    data_id = params.get("data.id") or params.get("id")

    if topic and data_id:
        return topic, data_id

    raw = await request.body()
    if raw:
        try:
            payload = json.loads(raw)
        except ValueError:
            logger.warning("Webhook body is not JSON")
            payload = {}
        if isinstance(payload, dict):
            topic = topic or payload.get("type") or payload.get("topic")
            data = payload.get("data")
            if not data_id and isinstance(data, dict) and data.get("id") is not None:
                data_id = str(data["id"])
    return topic, data_id


@mercadopago_router.post("/webhook", response_model=WebhookAck)
async def receive_notification(
    request: Request,
    gateway: PaymentGateway = Depends(get_gateway),
    mailer: Mailer = Depends(get_mailer),
):
    """Acknowledge every notification; failures are logged, never returned.

    Mercado Pago retries anything that is not a 2xx, and a retry can never
    fix a bad reference or a rejected signature.
    """
    topic, data_id = await _notification_fields(request)
    try:
        outcome = await run_in_threadpool(
            process_webhook,
            gateway,
            mailer,
            topic,
            data_id,
            request_id=request.headers.get("x-request-id"),
            signature=request.headers.get("x-signature"),
        )
        logger.info("Webhook processed", topic=topic, data_id=data_id, outcome=outcome.value)
    except Exception:
        logger.exception("Webhook processing failed", topic=topic, data_id=data_id)
    return WebhookAck(received=True)
