"""Mercado Pago gateway adapter (production).

Uses the Mercado Pago REST API:

- ``POST /checkout/preferences`` creates a hosted checkout (Checkout Pro)
- ``GET /v1/payments/{id}`` fetches the authoritative payment state

Webhook notifications carry an ``x-signature`` header of the form
``ts=<unix>,v1=<hex>``; ``v1`` is the HMAC-SHA256, keyed with the webhook
secret, of the manifest ``id:<data.id>;request-id:<x-request-id>;ts:<ts>;``.
"""

import hashlib
import hmac
from decimal import Decimal

import requests
import structlog

from payments.gateway.port import GatewayError, PaymentGateway, PaymentInfo, PreferenceItem, PreferenceResult

logger = structlog.get_logger(__name__)

API_BASE_URL = "https://api.mercadopago.com"


class MercadoPagoGateway(PaymentGateway):
    def __init__(
        self,
        access_token: str,
        webhook_secret: str | None = None,
        currency_id: str = "ARS",
        back_url: str | None = None,
        base_url: str = API_BASE_URL,
        timeout: float = 15.0,
        session: requests.Session | None = None,
    ) -> None:
        self.webhook_secret = webhook_secret
        self.currency_id = currency_id
        self.back_url = back_url
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            }
        )

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("Payment gateway unreachable", method=method, path=path, error=str(exc))
            raise GatewayError("Payment gateway unreachable") from exc

        if response.status_code >= 400:
            logger.error(
                "Payment gateway rejected request",
                method=method,
                path=path,
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise GatewayError(f"Payment gateway returned {response.status_code}")
        return response.json()

    def create_preference(
        self,
        items: list[PreferenceItem],
        payer_email: str,
        external_reference: str,
        notification_url: str | None = None,
    ) -> PreferenceResult:
        payload = {
            "items": [
                {
                    "id": item.id,
                    "title": item.title,
                    "quantity": item.quantity,
                    "unit_price": float(item.unit_price),
                    "currency_id": self.currency_id,
                }
                for item in items
            ],
            "payer": {"email": payer_email},
            "external_reference": external_reference,
        }
        if notification_url:
            payload["notification_url"] = notification_url
        if self.back_url:
            payload["back_urls"] = {
                "success": f"{self.back_url}/checkout/success",
                "failure": f"{self.back_url}/checkout/failure",
                "pending": f"{self.back_url}/checkout/pending",
            }
            payload["auto_return"] = "approved"

        data = self._request("POST", "/checkout/preferences", json=payload)
        return PreferenceResult(preference_id=data["id"], init_point=data["init_point"])

    def get_payment(self, payment_id: str) -> PaymentInfo:
        data = self._request("GET", f"/v1/payments/{payment_id}")
        order = data.get("order") or {}
        amount = data.get("transaction_amount")
        return PaymentInfo(
            payment_id=str(data["id"]),
            status=data["status"],
            external_reference=data.get("external_reference"),
            merchant_order_id=str(order["id"]) if order.get("id") else None,
            transaction_amount=Decimal(str(amount)) if amount is not None else None,
        )

    def verify_webhook_signature(self, data_id: str, request_id: str | None, signature: str | None) -> bool:
        if not self.webhook_secret:
            logger.warning("Webhook secret not configured, skipping signature verification")
            return True
        if not signature:
            return False

        parts = dict(part.strip().split("=", 1) for part in signature.split(",") if "=" in part)
        ts, received = parts.get("ts"), parts.get("v1")
        if not ts or not received:
            return False

        manifest = f"id:{data_id.lower() if data_id.isalnum() else data_id};"
        if request_id:
            manifest += f"request-id:{request_id};"
        manifest += f"ts:{ts};"

        expected = hmac.new(self.webhook_secret.encode("utf-8"), manifest.encode("utf-8"), hashlib.sha256).hexdigest()
        return hmac.compare_digest(expected, received)
