"""Configurable fake payment gateway for development and testing.

Simulates Mercado Pago's checkout preferences and payment lookups without
any external calls. Payments the webhook will look up are registered with
``register_payment``; the gateway can be configured to fail at runtime.
"""

from uuid import uuid4

from payments.gateway.port import GatewayError, PaymentGateway, PaymentInfo, PreferenceItem, PreferenceResult


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Gateway unavailable"
        self.accept_signatures: bool = True
        self.calls: list[dict] = []
        self.payments: dict[str, PaymentInfo] = {}

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Gateway unavailable",
        accept_signatures: bool = True,
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.accept_signatures = accept_signatures

    def register_payment(
        self,
        payment_id: str,
        status: str,
        external_reference: str,
        merchant_order_id: str | None = None,
    ) -> PaymentInfo:
        payment = PaymentInfo(
            payment_id=payment_id,
            status=status,
            external_reference=external_reference,
            merchant_order_id=merchant_order_id,
        )
        self.payments[payment_id] = payment
        return payment

    def create_preference(
        self,
        items: list[PreferenceItem],
        payer_email: str,
        external_reference: str,
        notification_url: str | None = None,
    ) -> PreferenceResult:
        self.calls.append(
            {
                "method": "create_preference",
                "items": items,
                "payer_email": payer_email,
                "external_reference": external_reference,
                "notification_url": notification_url,
            }
        )

        if not self.should_succeed:
            raise GatewayError(self.failure_reason)

        preference_id = f"fake_pref_{uuid4().hex[:12]}"
        return PreferenceResult(
            preference_id=preference_id,
            init_point=f"https://checkout.fake/{preference_id}",
        )

    def get_payment(self, payment_id: str) -> PaymentInfo:
        self.calls.append({"method": "get_payment", "payment_id": payment_id})

        if not self.should_succeed:
            raise GatewayError(self.failure_reason)
        if payment_id not in self.payments:
            raise GatewayError(f"Payment {payment_id} not found")
        return self.payments[payment_id]

    def verify_webhook_signature(self, data_id: str, request_id: str | None, signature: str | None) -> bool:  # noqa: ARG002
        return self.accept_signatures
