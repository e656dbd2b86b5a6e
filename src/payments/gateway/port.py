"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and
MercadoPagoGateway (production) without changing any application code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


class GatewayError(Exception):
    """The payment gateway could not be reached or rejected the request."""


@dataclass(frozen=True)
class PreferenceItem:
    """One line of a checkout preference."""

    id: str
    title: str
    quantity: int
    unit_price: Decimal


@dataclass(frozen=True)
class PreferenceResult:
    """A hosted checkout created at the gateway."""

    preference_id: str
    init_point: str


@dataclass(frozen=True)
class PaymentInfo:
    """A payment as reported by the gateway."""

    payment_id: str
    status: str
    external_reference: str | None = None
    merchant_order_id: str | None = None
    transaction_amount: Decimal | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_preference(
        self,
        items: list[PreferenceItem],
        payer_email: str,
        external_reference: str,
        notification_url: str | None = None,
    ) -> PreferenceResult:
        """Create a hosted checkout for the given items."""
        ...

    @abstractmethod
    def get_payment(self, payment_id: str) -> PaymentInfo:
        """Fetch the authoritative state of a payment."""
        ...

    @abstractmethod
    def verify_webhook_signature(
        self,
        data_id: str,
        request_id: str | None,
        signature: str | None,
    ) -> bool:
        """Verify that a webhook notification is authentically from the gateway."""
        ...
