"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing
- MercadoPagoGateway when an access token is configured
"""

import structlog

from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import PaymentGateway
from shared.config import get_settings

logger = structlog.get_logger(__name__)

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, chosen from settings on first use."""
    global _current_gateway
    if _current_gateway is None:
        settings = get_settings()
        if settings.gateway_configured:
            from payments.gateway.mercadopago_adapter import MercadoPagoGateway

            _current_gateway = MercadoPagoGateway(
                access_token=settings.mercadopago_access_token,
                webhook_secret=settings.mercadopago_webhook_secret,
                back_url=settings.frontend_url,
            )
        else:
            logger.warning("Mercado Pago is not configured, using the fake payment gateway")
            _current_gateway = FakeGateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
