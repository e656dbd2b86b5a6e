"""Payments domain API package."""

from payments.api.routes import mercadopago_router

__all__ = ["mercadopago_router"]
