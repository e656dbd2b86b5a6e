"""Ordering bounded context: carts, coupons and orders."""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
