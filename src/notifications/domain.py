"""Notifications bounded context: transactional email and its delivery log.

Every email the storefront sends (account confirmation, welcome, order
details, delivery confirmation, coupon gifts) is rendered from a template,
handed to the email channel and recorded as a ``Notification``.
"""

import structlog
from protean.domain import Domain

notifications = Domain(name="notifications")

logger = structlog.get_logger(__name__)
