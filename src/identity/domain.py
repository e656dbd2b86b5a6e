"""Identity bounded context: accounts, credentials and public profiles."""

import structlog
from protean.domain import Domain

identity = Domain(name="identity")

logger = structlog.get_logger(__name__)
