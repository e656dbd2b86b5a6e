"""Files bounded context: product image gallery and the file storage port."""

import structlog
from protean.domain import Domain

files = Domain(name="files")

logger = structlog.get_logger(__name__)
