"""Gallery image: one stored file attached to a product."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String

from files.domain import files


@files.aggregate(schema_name="images")
class Image:
    product_id: Identifier(required=True)
    public_id: String(required=True, max_length=255, unique=True)
    secure_url: String(required=True, max_length=500)
    created_at: DateTime(default=lambda: datetime.now(UTC))
