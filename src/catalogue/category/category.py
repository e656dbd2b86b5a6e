"""Category aggregate: a flat grouping of products with a unique name."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from catalogue.domain import catalogue


@catalogue.aggregate(schema_name="categories")
class Category:
    name: String(required=True, max_length=100, unique=True)
    created_at: DateTime(default=lambda: datetime.now(UTC))

    @classmethod
    def create(cls, name: str) -> "Category":
        return cls(name=clean_category_name(name))

    def rename(self, name: str) -> None:
        self.name = clean_category_name(name)


def clean_category_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError({"name": ["Category name cannot be blank"]})
    if len(cleaned) > 100:
        raise ValidationError({"name": ["Category name cannot exceed 100 characters"]})
    return cleaned
