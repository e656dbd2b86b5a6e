"""Product aggregate.

Products are never hard-deleted: removing one flips ``is_active`` so order
lines and carts that reference it keep resolving. Stock only ever goes down
through a conditional update (see ``catalogue.product.stock``), which refuses
to go below zero even under concurrent checkouts.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from catalogue.domain import catalogue

DEFAULT_PRODUCT_IMAGE = "https://res.cloudinary.com/gamevault/image/upload/default_product.png"
MAX_PRICE = 99999999.99


class ProductType(Enum):
    DIGITAL = "digital"
    PHYSICAL = "physical"


@catalogue.aggregate(schema_name="products")
class Product:
    name: String(required=True, max_length=150)
    description: Text()
    price: Float(required=True)
    stock: Integer(default=0)
    type: String(choices=ProductType, default=ProductType.DIGITAL.value)
    image_url: String(max_length=500, default=DEFAULT_PRODUCT_IMAGE)
    image_public_id: String(max_length=255)
    category_id: Identifier(required=True)
    is_active: Boolean(default=True)
    created_at: DateTime(default=lambda: datetime.now(UTC))

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @classmethod
    def create(
        cls,
        name: str,
        price: float,
        stock: int,
        category_id: str,
        type: ProductType = ProductType.DIGITAL,
        description: str | None = None,
    ) -> "Product":
        return cls(
            name=_clean_name(name),
            description=description,
            price=_validate_price(price),
            stock=_validate_stock(stock),
            type=ProductType(type).value,
            category_id=str(category_id),
            image_url=DEFAULT_PRODUCT_IMAGE,
            is_active=True,
        )

    def update_details(
        self,
        name: str | None = None,
        description: str | None = None,
        price: float | None = None,
        stock: int | None = None,
        type: ProductType | None = None,
        category_id: str | None = None,
    ) -> None:
        if not self.is_active:
            raise ValidationError({"product": ["Inactive products cannot be modified"]})

        if name is not None:
            self.name = _clean_name(name)
        if description is not None:
            self.description = description
        if price is not None:
            self.price = _validate_price(price)
        if stock is not None:
            self.stock = _validate_stock(stock)
        if type is not None:
            self.type = ProductType(type).value
        if category_id is not None:
            self.category_id = str(category_id)

    def deactivate(self) -> None:
        self.is_active = False

    def set_image(self, url: str, public_id: str | None) -> str | None:
        """Replace the main image. Returns the public id of the image it replaced."""
        previous = self.image_public_id
        self.image_url = url
        self.image_public_id = public_id
        return previous

    def clear_image(self) -> str | None:
        return self.set_image(DEFAULT_PRODUCT_IMAGE, None)

    @property
    def has_default_image(self) -> bool:
        return self.image_url == DEFAULT_PRODUCT_IMAGE

    @property
    def is_purchasable(self) -> bool:
        return self.is_active and self.stock >= 1

    @property
    def is_physical(self) -> bool:
        return self.type == ProductType.PHYSICAL.value


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError({"name": ["Product name cannot be blank"]})
    if len(cleaned) > 150:
        raise ValidationError({"name": ["Product name cannot exceed 150 characters"]})
    return cleaned


def _validate_price(price) -> float:
    value = round(float(price), 2)
    if value <= 0:
        raise ValidationError({"price": ["Price must be greater than zero"]})
    if value > MAX_PRICE:
        raise ValidationError({"price": ["Price exceeds the maximum allowed value"]})
    return value


def _validate_stock(stock: int) -> int:
    if stock is None or int(stock) < 0:
        raise ValidationError({"stock": ["Stock cannot be negative"]})
    return int(stock)
