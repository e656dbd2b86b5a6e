"""Shopping cart aggregate: one per user, one line per product.

Carts hold no prices: the total is always computed from the current
catalogue price, so a price change shows up in every open cart.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from ordering.domain import ordering

MAX_LINE_QUANTITY = 99


@ordering.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    added_at = DateTime()


@ordering.aggregate(schema_name="carts")
class Cart:
    user_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    updated_at = DateTime()

    @classmethod
    def create(cls, user_id):
        return cls(user_id=str(user_id), updated_at=datetime.now(UTC))

    def line_for(self, product_id) -> CartItem | None:
        return next((item for item in self.items if str(item.product_id) == str(product_id)), None)

    def add_item(self, product_id, quantity: int) -> CartItem:
        """Add a product, or increase its quantity if it is already in the cart."""
        existing = self.line_for(product_id)
        if existing is not None:
            existing.quantity = validate_quantity(existing.quantity + quantity)
            item = existing
        else:
            item = CartItem(
                product_id=str(product_id),
                quantity=validate_quantity(quantity),
                added_at=datetime.now(UTC),
            )
            self.add_items(item)
        self.updated_at = datetime.now(UTC)
        return item

    def set_quantity(self, product_id, quantity: int) -> CartItem:
        item = self.line_for(product_id)
        if item is None:
            item = CartItem(product_id=str(product_id), quantity=validate_quantity(quantity), added_at=datetime.now(UTC))
            self.add_items(item)
        else:
            item.quantity = validate_quantity(quantity)
        self.updated_at = datetime.now(UTC)
        return item

    def remove_item(self, product_id) -> None:
        item = self.line_for(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Product is not in the cart"]})
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

    def remove_products(self, product_ids=None) -> None:
        """Drop the given products, or every line when none are given."""
        wanted = None if product_ids is None else {str(pid) for pid in product_ids}
        for item in list(self.items):
            if wanted is None or str(item.product_id) in wanted:
                self.remove_items(item)
        self.updated_at = datetime.now(UTC)


def validate_quantity(quantity: int) -> int:
    if quantity is None or quantity < 1:
        raise ValidationError({"quantity": ["Quantity must be at least 1"]})
    if quantity > MAX_LINE_QUANTITY:
        raise ValidationError({"quantity": [f"Quantity cannot exceed {MAX_LINE_QUANTITY}"]})
    return int(quantity)


@dataclass(frozen=True)
class CartLine:
    product_id: str
    name: str
    unit_price: float
    quantity: int
    image_url: str

    @property
    def subtotal(self) -> float:
        return round(self.unit_price * self.quantity, 2)


@dataclass
class CartView:
    lines: list[CartLine] = field(default_factory=list)

    @property
    def total(self) -> float:
        return round(sum(line.subtotal for line in self.lines), 2)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)
