"""Cart line management for the signed-in user."""

import json
from collections.abc import Iterable

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.product.lookup import ProductSnapshot, find_product, find_products
from ordering.cart.cart import Cart, CartLine, CartView
from ordering.domain import ordering

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    product_name = String(max_length=150)
    available = Integer(required=True)


@ordering.command(part_of="Cart")
class UpdateCartQuantity:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    product_name = String(max_length=150)
    available = Integer(required=True)


@ordering.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@ordering.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)
    product_ids = Text()  # JSON list; empty means the whole cart


def find_cart(user_id: str) -> Cart | None:
    return current_domain.repository_for(Cart)._dao.query.filter(user_id=str(user_id)).all().first


def _ensure_in_stock(quantity: int, available: int, name: str) -> None:
    if quantity > available:
        raise ValidationError({"quantity": [f"Only {available} unit(s) of {name} in stock"]})


@ordering.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = find_cart(command.user_id) or Cart.create(command.user_id)
        item = cart.add_item(command.product_id, command.quantity)
        _ensure_in_stock(item.quantity, command.available, command.product_name)
        repo.add(cart)
        return item.quantity

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        cart = find_cart(command.user_id)
        if cart is None or cart.line_for(command.product_id) is None:
            raise ObjectNotFoundError("Product is not in the cart")
        item = cart.set_quantity(command.product_id, command.quantity)
        _ensure_in_stock(item.quantity, command.available, command.product_name)
        current_domain.repository_for(Cart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = find_cart(command.user_id)
        if cart is None or cart.line_for(command.product_id) is None:
            raise ObjectNotFoundError("Product is not in the cart")
        cart.remove_item(command.product_id)
        current_domain.repository_for(Cart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = find_cart(command.user_id)
        if cart is None:
            return
        product_ids = json.loads(command.product_ids) if command.product_ids else None
        cart.remove_products(product_ids)
        current_domain.repository_for(Cart).add(cart)


def parse_quantity(raw) -> int:
    """Quantities that are missing, unparsable or zero fall back to 1."""
    try:
        quantity = int(raw)
    except (TypeError, ValueError):
        return 1
    if quantity == 0:
        return 1
    if quantity < 0:
        raise ValidationError({"quantity": ["Quantity must be at least 1"]})
    return quantity


def cart_view(cart: Cart | None) -> CartView:
    """Price a cart with current catalogue data. Lines for unknown products are left out."""
    if cart is None or not cart.items:
        return CartView()

    products = find_products(item.product_id for item in cart.items)
    lines = [
        CartLine(
            product_id=str(item.product_id),
            name=products[str(item.product_id)].name,
            unit_price=products[str(item.product_id)].price,
            quantity=item.quantity,
            image_url=products[str(item.product_id)].image_url,
        )
        for item in cart.items
        if str(item.product_id) in products
    ]
    return CartView(lines=sorted(lines, key=lambda line: line.name))


def get_cart(user_id: str) -> CartView:
    return cart_view(find_cart(user_id))


def _active_product(product_id: str) -> ProductSnapshot:
    product = find_product(product_id)
    if product is None or not product.is_active:
        raise ObjectNotFoundError("Product not found")
    return product


def add_to_cart(user_id: str, product_id: str, quantity: int = 1) -> CartView:
    product = _active_product(product_id)
    line_quantity = current_domain.process(
        AddToCart(
            user_id=str(user_id),
            product_id=product.id,
            quantity=quantity,
            product_name=product.name,
            available=product.stock,
        ),
        asynchronous=False,
    )
    logger.info("Cart line added", user_id=str(user_id), product_id=product.id, quantity=line_quantity)
    return get_cart(user_id)


def update_cart_item(user_id: str, product_id: str, quantity: int) -> CartView:
    cart = find_cart(user_id)
    if cart is None or cart.line_for(product_id) is None:
        raise ObjectNotFoundError("Product is not in the cart")

    product = _active_product(product_id)
    current_domain.process(
        UpdateCartQuantity(
            user_id=str(user_id),
            product_id=product.id,
            quantity=quantity,
            product_name=product.name,
            available=product.stock,
        ),
        asynchronous=False,
    )
    return get_cart(user_id)


def remove_from_cart(user_id: str, product_id: str) -> CartView:
    current_domain.process(RemoveFromCart(user_id=str(user_id), product_id=str(product_id)), asynchronous=False)
    return get_cart(user_id)


def clear_cart(user_id: str, product_ids: Iterable[str] | None = None) -> None:
    """Empty the cart, or only the given products."""
    payload = json.dumps([str(pid) for pid in product_ids]) if product_ids is not None else None
    with ordering.domain_context():
        current_domain.process(ClearCart(user_id=str(user_id), product_ids=payload), asynchronous=False)
