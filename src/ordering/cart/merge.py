"""Merging a cart kept in browser storage into the server-side cart.

Reconciliation rules, applied per product:

- present on both sides: the client quantity replaces the server quantity
- only on the server: kept as is
- only on the client: added
- unknown, removed or sold-out products: skipped and reported
- quantities above the available stock are capped at the stock level
"""

import json
from dataclasses import dataclass, field

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from catalogue.product.lookup import find_products
from ordering.cart.cart import MAX_LINE_QUANTITY, Cart, CartView
from ordering.cart.items import find_cart, get_cart
from ordering.domain import ordering

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class MergeCart:
    user_id = Identifier(required=True)
    lines = Text(required=True)  # JSON: list of {product_id, quantity}


@ordering.command_handler(part_of=Cart)
class MergeCartHandler:
    @handle(MergeCart)
    def merge_cart(self, command):
        cart = find_cart(command.user_id) or Cart.create(command.user_id)
        for line in json.loads(command.lines):
            cart.set_quantity(line["product_id"], line["quantity"])
        current_domain.repository_for(Cart).add(cart)


@dataclass
class MergeResult:
    cart: CartView
    skipped: list[str] = field(default_factory=list)
    adjusted: list[str] = field(default_factory=list)


def merge_cart(user_id: str, client_items: list[tuple[str, int]]) -> MergeResult:
    # Later entries for the same product win, as they would in browser storage
    wanted: dict[str, int] = {}
    for product_id, quantity in client_items:
        wanted[str(product_id)] = quantity

    products = find_products(wanted)
    skipped: list[str] = []
    adjusted: list[str] = []
    accepted = []
    for product_id, quantity in wanted.items():
        product = products.get(product_id)
        if product is None or not product.is_purchasable or quantity < 1:
            skipped.append(product_id)
            continue

        capped = min(quantity, product.stock, MAX_LINE_QUANTITY)
        if capped != quantity:
            adjusted.append(product_id)
        accepted.append({"product_id": product_id, "quantity": capped})

    if accepted:
        current_domain.process(
            MergeCart(user_id=str(user_id), lines=json.dumps(accepted)),
            asynchronous=False,
        )

    if skipped or adjusted:
        logger.info("Cart merge adjusted client lines", user_id=str(user_id), skipped=skipped, adjusted=adjusted)
    return MergeResult(cart=get_cart(user_id), skipped=skipped, adjusted=adjusted)
