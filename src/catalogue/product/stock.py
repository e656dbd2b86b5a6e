"""Stock reservation for orders.

``ReserveStock`` takes every requested quantity out of stock or none of
them: each product is decremented with a conditional update
(``stock >= quantity``) and the first shortfall aborts the whole unit of
work. ``ReleaseStock`` puts reserved units back when an order could not be
recorded.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Text
from protean.utils.globals import current_domain
from sqlalchemy import literal_column

from catalogue.domain import catalogue
from catalogue.product.product import Product

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ReservedLine:
    product_id: str
    name: str
    quantity: int
    price: float


@catalogue.command(part_of="Product")
class ReserveStock:
    lines: Text(required=True)  # JSON: list of {product_id, quantity}


@catalogue.command(part_of="Product")
class ReleaseStock:
    lines: Text(required=True)  # JSON: list of {product_id, quantity}


def _take(product_id: str, quantity: int) -> bool:
    dao = current_domain.repository_for(Product)._dao
    updated = dao.query.filter(id=product_id, stock__gte=quantity).update_all(
        stock=literal_column("stock") - quantity
    )
    return updated == 1


def _give_back(product_id: str, quantity: int) -> None:
    dao = current_domain.repository_for(Product)._dao
    dao.query.filter(id=product_id).update_all(stock=literal_column("stock") + quantity)


@catalogue.command_handler(part_of=Product)
class StockReservationHandler:
    @handle(ReserveStock)
    def reserve_stock(self, command):
        reserved = []
        for line in json.loads(command.lines):
            product_id, quantity = str(line["product_id"]), int(line["quantity"])
            if quantity < 1:
                raise ValidationError({"quantity": ["Quantity must be at least 1"]})

            product = current_domain.repository_for(Product)._dao.query.filter(id=product_id).all().first
            if product is None or not product.is_active:
                raise ObjectNotFoundError(f"Product {product_id} not found")
            if not _take(product_id, quantity):
                raise ValidationError({"stock": [f"{product.name} is out of stock"]})

            reserved.append(
                {"product_id": product_id, "name": product.name, "quantity": quantity, "price": product.price}
            )
        return reserved

    @handle(ReleaseStock)
    def release_stock(self, command):
        for line in json.loads(command.lines):
            _give_back(str(line["product_id"]), int(line["quantity"]))


def _encode(quantities: Mapping[str, int]) -> str:
    return json.dumps([{"product_id": str(pid), "quantity": qty} for pid, qty in quantities.items()])


def reserve_stock(quantities: Mapping[str, int]) -> list[ReservedLine]:
    """Reserve stock and return the lines priced at the current catalogue price."""
    with catalogue.domain_context():
        reserved = current_domain.process(ReserveStock(lines=_encode(quantities)), asynchronous=False)
    logger.info("Stock reserved", products=len(reserved))
    return [ReservedLine(**line) for line in reserved]


def release_stock(quantities: Mapping[str, int]) -> None:
    with catalogue.domain_context():
        current_domain.process(ReleaseStock(lines=_encode(quantities)), asynchronous=False)
    logger.info("Stock released", products=len(quantities))
