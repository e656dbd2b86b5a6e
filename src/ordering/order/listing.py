"""Order queries: per-user history, admin listing and order details."""

from dataclasses import dataclass, field

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from catalogue.product.lookup import find_products
from catalogue.product.product import ProductType
from ordering.order.order import Order
from shared.pagination import Page, paginate


@dataclass(frozen=True)
class OrderLineView:
    product_id: str
    name: str
    type: str
    image_url: str
    quantity: int
    price: float

    @property
    def subtotal(self) -> float:
        return round(self.price * self.quantity, 2)


@dataclass
class OrderDetails:
    order: Order
    lines: list[OrderLineView] = field(default_factory=list)

    @property
    def has_physical_products(self) -> bool:
        return any(line.type == ProductType.PHYSICAL.value for line in self.lines)


def _orders():
    return current_domain.repository_for(Order)._dao.query


def list_user_orders(user_id: str, limit: int, cursor: int | None = None) -> Page:
    return paginate(_orders().filter(user_id=str(user_id)), limit, cursor, key="number")


def list_all_orders(limit: int, cursor: int | None = None) -> Page:
    return paginate(_orders(), limit, cursor, key="number")


def get_order(order_id: int) -> Order:
    order = _orders().filter(number=int(order_id)).all().first
    if order is None:
        raise ObjectNotFoundError("Order not found")
    return order


def get_order_details(order_id: int) -> OrderDetails:
    order = get_order(order_id)
    lines = list(order.lines)
    products = find_products(line.product_id for line in lines)

    views = []
    for line in lines:
        product = products.get(str(line.product_id))
        views.append(
            OrderLineView(
                product_id=str(line.product_id),
                name=product.name if product else "Unavailable product",
                type=product.type if product else ProductType.DIGITAL.value,
                image_url=product.image_url if product else "",
                quantity=line.quantity,
                price=line.price,
            )
        )
    return OrderDetails(order=order, lines=views)
