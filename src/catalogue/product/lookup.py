"""Product lookups for the other bounded contexts.

Returns plain snapshots rather than aggregates, and enters the catalogue
domain context itself, so carts, orders and the gallery can read products
from within their own contexts.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product


@dataclass(frozen=True)
class ProductSnapshot:
    id: str
    name: str
    price: float
    stock: int
    type: str
    image_url: str
    is_active: bool

    @property
    def is_purchasable(self) -> bool:
        return self.is_active and self.stock >= 1


def _snapshot(product: Product) -> ProductSnapshot:
    return ProductSnapshot(
        id=str(product.id),
        name=product.name,
        price=product.price,
        stock=product.stock,
        type=product.type,
        image_url=product.image_url,
        is_active=product.is_active,
    )


def find_product(product_id: str) -> ProductSnapshot | None:
    with catalogue.domain_context():
        product = current_domain.repository_for(Product)._dao.query.filter(id=str(product_id)).all().first
        return _snapshot(product) if product is not None else None


def find_products(product_ids: Iterable[str]) -> dict[str, ProductSnapshot]:
    ids = list({str(product_id) for product_id in product_ids})
    if not ids:
        return {}
    with catalogue.domain_context():
        products = (
            current_domain.repository_for(Product)._dao.query.filter(id__in=ids).limit(len(ids)).all().items
        )
        return {str(product.id): _snapshot(product) for product in products}
