"""Product removal (soft delete)."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.details import get_product
from catalogue.product.product import Product

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="Product")
class RemoveProduct:
    product_id: Identifier(required=True)


@catalogue.command_handler(part_of=Product)
class RemoveProductHandler:
    @handle(RemoveProduct)
    def remove_product(self, command):
        product = current_domain.repository_for(Product)._dao.query.filter(id=command.product_id).all().first
        if product is None or not product.is_active:
            raise ObjectNotFoundError("Product not found")

        product.deactivate()
        current_domain.repository_for(Product).add(product)
        logger.info("Product removed", product_id=str(product.id))


def remove_product(product_id: str) -> Product:
    current_domain.process(RemoveProduct(product_id=str(product_id)), asynchronous=False)
    return get_product(product_id)
