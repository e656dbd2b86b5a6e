"""Product lookup and detail updates."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.category.management import get_category
from catalogue.domain import catalogue
from catalogue.product.product import Product, ProductType


def get_product(product_id: str) -> Product:
    """Fetch a product by id, including soft-deleted ones."""
    product = current_domain.repository_for(Product)._dao.query.filter(id=str(product_id)).all().first
    if product is None:
        raise ObjectNotFoundError("Product not found")
    return product


def get_active_product(product_id: str) -> Product:
    product = get_product(product_id)
    if not product.is_active:
        raise ObjectNotFoundError("Product not found")
    return product


@catalogue.command(part_of="Product")
class UpdateProductDetails:
    product_id: Identifier(required=True)
    name: String(max_length=150)
    description: Text()
    price: Float()
    stock: Integer()
    type: String(choices=ProductType)
    category_id: Identifier()


@catalogue.command_handler(part_of=Product)
class UpdateProductDetailsHandler:
    @handle(UpdateProductDetails)
    def update_product_details(self, command):
        product = get_active_product(command.product_id)
        if command.category_id is not None:
            get_category(command.category_id)

        product.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            stock=command.stock,
            type=command.type,
            category_id=command.category_id,
        )
        current_domain.repository_for(Product).add(product)


def update_product(
    product_id: str,
    name: str | None = None,
    description: str | None = None,
    price: float | None = None,
    stock: int | None = None,
    type: ProductType | None = None,
    category_id: str | None = None,
) -> Product:
    current_domain.process(
        UpdateProductDetails(
            product_id=str(product_id),
            name=name,
            description=description,
            price=price,
            stock=stock,
            type=ProductType(type).value if type is not None else None,
            category_id=str(category_id) if category_id is not None else None,
        ),
        asynchronous=False,
    )
    return get_product(product_id)
