"""Main product image management."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.details import get_active_product, get_product
from catalogue.product.product import Product
from files.storage.port import FileStorage
from files.upload import Upload, discard_stored, upload_image
from shared.config import get_settings

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="Product")
class SetMainImage:
    product_id: Identifier(required=True)
    url: String(required=True, max_length=500)
    public_id: String(max_length=255)


@catalogue.command(part_of="Product")
class ClearMainImage:
    product_id: Identifier(required=True)


@catalogue.command_handler(part_of=Product)
class MainImageHandler:
    """Both handlers return the public id of the image they replaced, if any."""

    @handle(SetMainImage)
    def set_main_image(self, command):
        product = get_active_product(command.product_id)
        previous = product.set_image(command.url, command.public_id)
        current_domain.repository_for(Product).add(product)
        return previous

    @handle(ClearMainImage)
    def clear_main_image(self, command):
        product = get_active_product(command.product_id)
        previous = product.clear_image()
        current_domain.repository_for(Product).add(product)
        return previous


def upload_main_image(storage: FileStorage, product_id: str, upload: Upload) -> Product:
    get_active_product(product_id)
    settings = get_settings()
    stored = upload_image(
        storage,
        upload,
        settings.max_main_image_bytes,
        folder=f"{settings.cloudinary_folder}/products",
    )

    try:
        previous = current_domain.process(
            SetMainImage(product_id=str(product_id), url=stored.secure_url, public_id=stored.public_id),
            asynchronous=False,
        )
    except Exception:
        discard_stored(storage, stored.public_id)
        raise

    if previous:
        discard_stored(storage, previous)
    logger.info("Product image replaced", product_id=str(product_id), public_id=stored.public_id)
    return get_product(product_id)


def remove_main_image(storage: FileStorage, product_id: str) -> Product:
    previous = current_domain.process(ClearMainImage(product_id=str(product_id)), asynchronous=False)
    if previous:
        discard_stored(storage, previous)
    return get_product(product_id)
