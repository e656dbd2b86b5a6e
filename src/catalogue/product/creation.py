"""Product creation, optionally with gallery images.

The product is recorded first; images are uploaded only once it exists.
Upload failures do not undo the product: they are reported back next to it.
"""

from dataclasses import dataclass, field

import structlog
from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.category.management import get_category
from catalogue.domain import catalogue
from catalogue.product.details import get_product
from catalogue.product.product import Product, ProductType
from files.image.gallery import attach_images
from files.image.image import Image
from files.storage.port import FileStorage
from files.upload import Upload, UploadFailure

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=150)
    description: Text()
    price: Float(required=True)
    stock: Integer(required=True)
    type: String(choices=ProductType, default=ProductType.DIGITAL.value)
    category_id: Identifier(required=True)


@catalogue.command(part_of="Product")
class AdoptGalleryImage:
    """Use a gallery image as the main image while the product still shows the placeholder."""

    product_id: Identifier(required=True)
    url: String(required=True, max_length=500)


@catalogue.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        get_category(command.category_id)

        product = Product.create(
            name=command.name,
            price=command.price,
            stock=command.stock,
            category_id=command.category_id,
            type=command.type,
            description=command.description,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(AdoptGalleryImage)
    def adopt_gallery_image(self, command):
        product = get_product(command.product_id)
        if product.has_default_image:
            product.set_image(command.url, None)
            current_domain.repository_for(Product).add(product)


@dataclass
class ProductCreation:
    product: Product
    images: list[Image] = field(default_factory=list)
    failed_uploads: list[UploadFailure] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.failed_uploads and self.images:
            return "Product created, but some images failed to upload"
        if self.failed_uploads:
            return "Product created, but its images could not be uploaded"
        return "Product created successfully"


def create_product(
    storage: FileStorage,
    name: str,
    price: float,
    stock: int,
    category_id: str,
    type: ProductType = ProductType.DIGITAL,
    description: str | None = None,
    images: list[Upload] | None = None,
) -> ProductCreation:
    product_id = current_domain.process(
        CreateProduct(
            name=name,
            description=description,
            price=price,
            stock=stock,
            type=ProductType(type).value,
            category_id=str(category_id),
        ),
        asynchronous=False,
    )

    gallery_images: list[Image] = []
    failures: list[UploadFailure] = []
    if images:
        gallery = attach_images(storage, product_id, images)
        gallery_images, failures = gallery.images, gallery.failures
        if gallery_images:
            current_domain.process(
                AdoptGalleryImage(product_id=product_id, url=gallery_images[0].secure_url),
                asynchronous=False,
            )

    result = ProductCreation(product=get_product(product_id), images=gallery_images, failed_uploads=failures)
    logger.info(
        "Product created",
        product_id=product_id,
        category_id=str(category_id),
        images=len(result.images),
        failed_uploads=len(result.failed_uploads),
    )
    return result
