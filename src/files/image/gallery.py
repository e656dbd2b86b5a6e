"""Product image gallery.

Uploads are attempted file by file. Successful uploads are recorded as
``Image`` aggregates in one command; failures are returned alongside them
so the caller can report exactly which files did not make it. Removing an
image deletes the record first and the stored file after the commit.
"""

import json
from dataclasses import dataclass, field

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from catalogue.product.lookup import find_product
from files.domain import files
from files.image.image import Image
from files.storage.port import FileStorage
from files.upload import Upload, UploadFailure, discard_stored, upload_many
from shared.config import get_settings

logger = structlog.get_logger(__name__)


@files.command(part_of="Image")
class RecordImages:
    product_id: Identifier(required=True)
    images: Text(required=True)  # JSON: list of {public_id, secure_url}


@files.command(part_of="Image")
class DeleteImage:
    public_id: String(required=True, max_length=255)


@files.command_handler(part_of=Image)
class GalleryHandler:
    @handle(RecordImages)
    def record_images(self, command):
        repo = current_domain.repository_for(Image)
        recorded = []
        for stored in json.loads(command.images):
            image = Image(
                product_id=command.product_id,
                public_id=stored["public_id"],
                secure_url=stored["secure_url"],
            )
            repo.add(image)
            recorded.append(str(image.id))
        return recorded

    @handle(DeleteImage)
    def delete_image(self, command):
        image = _find_by_public_id(command.public_id)
        if image is None:
            raise ValidationError({"image": ["Image is already deleted"]})
        current_domain.repository_for(Image)._dao.delete(image)


@dataclass
class GalleryUpload:
    images: list[Image] = field(default_factory=list)
    failures: list[UploadFailure] = field(default_factory=list)


def _find_by_public_id(public_id: str) -> Image | None:
    return current_domain.repository_for(Image)._dao.query.filter(public_id=public_id).all().first


def _images_query():
    return current_domain.repository_for(Image)._dao.query.order_by("created_at")


def attach_images(storage: FileStorage, product_id: str, uploads: list[Upload]) -> GalleryUpload:
    """Upload images for an existing product and record the ones that succeeded."""
    settings = get_settings()
    batch = upload_many(storage, uploads, settings.max_upload_bytes, folder=f"{settings.cloudinary_folder}/products")

    result = GalleryUpload(failures=batch.failed)
    if batch.stored:
        payload = json.dumps(
            [{"public_id": stored.public_id, "secure_url": stored.secure_url} for _, stored in batch.stored]
        )
        with files.domain_context():
            try:
                image_ids = current_domain.process(
                    RecordImages(product_id=str(product_id), images=payload), asynchronous=False
                )
            except Exception:
                for _, stored in batch.stored:
                    discard_stored(storage, stored.public_id)
                raise
            repo = current_domain.repository_for(Image)
            result.images = [repo.get(image_id) for image_id in image_ids]

    logger.info(
        "Product images attached",
        product_id=str(product_id),
        uploaded=len(result.images),
        failed=len(result.failures),
    )
    return result


def upload_product_images(storage: FileStorage, product_id: str, uploads: list[Upload]) -> GalleryUpload:
    if not uploads:
        raise ValidationError({"files": ["No files were provided"]})

    if find_product(product_id) is None:
        raise ObjectNotFoundError(f"Product {product_id} not found")

    result = attach_images(storage, product_id, uploads)
    if not result.images:
        raise ValidationError({"files": ["No images were uploaded successfully."]})
    return result


def list_images() -> list[Image]:
    return list(_images_query().limit(None).all().items)


def list_product_images(product_id: str) -> list[Image]:
    images = list(_images_query().filter(product_id=str(product_id)).limit(None).all().items)
    if not images:
        raise ObjectNotFoundError(f"No images found for product {product_id}")
    return images


def delete_gallery_image(storage: FileStorage, public_id: str) -> None:
    current_domain.process(DeleteImage(public_id=public_id), asynchronous=False)
    if not storage.delete(public_id):
        logger.warning("Stored file was already gone", public_id=public_id)
