"""Application tests for the product image gallery."""

import uuid

import pytest
from files.image.gallery import delete_gallery_image, list_images, list_product_images, upload_product_images
from files.upload import Upload
from protean.exceptions import ObjectNotFoundError, ValidationError


def _png(name):
    return Upload(filename=name, content=b"\x89PNG" + name.encode(), content_type="image/png")


class TestUploadProductImages:
    def test_all_succeed(self, storage, create_product):
        product = create_product()
        result = upload_product_images(storage, product.id, [_png("a.png"), _png("b.png")])

        assert len(result.images) == 2
        assert result.failures == []
        assert len(list_product_images(product.id)) == 2

    def test_partial_success_keeps_the_good_files(self, storage, create_product):
        product = create_product()
        storage.configure(failing_filenames={"b.png"})

        result = upload_product_images(storage, product.id, [_png("a.png"), _png("b.png"), _png("c.png")])

        assert len(result.images) == 2
        assert [failure.filename for failure in result.failures] == ["b.png"]
        assert len(list_images()) == 2

    def test_all_failing_is_an_error(self, storage, create_product):
        product = create_product()
        storage.configure(should_succeed=False)

        with pytest.raises(ValidationError) as exc:
            upload_product_images(storage, product.id, [_png("a.png")])
        assert exc.value.messages["files"] == ["No images were uploaded successfully."]

    def test_no_files(self, storage, create_product):
        product = create_product()
        with pytest.raises(ValidationError):
            upload_product_images(storage, product.id, [])

    def test_unknown_product(self, storage):
        product_id = str(uuid.uuid4())
        with pytest.raises(ObjectNotFoundError) as exc:
            upload_product_images(storage, product_id, [_png("a.png")])
        assert str(exc.value.messages) == f"Product {product_id} not found"
        assert storage.files == {}


class TestDeleteGalleryImage:
    def test_deletes_row_and_remote_file(self, storage, create_product):
        product = create_product()
        public_id = upload_product_images(storage, product.id, [_png("a.png")]).images[0].public_id

        delete_gallery_image(storage, public_id)

        assert public_id not in storage.files
        assert list_images() == []

    def test_deleting_twice(self, storage, create_product):
        product = create_product()
        public_id = upload_product_images(storage, product.id, [_png("a.png")]).images[0].public_id
        delete_gallery_image(storage, public_id)

        with pytest.raises(ValidationError) as exc:
            delete_gallery_image(storage, public_id)
        assert exc.value.messages["image"] == ["Image is already deleted"]

    def test_listing_product_without_images(self, create_product):
        product = create_product()
        with pytest.raises(ObjectNotFoundError):
            list_product_images(product.id)
