"""FastAPI endpoints for the product image gallery."""

import uuid

from fastapi import APIRouter, Depends, File, UploadFile

from files.api.schemas import GalleryUploadResponse, ImageResponse, UploadFailureResponse
from files.image.gallery import delete_gallery_image, list_images, list_product_images, upload_product_images
from files.storage import FileStorage, get_storage
from files.upload import read_upload
from identity.api.security import require_admin
from identity.user.authentication import Principal
from shared.schemas import MessageResponse

router = APIRouter(prefix="/files", tags=["files"])


@router.get("/images", response_model=list[ImageResponse])
def get_all_images():
    return [ImageResponse.model_validate(image) for image in list_images()]


@router.post("/products/{product_id}/images", status_code=201, response_model=GalleryUploadResponse)
def upload_images(
    product_id: uuid.UUID,
    files: list[UploadFile] | None = File(None),
    _: Principal = Depends(require_admin),
    storage: FileStorage = Depends(get_storage),
):
    uploads = [read_upload(file) for file in files or []]
    result = upload_product_images(storage, str(product_id), uploads)
    message = "Images uploaded successfully"
    if result.failures:
        message = "Some images were uploaded successfully"
    return GalleryUploadResponse(
        message=message,
        images=[ImageResponse.model_validate(image) for image in result.images],
        failed_uploads=[UploadFailureResponse.model_validate(failure) for failure in result.failures],
    )


@router.get("/products/{product_id}/images", response_model=list[ImageResponse])
def get_product_images(product_id: uuid.UUID):
    return [ImageResponse.model_validate(image) for image in list_product_images(str(product_id))]


@router.delete("/gallery/{public_id:path}", response_model=MessageResponse)
def delete_image(
    public_id: str,
    _: Principal = Depends(require_admin),
    storage: FileStorage = Depends(get_storage),
):
    delete_gallery_image(storage, public_id)
    return MessageResponse(message="Image deleted successfully")
