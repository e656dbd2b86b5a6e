"""FastAPI endpoints for the Catalogue domain."""

import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from catalogue.api.schemas import (
    CategoryResponse,
    CreateCategoryRequest,
    ProductCountResponse,
    ProductCreatedResponse,
    ProductResponse,
    UpdateCategoryRequest,
    UpdateProductRequest,
)
from catalogue.category.management import (
    create_category,
    delete_category,
    get_category,
    list_categories,
    rename_category,
)
from catalogue.product.creation import create_product
from catalogue.product.details import get_product, update_product
from catalogue.product.images import remove_main_image, upload_main_image
from catalogue.product.lifecycle import remove_product
from catalogue.product.listing import (
    count_products,
    list_dashboard_products,
    list_products,
    list_products_by_category,
)
from catalogue.product.product import ProductType
from files.api.schemas import ImageResponse, UploadFailureResponse
from files.storage import FileStorage, get_storage
from files.upload import read_upload
from identity.api.security import require_admin
from identity.user.authentication import Principal
from shared.pagination import MAX_PAGE_SIZE
from shared.schemas import MessageResponse, PageResponse, page_response

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])


def _cursor(cursor: uuid.UUID | None) -> str | None:
    return str(cursor) if cursor else None


# --- Product endpoints ---


@product_router.get("", response_model=PageResponse[ProductResponse])
def get_products(
    limit: int = Query(..., ge=1, le=MAX_PAGE_SIZE),
    cursor: uuid.UUID | None = None,
    type: ProductType | None = None,
    search: str | None = Query(None, max_length=100),
):
    return page_response(ProductResponse, list_products(limit, _cursor(cursor), type=type, search=search))


@product_router.get("/dashboard", response_model=PageResponse[ProductResponse])
def get_dashboard_products(
    limit: int = Query(..., ge=1, le=MAX_PAGE_SIZE),
    cursor: uuid.UUID | None = None,
    _: Principal = Depends(require_admin),
):
    return page_response(ProductResponse, list_dashboard_products(limit, _cursor(cursor)))


@product_router.get("/count", response_model=ProductCountResponse)
def get_product_count():
    return ProductCountResponse(count=count_products())


@product_router.get("/category/{category_id}", response_model=PageResponse[ProductResponse])
def get_products_by_category(
    category_id: uuid.UUID,
    limit: int = Query(..., ge=1, le=MAX_PAGE_SIZE),
    cursor: uuid.UUID | None = None,
):
    return page_response(ProductResponse, list_products_by_category(str(category_id), limit, _cursor(cursor)))


@product_router.get("/{product_id}", response_model=ProductResponse)
def get_product_by_id(product_id: uuid.UUID):
    return ProductResponse.model_validate(get_product(str(product_id)))


@product_router.post("", status_code=201, response_model=ProductCreatedResponse)
def add_product(
    name: str = Form(..., min_length=1, max_length=150),
    price: Decimal = Form(..., gt=0, max_digits=10, decimal_places=2),
    stock: int = Form(..., ge=0),
    category_id: uuid.UUID = Form(..., alias="categoryId"),
    type: ProductType = Form(ProductType.DIGITAL),
    description: str | None = Form(None, max_length=5000),
    images: list[UploadFile] | None = File(None),
    _: Principal = Depends(require_admin),
    storage: FileStorage = Depends(get_storage),
):
    result = create_product(
        storage,
        name=name,
        price=float(price),
        stock=stock,
        category_id=str(category_id),
        type=type,
        description=description,
        images=[read_upload(image) for image in images or []],
    )
    return ProductCreatedResponse(
        message=result.message,
        product=ProductResponse.model_validate(result.product),
        images=[ImageResponse.model_validate(image) for image in result.images],
        failed_uploads=[UploadFailureResponse.model_validate(failure) for failure in result.failed_uploads],
    )


@product_router.patch("/{product_id}", response_model=ProductResponse)
def edit_product(product_id: uuid.UUID, body: UpdateProductRequest, _: Principal = Depends(require_admin)):
    product = update_product(
        str(product_id),
        name=body.name,
        description=body.description,
        price=float(body.price) if body.price is not None else None,
        stock=body.stock,
        type=body.type,
        category_id=str(body.category_id) if body.category_id else None,
    )
    return ProductResponse.model_validate(product)


@product_router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(product_id: uuid.UUID, _: Principal = Depends(require_admin)):
    remove_product(str(product_id))
    return MessageResponse(message="Product deleted successfully")


@product_router.post("/{product_id}/image", response_model=ProductResponse)
def set_product_image(
    product_id: uuid.UUID,
    file: UploadFile = File(...),
    _: Principal = Depends(require_admin),
    storage: FileStorage = Depends(get_storage),
):
    return ProductResponse.model_validate(upload_main_image(storage, str(product_id), read_upload(file)))


@product_router.delete("/{product_id}/image", response_model=ProductResponse)
def delete_product_image(
    product_id: uuid.UUID,
    _: Principal = Depends(require_admin),
    storage: FileStorage = Depends(get_storage),
):
    return ProductResponse.model_validate(remove_main_image(storage, str(product_id)))


# --- Category endpoints ---


@category_router.post("", status_code=201, response_model=CategoryResponse)
def add_category(body: CreateCategoryRequest, _: Principal = Depends(require_admin)):
    return CategoryResponse.model_validate(create_category(body.name))


@category_router.get("", response_model=PageResponse[CategoryResponse])
def get_categories(limit: int = Query(..., ge=1, le=MAX_PAGE_SIZE), cursor: uuid.UUID | None = None):
    return page_response(CategoryResponse, list_categories(limit, _cursor(cursor)))


@category_router.get("/{category_id}", response_model=CategoryResponse)
def get_category_by_id(category_id: uuid.UUID):
    return CategoryResponse.model_validate(get_category(str(category_id)))


@category_router.patch("/{category_id}", response_model=CategoryResponse)
def update_category(category_id: uuid.UUID, body: UpdateCategoryRequest, _: Principal = Depends(require_admin)):
    return CategoryResponse.model_validate(rename_category(str(category_id), body.name))


@category_router.delete("/{category_id}", response_model=MessageResponse)
def remove_category(category_id: uuid.UUID, _: Principal = Depends(require_admin)):
    delete_category(str(category_id))
    return MessageResponse(message="Category deleted successfully")
