"""FastAPI routes for the Ordering domain: carts, orders and coupons."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse

from identity.api.security import get_current_user, require_admin
from identity.user.authentication import Principal
from notifications.dispatch import Mailer, get_mailer
from ordering.api.schemas import (
    CartLineResponse,
    CartResponse,
    CouponResponse,
    CouponStatusRequest,
    CouponValidationResponse,
    CreateCouponRequest,
    CreateOrderRequest,
    DeliveryResponse,
    MergeCartRequest,
    MergeCartResponse,
    OrderDetailLineResponse,
    OrderDetailsResponse,
    OrderResponse,
    SendCouponsRequest,
    UpdateCartItemRequest,
    UpdateDiscountRequest,
)
from ordering.cart.cart import CartView
from ordering.cart.items import add_to_cart, get_cart, parse_quantity, remove_from_cart, update_cart_item
from ordering.cart.merge import merge_cart
from ordering.coupon.management import (
    create_coupon,
    delete_coupon,
    get_coupon,
    get_coupon_by_code,
    list_coupons,
    send_coupons,
    set_coupon_status,
    toggle_coupon_status,
    update_discount,
    validate_coupon,
)
from ordering.order.creation import place_order
from ordering.order.emails import is_valid_delivery_token
from ordering.order.fulfillment import mark_delivered, ship_order
from ordering.order.listing import get_order_details, list_all_orders, list_user_orders
from shared.config import get_settings
from shared.pagination import MAX_PAGE_SIZE
from shared.schemas import MessageResponse, PageResponse, page_response

cart_router = APIRouter(prefix="/cart", tags=["cart"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
coupon_router = APIRouter(prefix="/coupons", tags=["coupons"])


def _cart_response(cart: CartView) -> CartResponse:
    return CartResponse(
        items=[CartLineResponse.model_validate(line) for line in cart.lines],
        total=cart.total,
        item_count=cart.item_count,
    )


# --- Cart endpoints ---


@cart_router.get("", response_model=CartResponse)
def get_my_cart(principal: Principal = Depends(get_current_user)):
    return _cart_response(get_cart(principal.user_id))


@cart_router.post("/add", response_model=CartResponse)
def add_product_to_cart(
    product_id: uuid.UUID = Query(..., alias="productId"),
    quantity: str | None = Query(None),
    principal: Principal = Depends(get_current_user),
):
    return _cart_response(add_to_cart(principal.user_id, str(product_id), parse_quantity(quantity)))


@cart_router.post("/mixed", response_model=MergeCartResponse)
def merge_local_cart(body: MergeCartRequest, principal: Principal = Depends(get_current_user)):
    result = merge_cart(principal.user_id, [(str(item.product_id), item.quantity) for item in body.items])
    return MergeCartResponse(cart=_cart_response(result.cart), skipped=result.skipped, adjusted=result.adjusted)


@cart_router.patch("/{product_id}", response_model=CartResponse)
def change_cart_quantity(
    product_id: uuid.UUID,
    body: UpdateCartItemRequest,
    principal: Principal = Depends(get_current_user),
):
    return _cart_response(update_cart_item(principal.user_id, str(product_id), body.quantity))


@cart_router.delete("/{product_id}", response_model=CartResponse)
def delete_from_cart(product_id: uuid.UUID, principal: Principal = Depends(get_current_user)):
    return _cart_response(remove_from_cart(principal.user_id, str(product_id)))


# --- Order endpoints ---


@order_router.post("", status_code=201, response_model=OrderResponse)
def create_order(body: CreateOrderRequest, principal: Principal = Depends(get_current_user)):
    items = [(str(item.product_id), item.quantity) for item in body.products]
    return OrderResponse.model_validate(place_order(principal.user_id, items, coupon_code=body.coupon_code))


@order_router.get("/me", response_model=PageResponse[OrderResponse])
def get_my_orders(
    limit: int = Query(..., ge=1, le=MAX_PAGE_SIZE),
    cursor: int | None = None,
    principal: Principal = Depends(get_current_user),
):
    return page_response(OrderResponse, list_user_orders(principal.user_id, limit, cursor))


@order_router.get("", response_model=PageResponse[OrderResponse])
def get_all_orders(
    limit: int = Query(..., ge=1, le=MAX_PAGE_SIZE),
    cursor: int | None = None,
    _: Principal = Depends(require_admin),
):
    return page_response(OrderResponse, list_all_orders(limit, cursor))


@order_router.get("/deliver/{order_id}", response_model=DeliveryResponse)
def deliver_from_email_link(
    order_id: int,
    token: str | None = None,
    redirect: bool = False,
    mailer: Mailer = Depends(get_mailer),
):
    if not is_valid_delivery_token(order_id, token):
        raise HTTPException(status_code=403, detail="Invalid delivery link")

    result = mark_delivered(mailer, order_id)
    if redirect:
        return RedirectResponse(f"{get_settings().frontend_url}/orders/{order_id}/delivered", status_code=303)
    return DeliveryResponse(message=result.message, order_id=order_id, already_delivered=result.already_delivered)


@order_router.get("/{order_id}", response_model=OrderDetailsResponse)
def get_order_by_id(order_id: int, principal: Principal = Depends(get_current_user)):
    details = get_order_details(order_id)
    if str(details.order.user_id) != principal.user_id and not principal.is_admin:
        raise HTTPException(status_code=403, detail="You can only view your own orders")
    return OrderDetailsResponse(
        order=OrderResponse.model_validate(details.order),
        lines=[OrderDetailLineResponse.model_validate(line) for line in details.lines],
    )


@order_router.patch("/{order_id}/ship", response_model=OrderResponse)
def ship(order_id: int, _: Principal = Depends(require_admin)):
    return OrderResponse.model_validate(ship_order(order_id))


@order_router.patch("/{order_id}/deliver", response_model=DeliveryResponse)
def deliver(order_id: int, _: Principal = Depends(require_admin), mailer: Mailer = Depends(get_mailer)):
    result = mark_delivered(mailer, order_id)
    return DeliveryResponse(message=result.message, order_id=order_id, already_delivered=result.already_delivered)


# --- Coupon endpoints ---


@coupon_router.post("", status_code=201, response_model=CouponResponse)
def add_coupon(body: CreateCouponRequest, _: Principal = Depends(require_admin)):
    coupon = create_coupon(body.discount_percentage, body.expiration_date, code=body.code)
    return CouponResponse.model_validate(coupon)


@coupon_router.get("", response_model=PageResponse[CouponResponse])
def get_coupons(
    limit: int = Query(..., ge=1, le=MAX_PAGE_SIZE),
    cursor: uuid.UUID | None = None,
    _: Principal = Depends(require_admin),
):
    return page_response(CouponResponse, list_coupons(limit, str(cursor) if cursor else None))


@coupon_router.post("/send", status_code=201, response_model=list[CouponResponse])
def send_coupons_by_email(
    body: SendCouponsRequest,
    _: Principal = Depends(require_admin),
    mailer: Mailer = Depends(get_mailer),
):
    coupons = send_coupons(mailer, list(body.emails), body.discount_percentage, body.expiration_date)
    return [CouponResponse.model_validate(coupon) for coupon in coupons]


@coupon_router.get("/code/{code}", response_model=CouponResponse)
def get_coupon_with_code(code: str, _: Principal = Depends(get_current_user)):
    return CouponResponse.model_validate(get_coupon_by_code(code))


@coupon_router.get("/validate/{coupon_id}", response_model=CouponValidationResponse)
def validate(coupon_id: uuid.UUID, _: Principal = Depends(get_current_user)):
    coupon = validate_coupon(str(coupon_id))
    return CouponValidationResponse(valid=True, coupon=CouponResponse.model_validate(coupon))


@coupon_router.get("/{coupon_id}", response_model=CouponResponse)
def get_coupon_by_id(coupon_id: uuid.UUID, _: Principal = Depends(require_admin)):
    return CouponResponse.model_validate(get_coupon(str(coupon_id)))


@coupon_router.delete("/{coupon_id}", response_model=MessageResponse)
def remove_coupon(coupon_id: uuid.UUID, _: Principal = Depends(require_admin)):
    delete_coupon(str(coupon_id))
    return MessageResponse(message="Coupon deleted successfully")


@coupon_router.patch("/{coupon_id}/discount", response_model=CouponResponse)
def change_discount(coupon_id: uuid.UUID, body: UpdateDiscountRequest, _: Principal = Depends(require_admin)):
    return CouponResponse.model_validate(update_discount(str(coupon_id), body.discount_percentage))


@coupon_router.patch("/{coupon_id}/status", response_model=CouponResponse)
def change_status(coupon_id: uuid.UUID, body: CouponStatusRequest, _: Principal = Depends(require_admin)):
    return CouponResponse.model_validate(set_coupon_status(str(coupon_id), body.is_active))


@coupon_router.patch("/{coupon_id}/toggle-status", response_model=CouponResponse)
def toggle_status(coupon_id: uuid.UUID, _: Principal = Depends(require_admin)):
    return CouponResponse.model_validate(toggle_coupon_status(str(coupon_id)))
