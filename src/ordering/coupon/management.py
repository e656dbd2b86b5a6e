"""Coupon management and validation."""

import json
from datetime import date

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Date, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from notifications.dispatch import Mailer
from notifications.types import NotificationType
from ordering.coupon.coupon import Coupon, normalize_code, today
from ordering.domain import ordering
from shared.pagination import Page, paginate

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Coupon")
class CreateCoupon:
    discount_percentage = Integer(required=True)
    expiration_date = Date(required=True)
    code = String(max_length=40)


@ordering.command(part_of="Coupon")
class IssueCoupons:
    """One fresh coupon per recipient, all in one transaction."""

    emails = Text(required=True)  # JSON list of addresses
    discount_percentage = Integer(required=True)
    expiration_date = Date(required=True)


@ordering.command(part_of="Coupon")
class DeleteCoupon:
    coupon_id = Identifier(required=True)


@ordering.command(part_of="Coupon")
class ChangeCouponDiscount:
    coupon_id = Identifier(required=True)
    discount_percentage = Integer(required=True)


@ordering.command(part_of="Coupon")
class SetCouponStatus:
    coupon_id = Identifier(required=True)
    is_active = Boolean()
    toggle = Boolean(default=False)


def _coupons():
    return current_domain.repository_for(Coupon)._dao.query


def _new_coupon(discount_percentage: int, expiration_date: date, code: str | None = None) -> Coupon:
    if expiration_date < today():
        raise ValidationError({"expirationDate": ["Expiration date cannot be in the past"]})

    coupon = Coupon.create(discount_percentage=discount_percentage, expiration_date=expiration_date, code=code)
    if _coupons().filter(code=coupon.code).all().first is not None:
        raise ValidationError({"code": [f"Coupon code {coupon.code} already exists"]})

    current_domain.repository_for(Coupon).add(coupon)
    return coupon


@ordering.command_handler(part_of=Coupon)
class ManageCouponHandler:
    @handle(CreateCoupon)
    def create_coupon(self, command):
        coupon = _new_coupon(command.discount_percentage, command.expiration_date, code=command.code)
        logger.info("Coupon created", coupon_id=str(coupon.id), code=coupon.code)
        return str(coupon.id)

    @handle(IssueCoupons)
    def issue_coupons(self, command):
        emails = json.loads(command.emails)
        if not emails:
            raise ValidationError({"emails": ["At least one email address is required"]})
        return [str(_new_coupon(command.discount_percentage, command.expiration_date).id) for _ in emails]

    @handle(DeleteCoupon)
    def delete_coupon(self, command):
        current_domain.repository_for(Coupon)._dao.delete(get_coupon(command.coupon_id))
        logger.info("Coupon deleted", coupon_id=command.coupon_id)

    @handle(ChangeCouponDiscount)
    def change_discount(self, command):
        coupon = get_coupon(command.coupon_id)
        coupon.change_discount(command.discount_percentage)
        current_domain.repository_for(Coupon).add(coupon)

    @handle(SetCouponStatus)
    def set_status(self, command):
        coupon = get_coupon(command.coupon_id)
        if command.toggle:
            coupon.toggle()
        else:
            coupon.set_active(bool(command.is_active))
        current_domain.repository_for(Coupon).add(coupon)


def create_coupon(discount_percentage: int, expiration_date: date, code: str | None = None) -> Coupon:
    coupon_id = current_domain.process(
        CreateCoupon(discount_percentage=discount_percentage, expiration_date=expiration_date, code=code),
        asynchronous=False,
    )
    return get_coupon(coupon_id)


def list_coupons(limit: int, cursor: str | None = None) -> Page:
    return paginate(_coupons(), limit, cursor)


def get_coupon(coupon_id: str) -> Coupon:
    coupon = _coupons().filter(id=str(coupon_id)).all().first
    if coupon is None:
        raise ObjectNotFoundError("Coupon not found")
    return coupon


def get_coupon_by_code(code: str) -> Coupon:
    coupon = _coupons().filter(code=normalize_code(code)).all().first
    if coupon is None:
        raise ObjectNotFoundError("Coupon not found")
    return coupon


def validate_coupon(coupon_id: str, on: date | None = None) -> Coupon:
    coupon = get_coupon(coupon_id)
    coupon.ensure_redeemable(on)
    return coupon


def validate_coupon_code(code: str, on: date | None = None) -> Coupon:
    coupon = get_coupon_by_code(code)
    coupon.ensure_redeemable(on)
    return coupon


def delete_coupon(coupon_id: str) -> None:
    current_domain.process(DeleteCoupon(coupon_id=str(coupon_id)), asynchronous=False)


def update_discount(coupon_id: str, discount_percentage: int) -> Coupon:
    current_domain.process(
        ChangeCouponDiscount(coupon_id=str(coupon_id), discount_percentage=discount_percentage),
        asynchronous=False,
    )
    return get_coupon(coupon_id)


def set_coupon_status(coupon_id: str, active: bool) -> Coupon:
    current_domain.process(SetCouponStatus(coupon_id=str(coupon_id), is_active=active), asynchronous=False)
    return get_coupon(coupon_id)


def toggle_coupon_status(coupon_id: str) -> Coupon:
    current_domain.process(SetCouponStatus(coupon_id=str(coupon_id), toggle=True), asynchronous=False)
    return get_coupon(coupon_id)


def send_coupons(
    mailer: Mailer,
    emails: list[str],
    discount_percentage: int,
    expiration_date: date,
) -> list[Coupon]:
    """Issue one fresh coupon per recipient and email each one once they are stored."""
    if not emails:
        raise ValidationError({"emails": ["At least one email address is required"]})

    coupon_ids = current_domain.process(
        IssueCoupons(
            emails=json.dumps(list(emails)),
            discount_percentage=discount_percentage,
            expiration_date=expiration_date,
        ),
        asynchronous=False,
    )
    coupons = [get_coupon(coupon_id) for coupon_id in coupon_ids]
    for email, coupon in zip(emails, coupons, strict=True):
        send_coupon_email(mailer, email, coupon)
    return coupons


def send_coupon_email(mailer: Mailer, email: str, coupon: Coupon) -> bool:
    return mailer.send(
        NotificationType.COUPON_GIFT,
        email,
        {
            "code": coupon.code,
            "discount_percentage": coupon.discount_percentage,
            "expiration_date": coupon.expiration_date.isoformat(),
        },
    )
