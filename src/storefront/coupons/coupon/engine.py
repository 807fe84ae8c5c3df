"""Coupon validation and redemption.

``validate_coupon`` is free of side effects and can be called from the
storefront before checkout. ``redeem_coupon`` writes the CouponUsage row and
must run inside the caller's unit of work so it commits (or rolls back) with
the order it belongs to.
"""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.coupons.coupon.coupon import Coupon, normalize_code
from storefront.coupons.coupon.usage import CouponUsage, usage_key
from storefront.shared.errors import BusinessRuleError, ConflictError, NotFoundError
from storefront.shared.money import to_decimal
from storefront.shared.query import fetch_all
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CouponValidation:
    """Outcome of checking a coupon against an order amount."""

    coupon: Coupon
    discount: int
    free_product: Product | None = None

    @property
    def message(self) -> str:
        if self.free_product is not None:
            return f"Coupon applied: {self.free_product.name} added for free"
        return f"Coupon applied: {to_decimal(self.discount)} off"


def find_coupon_by_code(code) -> Coupon | None:
    matches = current_domain.repository_for(Coupon)._dao.query.filter(code=normalize_code(code)).all().items
    return matches[0] if matches else None


def get_coupon(coupon_id) -> Coupon:
    matches = current_domain.repository_for(Coupon)._dao.query.filter(id=str(coupon_id)).all().items
    if not matches:
        raise NotFoundError({"coupon": [f"Coupon {coupon_id} not found"]}, code="COUPON_NOT_FOUND")
    return matches[0]


def evaluate_coupon(coupon: Coupon, order_amount: int) -> CouponValidation:
    """Check an already-loaded coupon against ``order_amount`` (in cents)."""
    if not coupon.is_active:
        raise BusinessRuleError({"coupon": ["Coupon is not active"]}, code="COUPON_INACTIVE")

    if order_amount < coupon.min_order_amount:
        raise BusinessRuleError(
            {"order_amount": [f"Minimum order amount of {to_decimal(coupon.min_order_amount)} not met"]},
            code="MINIMUM_ORDER_NOT_MET",
        )

    if coupon.is_discount_code:
        return CouponValidation(coupon=coupon, discount=coupon.discount_for(order_amount))

    products = (
        current_domain.repository_for(Product)
        ._dao.query.filter(id=str(coupon.free_item_terms.product_id))
        .all()
        .items
    )
    if not products or not products[0].is_active:
        raise BusinessRuleError({"product": ["Free product is not available"]}, code="PRODUCT_NOT_AVAILABLE")

    return CouponValidation(coupon=coupon, discount=0, free_product=products[0])


def validate_coupon(code, order_amount: int) -> CouponValidation:
    """Look a coupon up by code (case-insensitively) and check it against ``order_amount``."""
    coupon = find_coupon_by_code(code) if code else None
    if coupon is None:
        raise NotFoundError({"code": [f"Coupon {code} not found"]}, code="COUPON_NOT_FOUND")
    return evaluate_coupon(coupon, order_amount)


def applicable_free_item_coupons(order_amount: int) -> list[tuple[Coupon, Product]]:
    """Active free-item coupons unlocked by ``order_amount``, highest minimum first.

    Coupons whose product is missing or inactive are left out; they could not be granted.
    """
    coupons = [
        coupon
        for coupon in fetch_all(current_domain.repository_for(Coupon), is_active=True)
        if not coupon.is_discount_code and coupon.min_order_amount <= order_amount
    ]

    product_repo = current_domain.repository_for(Product)
    offers = []
    for coupon in sorted(coupons, key=lambda c: c.min_order_amount, reverse=True):
        products = product_repo._dao.query.filter(id=str(coupon.free_item_terms.product_id)).all().items
        if products and products[0].is_active:
            offers.append((coupon, products[0]))
    return offers


def redeem_coupon(coupon: Coupon, order_id, discount: int, user_id=None) -> CouponUsage:
    """Record that ``coupon`` was used on ``order_id``; at most once per pair."""
    repo = current_domain.repository_for(CouponUsage)
    key = usage_key(coupon.id, order_id)
    if repo._dao.query.filter(usage_key=key).all().items:
        raise ConflictError(
            {"coupon": ["Coupon already applied to this order"]},
            code="COUPON_ALREADY_APPLIED",
        )

    usage = CouponUsage.record(coupon.id, order_id, discount, user_id=user_id)
    repo.add(usage)
    logger.info(
        "coupon_redeemed",
        coupon_id=str(coupon.id),
        order_id=str(order_id),
        discount_applied=discount,
    )
    return usage


def coupon_usage_stats(coupon_id) -> dict:
    coupon = get_coupon(coupon_id)
    usages = fetch_all(current_domain.repository_for(CouponUsage), coupon_id=str(coupon.id))
    return {
        "coupon_id": str(coupon.id),
        "total_usages": len(usages),
        "total_discount_given": sum(usage.discount_applied or 0 for usage in usages),
    }
