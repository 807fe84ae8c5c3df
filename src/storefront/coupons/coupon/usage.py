"""CouponUsage aggregate — one row per coupon redeemed on an order."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer, String

from storefront.coupons.coupon.events import CouponRedeemed
from storefront.domain import storefront


def usage_key(coupon_id, order_id):
    return f"{coupon_id}:{order_id}"


@storefront.aggregate
class CouponUsage:
    """Redemption record. ``usage_key`` is unique per (coupon, order) pair."""

    usage_key = String(required=True, max_length=100, unique=True)
    coupon_id = Identifier(required=True)
    order_id = Identifier(required=True)
    user_id = Identifier()
    discount_applied = Integer(default=0, min_value=0)
    used_at = DateTime(default=lambda: datetime.now(UTC))

    @classmethod
    def record(cls, coupon_id, order_id, discount_applied, user_id=None):
        used_at = datetime.now(UTC)
        usage = cls(
            usage_key=usage_key(coupon_id, order_id),
            coupon_id=str(coupon_id),
            order_id=str(order_id),
            user_id=user_id,
            discount_applied=discount_applied,
            used_at=used_at,
        )
        usage.raise_(
            CouponRedeemed(
                coupon_id=usage.coupon_id,
                order_id=usage.order_id,
                user_id=user_id,
                discount_applied=discount_applied,
                used_at=used_at,
            )
        )
        return usage
