"""Domain events for coupons and their usage."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Coupon")
class CouponCreated:
    """A coupon was created by an administrator."""

    __version__ = 1

    coupon_id: Identifier(required=True)
    coupon_type: String(required=True)
    code: String()


@storefront.event(part_of="Coupon")
class CouponStatusChanged:
    """A coupon was activated or deactivated."""

    __version__ = 1

    coupon_id: Identifier(required=True)
    is_active: Boolean(required=True)


@storefront.event(part_of="CouponUsage")
class CouponRedeemed:
    """A coupon was applied to an order."""

    __version__ = 1

    coupon_id: Identifier(required=True)
    order_id: Identifier(required=True)
    user_id: Identifier()
    discount_applied: Integer(required=True)
    used_at: DateTime(required=True)
