"""Applying a coupon to an existing order."""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.coupons.coupon.engine import evaluate_coupon, get_coupon, redeem_coupon
from storefront.coupons.coupon.usage import CouponUsage
from storefront.domain import storefront


@storefront.command(part_of="CouponUsage")
class ApplyCoupon:
    coupon_id: Identifier(required=True)
    order_id: Identifier(required=True)
    order_amount: Integer(required=True, min_value=0)
    user_id: Identifier()


@storefront.command_handler(part_of=CouponUsage)
class ApplyCouponHandler:
    @handle(ApplyCoupon)
    def apply_coupon(self, command):
        from storefront.ordering.order.order import Order

        coupon = get_coupon(command.coupon_id)
        current_domain.repository_for(Order).get(command.order_id)

        validation = evaluate_coupon(coupon, command.order_amount)
        usage = redeem_coupon(coupon, command.order_id, validation.discount, user_id=command.user_id)
        return {
            "usage_id": str(usage.id),
            "discount_applied": usage.discount_applied,
            "message": validation.message,
        }
