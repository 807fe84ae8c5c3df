"""Coupon aggregate — discount codes and free-item promotions.

A coupon is one of two kinds:

    discount_code:   a code customers type in; takes ``discount_amount`` off
                     orders of at least ``min_order_amount``
    additional_item: adds ``product_id`` to orders of at least
                     ``min_order_amount`` at no charge

The kind decides which terms value object must be present. Amounts are in
minor units (cents).
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text, ValueObject

from storefront.coupons.coupon.events import CouponCreated, CouponStatusChanged
from storefront.domain import storefront


class CouponType(Enum):
    DISCOUNT_CODE = "discount_code"
    ADDITIONAL_ITEM = "additional_item"


@storefront.value_object(part_of="Coupon")
class DiscountTerms:
    discount_amount = Integer(required=True, min_value=1)
    min_order_amount = Integer(required=True, min_value=0)


@storefront.value_object(part_of="Coupon")
class FreeItemTerms:
    product_id = Identifier(required=True)
    min_order_amount = Integer(required=True, min_value=0)


def normalize_code(code):
    return code.strip().upper() if code else code


@storefront.aggregate
class Coupon:
    coupon_type = String(required=True, choices=CouponType)
    code = String(max_length=50)
    name = String(max_length=100)
    description = Text()
    discount_terms = ValueObject(DiscountTerms)
    free_item_terms = ValueObject(FreeItemTerms)
    is_active = Boolean(default=True)
    created_at = DateTime(default=lambda: datetime.now(UTC))
    updated_at = DateTime(default=lambda: datetime.now(UTC))

    @invariant.post
    def terms_match_coupon_type(self):
        if self.coupon_type == CouponType.DISCOUNT_CODE.value:
            if not self.code:
                raise ValidationError({"code": ["Discount coupons need a code"]})
            if self.discount_terms is None:
                raise ValidationError({"discount_terms": ["Discount coupons need a discount amount and minimum"]})
            if self.free_item_terms is not None:
                raise ValidationError({"free_item_terms": ["Discount coupons cannot grant a free item"]})
        elif self.coupon_type == CouponType.ADDITIONAL_ITEM.value:
            if self.free_item_terms is None:
                raise ValidationError({"free_item_terms": ["Free-item coupons need a product and minimum"]})
            if self.discount_terms is not None:
                raise ValidationError({"discount_terms": ["Free-item coupons cannot carry a discount"]})

    @classmethod
    def create_discount_code(cls, code, discount_amount, min_order_amount, name=None, description=None):
        coupon = cls(
            coupon_type=CouponType.DISCOUNT_CODE.value,
            code=normalize_code(code),
            name=name,
            description=description,
            discount_terms=DiscountTerms(discount_amount=discount_amount, min_order_amount=min_order_amount),
        )
        coupon.raise_(CouponCreated(coupon_id=coupon.id, coupon_type=coupon.coupon_type, code=coupon.code))
        return coupon

    @classmethod
    def create_additional_item(cls, product_id, min_order_amount, code=None, name=None, description=None):
        coupon = cls(
            coupon_type=CouponType.ADDITIONAL_ITEM.value,
            code=normalize_code(code),
            name=name,
            description=description,
            free_item_terms=FreeItemTerms(product_id=product_id, min_order_amount=min_order_amount),
        )
        coupon.raise_(CouponCreated(coupon_id=coupon.id, coupon_type=coupon.coupon_type, code=coupon.code))
        return coupon

    @property
    def is_discount_code(self):
        return self.coupon_type == CouponType.DISCOUNT_CODE.value

    @property
    def min_order_amount(self):
        terms = self.discount_terms if self.is_discount_code else self.free_item_terms
        return terms.min_order_amount

    def discount_for(self, order_amount):
        """Discount granted on ``order_amount``; never more than the order itself."""
        if not self.is_discount_code:
            return 0
        return min(self.discount_terms.discount_amount, order_amount)

    def revise(self, code=None, name=None, description=None, discount_amount=None, product_id=None,
               min_order_amount=None):
        """Update details and terms. The coupon's kind never changes."""
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if code is not None:
            self.code = normalize_code(code)

        if self.is_discount_code:
            if discount_amount is not None or min_order_amount is not None:
                terms = self.discount_terms
                self.discount_terms = DiscountTerms(
                    discount_amount=terms.discount_amount if discount_amount is None else discount_amount,
                    min_order_amount=terms.min_order_amount if min_order_amount is None else min_order_amount,
                )
        elif product_id is not None or min_order_amount is not None:
            terms = self.free_item_terms
            self.free_item_terms = FreeItemTerms(
                product_id=product_id or terms.product_id,
                min_order_amount=terms.min_order_amount if min_order_amount is None else min_order_amount,
            )
        self.updated_at = datetime.now(UTC)

    def activate(self):
        self._set_active(True)

    def deactivate(self):
        self._set_active(False)

    def _set_active(self, is_active):
        if self.is_active == is_active:
            state = "active" if is_active else "inactive"
            raise ValidationError({"is_active": [f"Coupon is already {state}"]})
        self.is_active = is_active
        self.updated_at = datetime.now(UTC)
        self.raise_(CouponStatusChanged(coupon_id=self.id, is_active=is_active))
