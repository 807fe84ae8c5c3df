"""Tests for the Coupon aggregate — kinds, terms and activation."""

import pytest
from protean.exceptions import ValidationError
from storefront.coupons.coupon.coupon import Coupon, CouponType, DiscountTerms, FreeItemTerms
from storefront.coupons.coupon.usage import usage_key


class TestDiscountCode:
    def test_code_is_normalized(self):
        coupon = Coupon.create_discount_code(code="  save10 ", discount_amount=1000, min_order_amount=5000)
        assert coupon.code == "SAVE10"
        assert coupon.coupon_type == CouponType.DISCOUNT_CODE.value
        assert coupon.is_active is True

    def test_discount_never_exceeds_order(self):
        coupon = Coupon.create_discount_code(code="BIG", discount_amount=10000, min_order_amount=0)
        assert coupon.discount_for(4000) == 4000
        assert coupon.discount_for(20000) == 10000

    def test_needs_a_code(self):
        with pytest.raises(ValidationError):
            Coupon.create_discount_code(code=None, discount_amount=1000, min_order_amount=0)

    def test_cannot_carry_free_item_terms(self):
        with pytest.raises(ValidationError):
            Coupon(
                coupon_type=CouponType.DISCOUNT_CODE.value,
                code="MIXED",
                discount_terms=DiscountTerms(discount_amount=100, min_order_amount=0),
                free_item_terms=FreeItemTerms(product_id="prod-001", min_order_amount=0),
            )

    def test_discount_amount_must_be_positive(self):
        with pytest.raises(ValidationError):
            Coupon.create_discount_code(code="ZERO", discount_amount=0, min_order_amount=0)

    def test_revise_keeps_unchanged_terms(self):
        coupon = Coupon.create_discount_code(code="SAVE10", discount_amount=1000, min_order_amount=5000)
        coupon.revise(discount_amount=1500)
        assert coupon.discount_terms.discount_amount == 1500
        assert coupon.discount_terms.min_order_amount == 5000


class TestAdditionalItem:
    def test_code_is_optional(self):
        coupon = Coupon.create_additional_item(product_id="prod-001", min_order_amount=20000)
        assert coupon.code is None
        assert coupon.min_order_amount == 20000
        assert coupon.discount_for(50000) == 0

    def test_needs_free_item_terms(self):
        with pytest.raises(ValidationError):
            Coupon(coupon_type=CouponType.ADDITIONAL_ITEM.value, code="FREEBIE")


class TestActivation:
    def test_deactivate_then_activate(self):
        coupon = Coupon.create_discount_code(code="SAVE10", discount_amount=1000, min_order_amount=0)
        coupon.deactivate()
        assert coupon.is_active is False
        coupon.activate()
        assert coupon.is_active is True

    def test_activating_an_active_coupon_is_rejected(self):
        coupon = Coupon.create_discount_code(code="SAVE10", discount_amount=1000, min_order_amount=0)
        with pytest.raises(ValidationError):
            coupon.activate()


def test_usage_key_pairs_coupon_and_order():
    assert usage_key("c-1", "o-1") == usage_key("c-1", "o-1")
    assert usage_key("c-1", "o-1") != usage_key("c-1", "o-2")
