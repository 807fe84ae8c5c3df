"""Pydantic request/response schemas for the Coupons API."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from storefront.shared.api import Money
from storefront.shared.money import to_decimal


class CreateCouponRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "coupon_type": "discount_code",
                    "code": "SAVE10",
                    "name": "Ten off",
                    "discount_amount": "10.00",
                    "min_order_amount": "50.00",
                },
                {
                    "coupon_type": "additional_item",
                    "name": "Free sample",
                    "product_id": "5f0c7d9e-2b1a-4d3e-9c8f-1a2b3c4d5e6f",
                    "min_order_amount": "75.00",
                },
            ]
        }
    }

    coupon_type: Literal["discount_code", "additional_item"]
    code: str | None = Field(None, min_length=1, max_length=50)
    name: str | None = Field(None, max_length=100)
    description: str | None = None
    discount_amount: Money | None = None
    min_order_amount: Money | None = None
    product_id: str | None = None


class UpdateCouponRequest(BaseModel):
    code: str | None = Field(None, min_length=1, max_length=50)
    name: str | None = Field(None, max_length=100)
    description: str | None = None
    discount_amount: Money | None = None
    min_order_amount: Money | None = None
    product_id: str | None = None


class ValidateCouponRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    order_amount: Money


class ApplyCouponRequest(BaseModel):
    coupon_id: str
    order_id: str
    order_amount: Money
    user_id: str | None = None


class FreeProductResponse(BaseModel):
    id: str
    name: str
    price: Decimal


class CouponValidationResponse(BaseModel):
    valid: bool = True
    coupon_id: str
    code: str | None = None
    coupon_type: str
    discount_amount: Decimal
    free_product: FreeProductResponse | None = None
    message: str

    @classmethod
    def from_validation(cls, validation) -> CouponValidationResponse:
        free = validation.free_product
        return cls(
            coupon_id=str(validation.coupon.id),
            code=validation.coupon.code,
            coupon_type=validation.coupon.coupon_type,
            discount_amount=to_decimal(validation.discount),
            free_product=(
                FreeProductResponse(id=str(free.id), name=free.name, price=to_decimal(free.price)) if free else None
            ),
            message=validation.message,
        )


class FreeItemCouponResponse(BaseModel):
    id: str
    name: str | None = None
    description: str | None = None
    product_id: str
    product_name: str
    min_order_amount: Decimal

    @classmethod
    def from_offer(cls, coupon, product) -> FreeItemCouponResponse:
        return cls(
            id=str(coupon.id),
            name=coupon.name,
            description=coupon.description,
            product_id=str(product.id),
            product_name=product.name,
            min_order_amount=to_decimal(coupon.min_order_amount),
        )


class ApplyCouponResponse(BaseModel):
    usage_id: str
    discount_applied: Decimal
    message: str


class CouponResponse(BaseModel):
    id: str
    coupon_type: str
    code: str | None = None
    name: str | None = None
    description: str | None = None
    discount_amount: Decimal | None = None
    min_order_amount: Decimal
    product_id: str | None = None
    is_active: bool
    created_at: datetime | None = None

    @classmethod
    def from_coupon(cls, coupon) -> CouponResponse:
        discount = coupon.discount_terms
        free = coupon.free_item_terms
        return cls(
            id=str(coupon.id),
            coupon_type=coupon.coupon_type,
            code=coupon.code,
            name=coupon.name,
            description=coupon.description,
            discount_amount=to_decimal(discount.discount_amount) if discount else None,
            min_order_amount=to_decimal(coupon.min_order_amount),
            product_id=str(free.product_id) if free else None,
            is_active=coupon.is_active,
            created_at=coupon.created_at,
        )


class CouponStatsResponse(BaseModel):
    coupon_id: str
    total_usages: int
    total_discount_given: Decimal
