"""FastAPI endpoints for the Coupon engine."""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.coupons.api.schemas import (
    ApplyCouponRequest,
    ApplyCouponResponse,
    CouponResponse,
    CouponStatsResponse,
    CouponValidationResponse,
    CreateCouponRequest,
    FreeItemCouponResponse,
    UpdateCouponRequest,
    ValidateCouponRequest,
)
from storefront.coupons.coupon.application import ApplyCoupon
from storefront.coupons.coupon.engine import (
    applicable_free_item_coupons,
    coupon_usage_stats,
    get_coupon,
    validate_coupon,
)
from storefront.coupons.coupon.management import (
    ActivateCoupon,
    CreateCoupon,
    DeactivateCoupon,
    DeleteCoupon,
    UpdateCoupon,
)
from storefront.identity.auth import require_admin
from storefront.shared.api import ApiResponse, MessageResponse, error_response
from storefront.shared.commands import process_exclusively
from storefront.shared.errors import BusinessRuleError, NotFoundError
from storefront.shared.money import to_decimal, to_minor_units

router = APIRouter(prefix="/coupons", tags=["coupons"])

_admin = [Depends(require_admin)]


def _cents(amount, field):
    return to_minor_units(amount, field) if amount is not None else None


def _coupon(coupon_id: str) -> ApiResponse[CouponResponse]:
    return ApiResponse(data=CouponResponse.from_coupon(get_coupon(coupon_id)))


# --- Storefront endpoints ---


@router.post("/validate", response_model=ApiResponse[CouponValidationResponse])
async def validate_coupon_code(body: ValidateCouponRequest):
    """Check a code before checkout. Rejections answer 400 with ``valid: false`` and the reason code."""
    try:
        validation = validate_coupon(body.code, to_minor_units(body.order_amount, "order_amount"))
    except (BusinessRuleError, NotFoundError) as exc:
        return error_response(400, exc.code, exc.message, valid=False)
    return ApiResponse(data=CouponValidationResponse.from_validation(validation))


@router.post("/apply", response_model=ApiResponse[ApplyCouponResponse])
async def apply_coupon(body: ApplyCouponRequest) -> ApiResponse[ApplyCouponResponse]:
    command = ApplyCoupon(
        coupon_id=body.coupon_id,
        order_id=body.order_id,
        order_amount=to_minor_units(body.order_amount, "order_amount"),
        user_id=body.user_id,
    )
    result = process_exclusively(command)
    return ApiResponse(
        data=ApplyCouponResponse(
            usage_id=result["usage_id"],
            discount_applied=to_decimal(result["discount_applied"]),
            message=result["message"],
        )
    )


@router.get("/additional-items", response_model=ApiResponse[list[FreeItemCouponResponse]])
async def list_applicable_free_items(
    order_amount: Decimal = Query(..., gt=0, max_digits=12, decimal_places=2),
) -> ApiResponse[list[FreeItemCouponResponse]]:
    offers = applicable_free_item_coupons(to_minor_units(order_amount, "order_amount"))
    return ApiResponse(data=[FreeItemCouponResponse.from_offer(coupon, product) for coupon, product in offers])


# --- Admin endpoints ---


@router.post("", status_code=201, dependencies=_admin, response_model=ApiResponse[CouponResponse])
async def create_coupon(body: CreateCouponRequest) -> ApiResponse[CouponResponse]:
    command = CreateCoupon(
        coupon_type=body.coupon_type,
        code=body.code,
        name=body.name,
        description=body.description,
        discount_amount=_cents(body.discount_amount, "discount_amount"),
        min_order_amount=_cents(body.min_order_amount, "min_order_amount"),
        product_id=body.product_id,
    )
    return _coupon(current_domain.process(command, asynchronous=False))


@router.get("/{coupon_id}", dependencies=_admin, response_model=ApiResponse[CouponResponse])
async def read_coupon(coupon_id: str) -> ApiResponse[CouponResponse]:
    return _coupon(coupon_id)


@router.put("/{coupon_id}", dependencies=_admin, response_model=ApiResponse[CouponResponse])
async def update_coupon(coupon_id: str, body: UpdateCouponRequest) -> ApiResponse[CouponResponse]:
    command = UpdateCoupon(
        coupon_id=coupon_id,
        code=body.code,
        name=body.name,
        description=body.description,
        discount_amount=_cents(body.discount_amount, "discount_amount"),
        min_order_amount=_cents(body.min_order_amount, "min_order_amount"),
        product_id=body.product_id,
    )
    return _coupon(current_domain.process(command, asynchronous=False))


@router.put("/{coupon_id}/activate", dependencies=_admin, response_model=ApiResponse[CouponResponse])
async def activate_coupon(coupon_id: str) -> ApiResponse[CouponResponse]:
    current_domain.process(ActivateCoupon(coupon_id=coupon_id), asynchronous=False)
    return _coupon(coupon_id)


@router.put("/{coupon_id}/deactivate", dependencies=_admin, response_model=ApiResponse[CouponResponse])
async def deactivate_coupon(coupon_id: str) -> ApiResponse[CouponResponse]:
    current_domain.process(DeactivateCoupon(coupon_id=coupon_id), asynchronous=False)
    return _coupon(coupon_id)


@router.delete("/{coupon_id}", dependencies=_admin, response_model=ApiResponse[MessageResponse])
async def delete_coupon(coupon_id: str) -> ApiResponse[MessageResponse]:
    current_domain.process(DeleteCoupon(coupon_id=coupon_id), asynchronous=False)
    return ApiResponse(data=MessageResponse(message="Coupon deleted"))


@router.get("/{coupon_id}/stats", dependencies=_admin, response_model=ApiResponse[CouponStatsResponse])
async def get_coupon_stats(coupon_id: str) -> ApiResponse[CouponStatsResponse]:
    stats = coupon_usage_stats(coupon_id)
    return ApiResponse(
        data=CouponStatsResponse(
            coupon_id=stats["coupon_id"],
            total_usages=stats["total_usages"],
            total_discount_given=to_decimal(stats["total_discount_given"]),
        )
    )
