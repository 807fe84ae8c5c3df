"""FastAPI endpoints for the Order workflow."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.identity.auth import require_admin
from storefront.ordering.api.schemas import (
    ChangeStatusRequest,
    OrderResponse,
    OrderStatsResponse,
    PaymentStatusRequest,
    PlaceOrderRequest,
    ReasonRequest,
)
from storefront.ordering.order.lifecycle import (
    CancelOrder,
    ChangeOrderStatus,
    DeleteOrder,
    RefundOrder,
    UpdatePaymentStatus,
)
from storefront.ordering.order.order import PHONE_PATTERN, Order
from storefront.ordering.order.placement import PlaceOrder
from storefront.reporting.dashboard import order_stats
from storefront.shared.api import ApiResponse, MessageResponse
from storefront.shared.commands import process_exclusively
from storefront.shared.errors import BusinessRuleError
from storefront.shared.money import to_decimal, to_minor_units

router = APIRouter(prefix="/orders", tags=["orders"])

_admin = [Depends(require_admin)]


def _order(order_id: str) -> ApiResponse[OrderResponse]:
    order = current_domain.repository_for(Order).get(order_id)
    return ApiResponse(data=OrderResponse.from_order(order))


@router.post("", status_code=201, response_model=ApiResponse[OrderResponse])
async def place_order(body: PlaceOrderRequest) -> ApiResponse[OrderResponse]:
    command = PlaceOrder(
        customer_info=body.customer_info.model_dump_json(),
        cart_items=json.dumps(
            [
                {
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                    "unit_price": to_minor_units(item.unit_price, "unit_price"),
                }
                for item in body.cart_items
            ]
        ),
        item_total=to_minor_units(body.pricing.item_total, "item_total"),
        delivery_fee=to_minor_units(body.pricing.delivery_fee, "delivery_fee"),
        discount=to_minor_units(body.pricing.discount, "discount"),
        grand_total=to_minor_units(body.pricing.grand_total, "grand_total"),
        coupon_code=body.coupon_code,
        user_id=body.user_id,
        notes=body.notes,
    )
    return _order(process_exclusively(command))


@router.get("/stats", dependencies=_admin, response_model=ApiResponse[OrderStatsResponse])
async def get_order_stats() -> ApiResponse[OrderStatsResponse]:
    stats = order_stats()
    return ApiResponse(
        data=OrderStatsResponse(
            total_orders=stats["total_orders"],
            by_status=stats["by_status"],
            total_revenue=to_decimal(stats["total_revenue"]),
        )
    )


@router.get("/customer/{phone}", response_model=ApiResponse[list[OrderResponse]])
async def get_orders_by_phone(phone: str) -> ApiResponse[list[OrderResponse]]:
    """Guest checkout lookup: every order placed with this contact number."""
    if not PHONE_PATTERN.match(phone):
        raise BusinessRuleError({"phone": ["Phone number must be 10 digits"]}, code="INVALID_PHONE")
    orders = current_domain.repository_for(Order).for_customer_phone(phone)
    return ApiResponse(data=[OrderResponse.from_order(order) for order in orders])


@router.get("/{order_id}", response_model=ApiResponse[OrderResponse])
async def get_order(order_id: str) -> ApiResponse[OrderResponse]:
    return _order(order_id)


@router.patch("/{order_id}/status", dependencies=_admin, response_model=ApiResponse[OrderResponse])
async def change_order_status(order_id: str, body: ChangeStatusRequest) -> ApiResponse[OrderResponse]:
    command = ChangeOrderStatus(order_id=order_id, status=body.status.upper(), reason=body.reason)
    process_exclusively(command)
    return _order(order_id)


@router.patch("/{order_id}/payment-status", dependencies=_admin, response_model=ApiResponse[OrderResponse])
async def update_payment_status(order_id: str, body: PaymentStatusRequest) -> ApiResponse[OrderResponse]:
    command = UpdatePaymentStatus(order_id=order_id, payment_status=body.payment_status.upper())
    process_exclusively(command)
    return _order(order_id)


@router.post("/{order_id}/cancel", dependencies=_admin, response_model=ApiResponse[OrderResponse])
async def cancel_order(order_id: str, body: ReasonRequest | None = None) -> ApiResponse[OrderResponse]:
    reason = body.reason if body else None
    process_exclusively(CancelOrder(order_id=order_id, reason=reason))
    return _order(order_id)


@router.post("/{order_id}/refund", dependencies=_admin, response_model=ApiResponse[OrderResponse])
async def refund_order(order_id: str, body: ReasonRequest | None = None) -> ApiResponse[OrderResponse]:
    reason = body.reason if body else None
    process_exclusively(RefundOrder(order_id=order_id, reason=reason))
    return _order(order_id)


@router.delete("/{order_id}", dependencies=_admin, response_model=ApiResponse[MessageResponse])
async def delete_order(order_id: str) -> ApiResponse[MessageResponse]:
    process_exclusively(DeleteOrder(order_id=order_id))
    return ApiResponse(data=MessageResponse(message="Order deleted"))
