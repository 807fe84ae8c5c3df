"""Pydantic request/response schemas for the Orders API."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from storefront.shared.api import Money
from storefront.shared.money import to_decimal

# --- Request Schemas ---


class CustomerInfoPayload(BaseModel):
    full_name: str | None = None
    phone: str | None = None
    email: str | None = Field(None, max_length=254)
    address: str | None = Field(None, max_length=500)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)


class CartItemPayload(BaseModel):
    product_id: str
    quantity: int
    unit_price: Money


class PricingPayload(BaseModel):
    item_total: Money
    delivery_fee: Money = Decimal("0")
    discount: Money = Decimal("0")
    grand_total: Decimal = Field(..., max_digits=12, decimal_places=2)


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_info": {
                        "full_name": "Asha Rao",
                        "phone": "9876543210",
                        "email": "asha@example.com",
                        "address": "12 Market Road",
                        "city": "Pune",
                        "state": "MH",
                        "postal_code": "411001",
                    },
                    "cart_items": [
                        {"product_id": "5f0c7d9e-2b1a-4d3e-9c8f-1a2b3c4d5e6f", "quantity": 2, "unit_price": "24.99"}
                    ],
                    "pricing": {
                        "item_total": "49.98",
                        "delivery_fee": "5.00",
                        "discount": "10.00",
                        "grand_total": "44.98",
                    },
                    "coupon_code": "SAVE10",
                }
            ]
        }
    }

    customer_info: CustomerInfoPayload
    cart_items: list[CartItemPayload]
    pricing: PricingPayload
    coupon_code: str | None = Field(None, max_length=50)
    user_id: str | None = None
    notes: str | None = None


class ChangeStatusRequest(BaseModel):
    status: str = Field(..., max_length=20)
    reason: str | None = Field(None, max_length=500)


class PaymentStatusRequest(BaseModel):
    payment_status: str = Field(..., max_length=20)


class ReasonRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)


# --- Response Schemas ---


class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    is_free_item: bool


class PricingResponse(BaseModel):
    item_total: Decimal
    delivery_fee: Decimal
    discount: Decimal
    grand_total: Decimal


class OrderResponse(BaseModel):
    id: str
    order_number: str
    user_id: str | None = None
    customer_info: CustomerInfoPayload
    cart_items: list[OrderItemResponse]
    pricing: PricingResponse
    status: str
    payment_status: str
    coupon_code: str | None = None
    estimated_delivery: date | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    notes: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> OrderResponse:
        customer = order.customer
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            user_id=str(order.user_id) if order.user_id else None,
            customer_info=CustomerInfoPayload(
                full_name=customer.full_name,
                phone=customer.phone,
                email=customer.email,
                address=customer.address,
                city=customer.city,
                state=customer.state,
                postal_code=customer.postal_code,
            ),
            cart_items=[
                OrderItemResponse(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=to_decimal(item.unit_price),
                    total_price=to_decimal(item.total_price),
                    is_free_item=bool(item.is_free_item),
                )
                for item in order.items
            ],
            pricing=PricingResponse(
                item_total=to_decimal(order.pricing.item_total),
                delivery_fee=to_decimal(order.pricing.delivery_fee),
                discount=to_decimal(order.pricing.discount),
                grand_total=to_decimal(order.pricing.grand_total),
            ),
            status=order.status,
            payment_status=order.payment_status,
            coupon_code=order.coupon_code,
            estimated_delivery=order.estimated_delivery,
            shipped_at=order.shipped_at,
            delivered_at=order.delivered_at,
            cancelled_at=order.cancelled_at,
            cancellation_reason=order.cancellation_reason,
            notes=order.notes,
            created_at=order.created_at,
        )


class OrderStatsResponse(BaseModel):
    total_orders: int
    by_status: dict[str, int]
    total_revenue: Decimal
