"""Order aggregate — the core of the ordering workflow.

State Machine:
    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED
    CANCELLED and REFUNDED are exits from any state before DELIVERED.
    DELIVERED, CANCELLED and REFUNDED are terminal.

Payment status moves independently:
    PENDING → PAID | FAILED,  FAILED → PAID | PENDING,  PAID → REFUNDED

Amounts are integer minor units (cents). The aggregate checks that the
submitted pricing adds up; it never trusts a client-supplied line total.
"""

import json
import re
from datetime import UTC, datetime, timedelta
from enum import Enum
from uuid import uuid4

from protean import atomic_change
from protean.fields import (
    Boolean,
    Date,
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront
from storefront.ordering.order.events import (
    OrderCancelled,
    OrderPlaced,
    OrderRefunded,
    OrderStatusChanged,
    PaymentStatusChanged,
)
from storefront.shared.errors import BusinessRuleError, InvalidStatusTransition


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


_EXITS = {OrderStatus.CANCELLED, OrderStatus.REFUNDED}

_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED} | _EXITS,
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING} | _EXITS,
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED} | _EXITS,
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED} | _EXITS,
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.REFUNDED: set(),  # Terminal
}

_VALID_PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.FAILED: {PaymentStatus.PAID, PaymentStatus.PENDING},
    PaymentStatus.PAID: {PaymentStatus.REFUNDED},
    PaymentStatus.REFUNDED: set(),
}

PHONE_PATTERN = re.compile(r"^\d{10}$")


def generate_order_number(now=None):
    now = now or datetime.now(UTC)
    return f"ORD-{now:%Y%m%d}-{uuid4().hex[:8].upper()}"


def validate_submission(customer_info, lines, pricing):
    """Check an order submission before anything is read or written.

    ``lines`` are dicts with ``product_id``, ``quantity`` and ``unit_price``;
    ``pricing`` holds ``item_total``, ``delivery_fee``, ``discount`` and
    ``grand_total``. All amounts in cents. Every problem found is reported.
    """
    errors = {}
    customer_info = customer_info or {}

    if not (customer_info.get("full_name") or "").strip():
        errors["full_name"] = ["Full name is required"]

    phone = (customer_info.get("phone") or "").strip()
    if not phone:
        errors["phone"] = ["Phone number is required"]
    elif not PHONE_PATTERN.match(phone):
        errors["phone"] = ["Phone number must be 10 digits"]

    if not lines:
        errors["cart_items"] = ["Order must contain at least one item"]
    for index, line in enumerate(lines or []):
        if not line.get("product_id"):
            errors[f"cart_items.{index}.product_id"] = ["Product is required"]
        quantity = line.get("quantity")
        if not isinstance(quantity, int) or quantity < 1:
            errors[f"cart_items.{index}.quantity"] = ["Quantity must be at least 1"]
        unit_price = line.get("unit_price")
        if not isinstance(unit_price, int) or unit_price < 0:
            errors[f"cart_items.{index}.unit_price"] = ["Unit price cannot be negative"]

    item_total = pricing.get("item_total") or 0
    delivery_fee = pricing.get("delivery_fee") or 0
    discount = pricing.get("discount") or 0
    grand_total = pricing.get("grand_total") or 0

    if delivery_fee < 0:
        errors["delivery_fee"] = ["Delivery fee cannot be negative"]
    if discount < 0:
        errors["discount"] = ["Discount cannot be negative"]
    if grand_total <= 0:
        errors["grand_total"] = ["Grand total must be greater than zero"]
    elif grand_total != item_total + delivery_fee - discount:
        errors["grand_total"] = ["Grand total must equal item total plus delivery fee minus discount"]

    if "cart_items" not in errors and not any(key.startswith("cart_items.") for key in errors):
        computed = sum(line["quantity"] * line["unit_price"] for line in lines)
        if computed != item_total:
            errors["item_total"] = [f"Item total {item_total} does not match the sum of line items {computed}"]

    if errors:
        raise BusinessRuleError(errors)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class CustomerInfo:
    full_name = String(required=True, max_length=150)
    phone = String(required=True, max_length=10)
    email = String(max_length=254)
    address = String(max_length=500)
    city = String(max_length=100)
    state = String(max_length=100)
    postal_code = String(max_length=20)


@storefront.value_object(part_of="Order")
class OrderPricing:
    item_total = Integer(default=0, min_value=0)
    delivery_fee = Integer(default=0, min_value=0)
    discount = Integer(default=0, min_value=0)
    grand_total = Integer(default=0, min_value=0)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=200)
    quantity = Integer(required=True, min_value=1)
    unit_price = Integer(required=True, min_value=0)
    total_price = Integer(default=0, min_value=0)
    is_free_item = Boolean(default=False)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=30, unique=True)
    user_id = Identifier()
    customer = ValueObject(CustomerInfo)
    pricing = ValueObject(OrderPricing)
    items = HasMany(OrderItem)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    coupon_id = Identifier()
    coupon_code = String(max_length=50)
    stock_committed = Boolean(default=False)
    estimated_delivery = Date()
    shipped_at = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()
    cancellation_reason = String(max_length=500)
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_info,
        lines,
        pricing,
        user_id=None,
        coupon_id=None,
        coupon_code=None,
        notes=None,
        estimated_delivery_days=5,
    ):
        """Build a new PENDING order.

        ``lines`` carry ``product_id``, ``product_name``, ``quantity``,
        ``unit_price`` and optionally ``is_free_item``. Free lines are priced
        at zero and excluded from the item-total check.
        """
        paid_lines = [line for line in lines if not line.get("is_free_item")]
        validate_submission(customer_info, paid_lines, pricing)

        now = datetime.now(UTC)
        order = cls(
            order_number=generate_order_number(now),
            user_id=user_id,
            customer=CustomerInfo(
                full_name=customer_info["full_name"].strip(),
                phone=customer_info["phone"].strip(),
                email=customer_info.get("email"),
                address=customer_info.get("address"),
                city=customer_info.get("city"),
                state=customer_info.get("state"),
                postal_code=customer_info.get("postal_code"),
            ),
            pricing=OrderPricing(
                item_total=pricing["item_total"],
                delivery_fee=pricing.get("delivery_fee") or 0,
                discount=pricing.get("discount") or 0,
                grand_total=pricing["grand_total"],
            ),
            coupon_id=coupon_id,
            coupon_code=coupon_code,
            notes=notes,
            estimated_delivery=(now + timedelta(days=estimated_delivery_days)).date(),
            created_at=now,
            updated_at=now,
        )

        with atomic_change(order):
            for line in lines:
                is_free = bool(line.get("is_free_item"))
                unit_price = 0 if is_free else line["unit_price"]
                order.add_items(
                    OrderItem(
                        product_id=str(line["product_id"]),
                        product_name=line["product_name"],
                        quantity=line["quantity"],
                        unit_price=unit_price,
                        total_price=line["quantity"] * unit_price,
                        is_free_item=is_free,
                    )
                )

        order.raise_(
            OrderPlaced(
                order_id=order.id,
                order_number=order.order_number,
                user_id=user_id,
                items=order._items_json(),
                grand_total=order.pricing.grand_total,
                coupon_code=coupon_code,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _items_json(self):
        return json.dumps(
            [
                {
                    "product_id": str(item.product_id),
                    "product_name": item.product_name,
                    "quantity": item.quantity,
                    "total_price": item.total_price,
                    "is_free_item": bool(item.is_free_item),
                }
                for item in self.items
            ]
        )

    def stock_by_product(self):
        """Units per product across all lines, in first-seen order."""
        totals = {}
        for item in self.items:
            totals[str(item.product_id)] = totals.get(str(item.product_id), 0) + item.quantity
        return totals

    @property
    def holds_stock(self):
        """Reserved or shipped units that cancellation would have to give back."""
        return OrderStatus(self.status) not in (OrderStatus.DELIVERED, *_EXITS)

    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidStatusTransition(current.value, target_status.value)

    def _advance(self, target_status):
        self._assert_can_transition(target_status)
        previous = self.status
        now = datetime.now(UTC)
        self.status = target_status.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                previous_status=previous,
                new_status=self.status,
                changed_at=now,
            )
        )
        return now

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def confirm(self):
        self._advance(OrderStatus.CONFIRMED)

    def start_processing(self):
        self._advance(OrderStatus.PROCESSING)

    def ship(self):
        """Mark shipped. The caller commits the reserved stock in the same unit of work."""
        self.shipped_at = self._advance(OrderStatus.SHIPPED)
        self.stock_committed = True

    def deliver(self):
        self.delivered_at = self._advance(OrderStatus.DELIVERED)

    def cancel(self, reason=None):
        self._assert_can_transition(OrderStatus.CANCELLED)
        previous = self.status
        now = datetime.now(UTC)

        self.status = OrderStatus.CANCELLED.value
        self.cancelled_at = now
        self.cancellation_reason = reason
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=self.id,
                previous_status=previous,
                reason=reason,
                items=self._items_json(),
                cancelled_at=now,
            )
        )

    def refund(self, reason=None):
        self._assert_can_transition(OrderStatus.REFUNDED)
        previous = self.status
        now = datetime.now(UTC)

        self.status = OrderStatus.REFUNDED.value
        self.updated_at = now
        if self.payment_status == PaymentStatus.PAID.value:
            self.update_payment_status(PaymentStatus.REFUNDED.value)

        self.raise_(
            OrderRefunded(
                order_id=self.id,
                previous_status=previous,
                reason=reason,
                items=self._items_json(),
                refunded_at=now,
            )
        )

    def update_payment_status(self, payment_status):
        try:
            target = PaymentStatus(payment_status)
        except ValueError as exc:
            raise BusinessRuleError(
                {"payment_status": [f"Unknown payment status {payment_status}"]}
            ) from exc

        current = PaymentStatus(self.payment_status)
        if target not in _VALID_PAYMENT_TRANSITIONS[current]:
            raise InvalidStatusTransition(current.value, target.value, field="payment_status")

        self.payment_status = target.value
        self.updated_at = datetime.now(UTC)
        self.raise_(
            PaymentStatusChanged(
                order_id=self.id,
                previous_status=current.value,
                new_status=target.value,
            )
        )
