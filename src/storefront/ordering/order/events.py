"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order and its stock was reserved."""

    __version__ = 1

    order_id: Identifier(required=True)
    order_number: String(required=True)
    user_id: Identifier()
    items: Text(required=True)  # JSON list of {product_id, product_name, quantity, total_price, is_free_item}
    grand_total: Integer(required=True)
    coupon_code: String()
    placed_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """An order moved forward in its lifecycle."""

    __version__ = 1

    order_id: Identifier(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)
    changed_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    """An order was cancelled before delivery and its stock returned."""

    __version__ = 1

    order_id: Identifier(required=True)
    previous_status: String(required=True)
    reason: String(max_length=500)
    items: Text(required=True)
    cancelled_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderRefunded:
    """An order was refunded before delivery and its stock returned."""

    __version__ = 1

    order_id: Identifier(required=True)
    previous_status: String(required=True)
    reason: String(max_length=500)
    items: Text(required=True)
    refunded_at: DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentStatusChanged:
    """The payment state of an order changed."""

    __version__ = 1

    order_id: Identifier(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)
