"""Order lookups for guest checkout."""

from storefront.domain import storefront
from storefront.ordering.order.order import Order
from storefront.shared.query import fetch_all


@storefront.repository(part_of=Order)
class OrderRepository:
    def for_customer_phone(self, phone) -> list[Order]:
        """Orders placed with ``phone`` as the contact number, newest first."""
        orders = [order for order in fetch_all(self) if order.customer_info and order.customer_info.phone == phone]
        return sorted(orders, key=lambda order: order.created_at, reverse=True)
