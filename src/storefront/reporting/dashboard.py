"""Read-only aggregations for the admin dashboard."""

from datetime import date

from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.identity.user.user import User
from storefront.inventory.stock.inventory import Inventory
from storefront.ordering.order.order import Order, OrderStatus
from storefront.reporting.projections.product_sales import ProductSales
from storefront.shared.query import fetch_all

_NOT_SOLD = (OrderStatus.CANCELLED.value, OrderStatus.REFUNDED.value)


def _count(aggregate_cls, **filters) -> int:
    query = current_domain.repository_for(aggregate_cls)._dao.query
    if filters:
        query = query.filter(**filters)
    return query.all().total


def _as_date(value):
    if value is None:
        return None
    return value.date() if hasattr(value, "date") else value


def dashboard_stats() -> dict:
    return {
        "total_users": _count(User),
        "total_products": _count(Product),
        "total_orders": _count(Order),
        "pending_orders": _count(Order, status=OrderStatus.PENDING.value),
        "low_stock_items": len(current_domain.repository_for(Inventory).low_stock_items()),
    }


def sales_report(start: date, end: date) -> dict:
    """Delivered orders whose delivery date falls within ``[start, end]``."""
    delivered = fetch_all(current_domain.repository_for(Order), status=OrderStatus.DELIVERED.value)
    in_range = [
        order for order in delivered if start <= _as_date(order.delivered_at or order.created_at) <= end
    ]
    revenue = sum(order.pricing.grand_total for order in in_range)
    return {
        "start_date": start,
        "end_date": end,
        "order_count": len(in_range),
        "total_revenue": revenue,
        "average_order_value": revenue // len(in_range) if in_range else 0,
    }


def order_stats() -> dict:
    orders = fetch_all(current_domain.repository_for(Order))
    by_status = {status.value: 0 for status in OrderStatus}
    for order in orders:
        by_status[order.status] += 1
    return {
        "total_orders": len(orders),
        "by_status": by_status,
        "total_revenue": sum(o.pricing.grand_total for o in orders if o.status not in _NOT_SOLD),
    }


def top_selling_products(limit: int = 10) -> list[ProductSales]:
    rows = fetch_all(current_domain.repository_for(ProductSales))
    rows = [row for row in rows if row.units_sold]
    return sorted(rows, key=lambda row: (-row.units_sold, -row.revenue))[:limit]
