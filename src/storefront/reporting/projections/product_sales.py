"""Product sales — units sold and revenue per product, fed by order events."""

import json

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order.events import OrderCancelled, OrderPlaced, OrderRefunded
from storefront.ordering.order.order import Order


@storefront.projection
class ProductSales:
    product_id: Identifier(identifier=True, required=True)
    product_name: String(max_length=200)
    units_sold: Integer(default=0)
    revenue: Integer(default=0)
    order_count: Integer(default=0)


@storefront.projector(projector_for=ProductSales, aggregates=[Order])
class ProductSalesProjector:
    def _apply(self, items_json, sign):
        """Fold one order into the per-product totals. Free lines are not sales."""
        totals = {}
        for item in json.loads(items_json):
            if item.get("is_free_item"):
                continue
            entry = totals.setdefault(
                item["product_id"], {"product_name": item["product_name"], "quantity": 0, "revenue": 0}
            )
            entry["quantity"] += item["quantity"]
            entry["revenue"] += item["total_price"]

        repo = current_domain.repository_for(ProductSales)
        for product_id, entry in totals.items():
            try:
                row = repo.get(product_id)
            except ObjectNotFoundError:
                row = ProductSales(product_id=product_id, product_name=entry["product_name"])

            row.product_name = entry["product_name"]
            row.units_sold = max((row.units_sold or 0) + sign * entry["quantity"], 0)
            row.revenue = max((row.revenue or 0) + sign * entry["revenue"], 0)
            # once per order, however many lines it has for the product
            row.order_count = max((row.order_count or 0) + sign, 0)
            repo.add(row)

    @on(OrderPlaced)
    def on_order_placed(self, event):
        self._apply(event.items, 1)

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        self._apply(event.items, -1)

    @on(OrderRefunded)
    def on_order_refunded(self, event):
        self._apply(event.items, -1)
