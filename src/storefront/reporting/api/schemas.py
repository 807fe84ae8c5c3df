"""Pydantic response schemas for the Dashboard API. Amounts are decimal currency units."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from storefront.shared.money import to_decimal


class DashboardStatsResponse(BaseModel):
    total_users: int
    total_products: int
    total_orders: int
    pending_orders: int
    low_stock_items: int


class SalesReportResponse(BaseModel):
    start_date: date
    end_date: date
    order_count: int
    total_revenue: Decimal
    average_order_value: Decimal

    @classmethod
    def from_report(cls, report: dict) -> SalesReportResponse:
        return cls(
            start_date=report["start_date"],
            end_date=report["end_date"],
            order_count=report["order_count"],
            total_revenue=to_decimal(report["total_revenue"]),
            average_order_value=to_decimal(report["average_order_value"]),
        )


class TopProductResponse(BaseModel):
    product_id: str
    product_name: str | None = None
    units_sold: int
    revenue: Decimal
    order_count: int

    @classmethod
    def from_row(cls, row) -> TopProductResponse:
        return cls(
            product_id=str(row.product_id),
            product_name=row.product_name,
            units_sold=row.units_sold or 0,
            revenue=to_decimal(row.revenue or 0),
            order_count=row.order_count or 0,
        )
