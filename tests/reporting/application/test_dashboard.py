"""Application tests for the dashboard aggregations and the product sales projection."""

from datetime import UTC, datetime, timedelta

from protean import current_domain
from storefront.identity.user.management import RegisterUser
from storefront.ordering.order.lifecycle import CancelOrder, ChangeOrderStatus
from storefront.reporting.dashboard import dashboard_stats, order_stats, sales_report, top_selling_products
from storefront.reporting.projections.product_sales import ProductSales


def _deliver(order_id):
    for status in ("CONFIRMED", "PROCESSING", "SHIPPED", "DELIVERED"):
        current_domain.process(ChangeOrderStatus(order_id=order_id, status=status), asynchronous=False)


class TestProductSalesProjection:
    def test_placed_orders_count_as_sales(self, make_product, order_placer):
        rice = make_product(name="Basmati Rice", price=5000, stock=20)
        order_placer([(rice, 2, 5000)])
        order_placer([(rice, 1, 5000)])

        row = current_domain.repository_for(ProductSales).get(rice)
        assert row.product_name == "Basmati Rice"
        assert row.units_sold == 3
        assert row.revenue == 15000
        assert row.order_count == 2

    def test_cancellation_takes_the_sale_back(self, make_product, order_placer):
        rice = make_product(stock=20)
        keep = order_placer([(rice, 2, 5000)])
        drop = order_placer([(rice, 4, 5000)])
        current_domain.process(CancelOrder(order_id=drop), asynchronous=False)

        row = current_domain.repository_for(ProductSales).get(rice)
        assert keep
        assert row.units_sold == 2
        assert row.order_count == 1

    def test_free_items_are_not_sales(self, make_product, order_placer):
        from storefront.coupons.coupon.management import CreateCoupon

        rice = make_product(name="Basmati Rice", price=5000, stock=10)
        jaggery = make_product(name="Jaggery", price=2000, stock=5)
        current_domain.process(
            CreateCoupon(coupon_type="additional_item", code="FREEJAGGERY", product_id=jaggery, min_order_amount=10000),
            asynchronous=False,
        )

        order_placer([(rice, 2, 5000), (jaggery, 1, 2000)], coupon_code="FREEJAGGERY")

        row = current_domain.repository_for(ProductSales).get(jaggery)
        assert row.units_sold == 1
        assert row.revenue == 2000
        assert row.order_count == 1

    def test_repeated_lines_count_one_order(self, make_product, order_placer):
        rice = make_product(stock=20)
        order_placer([(rice, 2, 5000), (rice, 3, 5000)])

        row = current_domain.repository_for(ProductSales).get(rice)
        assert row.units_sold == 5
        assert row.revenue == 25000
        assert row.order_count == 1

    def test_top_selling_products_ranked_by_units(self, make_product, order_placer):
        rice = make_product(name="Basmati Rice", price=5000, stock=20)
        dal = make_product(name="Toor Dal", price=3000, stock=20)
        ghee = make_product(name="Ghee", price=9000, stock=20)
        order_placer([(rice, 1, 5000), (dal, 5, 3000), (ghee, 2, 9000)])

        top = top_selling_products(limit=2)
        assert [row.product_name for row in top] == ["Toor Dal", "Ghee"]


class TestDashboard:
    def test_counts(self, make_product, order_placer):
        current_domain.process(
            RegisterUser(username="asha", email="asha@example.com", password="s3cret-pass"), asynchronous=False
        )
        low = make_product(name="Toor Dal", price=3000, stock=3, low_stock_alert=5)
        make_product(name="Basmati Rice", stock=50, low_stock_alert=5)
        order_placer([(low, 1, 3000)])

        stats = dashboard_stats()
        assert stats == {
            "total_users": 1,
            "total_products": 2,
            "total_orders": 1,
            "pending_orders": 1,
            "low_stock_items": 1,
        }

    def test_order_stats_excludes_cancelled_revenue(self, make_product, order_placer):
        rice = make_product(stock=20)
        order_placer([(rice, 1, 5000)], delivery_fee=500)
        cancelled = order_placer([(rice, 2, 5000)])
        current_domain.process(CancelOrder(order_id=cancelled), asynchronous=False)

        stats = order_stats()
        assert stats["total_orders"] == 2
        assert stats["by_status"]["PENDING"] == 1
        assert stats["by_status"]["CANCELLED"] == 1
        assert stats["total_revenue"] == 5500

    def test_sales_report_covers_delivered_orders_in_range(self, make_product, order_placer):
        rice = make_product(stock=20)
        delivered = order_placer([(rice, 2, 5000)])
        order_placer([(rice, 1, 5000)])
        _deliver(delivered)

        today = datetime.now(UTC).date()
        report = sales_report(today - timedelta(days=1), today + timedelta(days=1))
        assert report["order_count"] == 1
        assert report["total_revenue"] == 10000
        assert report["average_order_value"] == 10000

        empty = sales_report(today - timedelta(days=30), today - timedelta(days=10))
        assert empty["order_count"] == 0
        assert empty["average_order_value"] == 0
