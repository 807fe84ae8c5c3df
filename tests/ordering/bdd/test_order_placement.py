"""BDD tests for order placement."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when
from storefront.coupons.coupon.engine import coupon_usage_stats, find_coupon_by_code
from storefront.inventory.stock.inventory import Inventory
from storefront.ordering.order.lifecycle import CancelOrder
from storefront.ordering.order.order import Order
from storefront.shared.errors import BusinessRuleError

scenarios("features/order_placement.feature")


@pytest.fixture()
def catalog():
    """Product name -> (product id, unit price)."""
    return {}


@pytest.fixture()
def outcome():
    return {"order_id": None, "error": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.parse('a product "{name}" priced at {price:d} with {stock:d} units in stock'))
def _(catalog, make_product, name, price, stock):
    catalog[name] = (make_product(name=name, price=price, stock=stock), price)


@given(parsers.parse('a discount coupon "{code}" worth {amount:d} on orders of at least {minimum:d}'))
def _(make_discount_coupon, code, amount, minimum):
    make_discount_coupon(code=code, discount_amount=amount, min_order_amount=minimum)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
def _order(order_placer, outcome, lines, **kwargs):
    try:
        outcome["order_id"] = order_placer(lines, **kwargs)
        outcome["error"] = None
    except BusinessRuleError as exc:
        outcome["error"] = exc


@when(
    parsers.re(r'a customer orders (?P<quantity>\d+) units of "(?P<name>[^"]+)"'),
    converters={"quantity": int},
)
def _(catalog, order_placer, outcome, quantity, name):
    product_id, price = catalog[name]
    _order(order_placer, outcome, [(product_id, quantity, price)])


@when(
    parsers.re(
        r'a customer orders (?P<quantity>\d+) units of "(?P<name>[^"]+)" with coupon "(?P<code>[^"]+)"'
    ),
    converters={"quantity": int},
)
def _(catalog, order_placer, outcome, quantity, name, code):
    product_id, price = catalog[name]
    discount = find_coupon_by_code(code).discount_for(quantity * price)
    _order(order_placer, outcome, [(product_id, quantity, price)], discount=discount, coupon_code=code)


@when("the order is cancelled")
def _(outcome):
    current_domain.process(CancelOrder(order_id=outcome["order_id"]), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.parse("the order is {status}"))
def _(outcome, status):
    assert outcome["error"] is None
    assert current_domain.repository_for(Order).get(outcome["order_id"]).status == status


@then(parsers.parse("the last order is rejected with {code}"))
def _(outcome, code):
    assert outcome["error"] is not None
    assert outcome["error"].code == code


@then(parsers.parse('"{name}" has {available:d} units available and {reserved:d} reserved'))
def _(catalog, name, available, reserved):
    inventory = current_domain.repository_for(Inventory).get_for_product(catalog[name][0])
    assert inventory.quantity == available
    assert inventory.reserved_quantity == reserved


@then(parsers.parse('coupon "{code}" has been used {count:d} time'))
def _(code, count):
    assert coupon_usage_stats(find_coupon_by_code(code).id)["total_usages"] == count
