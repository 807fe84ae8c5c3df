"""Tests for order submission checks — customer details, lines and pricing arithmetic."""

import pytest
from storefront.ordering.order.order import validate_submission
from storefront.shared.errors import BusinessRuleError

_CUSTOMER = {"full_name": "Asha Rao", "phone": "9876543210"}
_LINES = [{"product_id": "prod-001", "quantity": 2, "unit_price": 5000}]


def _pricing(**overrides):
    pricing = {"item_total": 10000, "delivery_fee": 500, "discount": 0, "grand_total": 10500}
    pricing.update(overrides)
    return pricing


def _errors(customer=_CUSTOMER, lines=_LINES, pricing=None):
    with pytest.raises(BusinessRuleError) as exc:
        validate_submission(customer, lines, pricing or _pricing())
    assert exc.value.code == "VALIDATION_ERROR"
    return exc.value.messages


def test_valid_submission_passes():
    validate_submission(_CUSTOMER, _LINES, _pricing())


def test_discount_is_subtracted():
    validate_submission(_CUSTOMER, _LINES, _pricing(discount=1000, grand_total=9500))


class TestCustomer:
    def test_full_name_required(self):
        assert "full_name" in _errors(customer={"full_name": "  ", "phone": "9876543210"})

    @pytest.mark.parametrize("phone", ["", "12345", "98765432101", "98765-4321"])
    def test_phone_must_be_ten_digits(self, phone):
        assert "phone" in _errors(customer={"full_name": "Asha Rao", "phone": phone})

    def test_all_problems_are_reported(self):
        messages = _errors(customer={}, lines=[])
        assert {"full_name", "phone", "cart_items"} <= set(messages)


class TestLines:
    def test_at_least_one_line(self):
        assert "cart_items" in _errors(lines=[])

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, None])
    def test_quantity_must_be_positive_integer(self, quantity):
        lines = [{"product_id": "prod-001", "quantity": quantity, "unit_price": 5000}]
        assert "cart_items.0.quantity" in _errors(lines=lines)

    def test_unit_price_cannot_be_negative(self):
        lines = [{"product_id": "prod-001", "quantity": 1, "unit_price": -1}]
        assert "cart_items.0.unit_price" in _errors(lines=lines)


class TestPricing:
    def test_item_total_must_match_lines(self):
        messages = _errors(pricing=_pricing(item_total=9000, grand_total=9500))
        assert "item_total" in messages

    def test_grand_total_must_add_up(self):
        assert "grand_total" in _errors(pricing=_pricing(grand_total=10000))

    def test_grand_total_must_be_positive(self):
        lines = [{"product_id": "prod-001", "quantity": 1, "unit_price": 0}]
        assert "grand_total" in _errors(lines=lines, pricing=_pricing(item_total=0, delivery_fee=0, grand_total=0))

    @pytest.mark.parametrize("field", ["delivery_fee", "discount"])
    def test_negative_adjustments_rejected(self, field):
        assert field in _errors(pricing=_pricing(**{field: -100}))
