"""Tests for minor-unit money conversion."""

from decimal import Decimal

import pytest
from protean.exceptions import ValidationError
from storefront.shared.money import to_decimal, to_minor_units


@pytest.mark.parametrize(
    "amount,expected",
    [
        (Decimal("49.99"), 4999),
        ("10", 1000),
        (7, 700),
        (Decimal("0.005"), 1),
        (0.1, 10),
        (None, 0),
    ],
)
def test_to_minor_units(amount, expected):
    assert to_minor_units(amount) == expected


@pytest.mark.parametrize("amount", ["ten", "NaN", object()])
def test_to_minor_units_rejects_garbage(amount):
    with pytest.raises(ValidationError) as exc:
        to_minor_units(amount, field="unit_price")
    assert "unit_price" in exc.value.messages


def test_to_decimal_has_two_places():
    assert to_decimal(4999) == Decimal("49.99")
    assert str(to_decimal(1000)) == "10.00"
    assert to_decimal(None) == Decimal("0.00")
