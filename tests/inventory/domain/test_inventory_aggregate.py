"""Tests for the Inventory aggregate — reservations, releases and commits."""

import pytest
from protean.exceptions import ValidationError
from storefront.inventory.stock.events import LowStockDetected, StockReserved
from storefront.inventory.stock.inventory import Inventory
from storefront.shared.errors import InsufficientStockError


def _inventory(quantity=10, low_stock_alert=2):
    inventory = Inventory.initialize("prod-001", quantity=quantity, low_stock_alert=low_stock_alert)
    inventory._events.clear()
    return inventory


class TestInitialize:
    def test_starts_with_nothing_reserved(self):
        inventory = Inventory.initialize("prod-001", quantity=25, low_stock_alert=5)
        assert inventory.quantity == 25
        assert inventory.reserved_quantity == 0
        assert inventory.low_stock_alert == 5
        assert len(inventory._events) == 1

    def test_negative_initial_quantity_rejected(self):
        with pytest.raises(ValidationError):
            Inventory.initialize("prod-001", quantity=-1)


class TestReserve:
    def test_moves_units_to_reserved(self):
        inventory = _inventory()
        inventory.reserve(4)
        assert inventory.quantity == 6
        assert inventory.reserved_quantity == 4
        assert isinstance(inventory._events[0], StockReserved)

    def test_reserving_everything_leaves_zero(self):
        inventory = _inventory(quantity=3, low_stock_alert=0)
        inventory.reserve(3)
        assert inventory.quantity == 0
        assert inventory.reserved_quantity == 3

    def test_over_reservation_raises_and_changes_nothing(self):
        inventory = _inventory(quantity=5)
        with pytest.raises(InsufficientStockError) as exc:
            inventory.reserve(6, product_name="Basmati Rice")

        assert exc.value.code == "INSUFFICIENT_STOCK"
        assert exc.value.requested == 6
        assert exc.value.available == 5
        assert "Basmati Rice" in exc.value.message
        assert inventory.quantity == 5
        assert inventory.reserved_quantity == 0
        assert inventory._events == []

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_non_positive_quantity_rejected(self, quantity):
        with pytest.raises(ValidationError):
            _inventory().reserve(quantity)

    def test_crossing_alert_threshold_raises_low_stock_event(self):
        inventory = _inventory(quantity=5, low_stock_alert=2)
        inventory.reserve(3)
        assert any(isinstance(event, LowStockDetected) for event in inventory._events)

    def test_above_threshold_raises_no_low_stock_event(self):
        inventory = _inventory(quantity=10, low_stock_alert=2)
        inventory.reserve(1)
        assert not any(isinstance(event, LowStockDetected) for event in inventory._events)


class TestReleaseAndCommit:
    def test_release_returns_units(self):
        inventory = _inventory()
        inventory.reserve(4)
        inventory.release(4)
        assert inventory.quantity == 10
        assert inventory.reserved_quantity == 0

    def test_cannot_release_more_than_reserved(self):
        inventory = _inventory()
        inventory.reserve(2)
        with pytest.raises(ValidationError):
            inventory.release(3)
        assert inventory.reserved_quantity == 2

    def test_commit_drops_reserved_units(self):
        inventory = _inventory()
        inventory.reserve(4)
        inventory.commit_reserved(4)
        assert inventory.quantity == 6
        assert inventory.reserved_quantity == 0

    def test_cannot_commit_more_than_reserved(self):
        inventory = _inventory()
        with pytest.raises(ValidationError):
            inventory.commit_reserved(1)


class TestRestockAndAdjust:
    def test_restock_adds_units(self):
        inventory = _inventory(quantity=1)
        inventory.restock(9, reason="Supplier delivery")
        assert inventory.quantity == 10

    def test_adjust_overwrites_quantity_and_alert(self):
        inventory = _inventory()
        inventory.adjust(quantity=3, low_stock_alert=5)
        assert inventory.quantity == 3
        assert inventory.low_stock_alert == 5
        assert inventory.is_low_stock

    def test_adjust_rejects_negative_quantity(self):
        with pytest.raises(ValidationError):
            _inventory().adjust(quantity=-1)

    def test_is_low_stock_is_inclusive(self):
        assert _inventory(quantity=2, low_stock_alert=2).is_low_stock
        assert not _inventory(quantity=3, low_stock_alert=2).is_low_stock
