"""Inventory aggregate — available and reserved stock for one product.

Stock model:
    quantity:          units that can still be sold
    reserved_quantity: units held for orders that have not shipped yet

Placing an order moves units from ``quantity`` to ``reserved_quantity``;
cancelling moves them back, shipping drops them from ``reserved_quantity``.
Neither counter may ever go negative.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer

from storefront.domain import storefront
from storefront.inventory.stock.events import (
    InventoryAdjusted,
    InventoryInitialized,
    LowStockDetected,
    StockCommitted,
    StockReleased,
    StockReserved,
    StockRestocked,
)
from storefront.shared.errors import InsufficientStockError


@storefront.aggregate
class Inventory:
    product_id: Identifier(required=True, unique=True)
    quantity: Integer(default=0)
    reserved_quantity: Integer(default=0)
    low_stock_alert: Integer(default=10, min_value=0)
    created_at: DateTime(default=lambda: datetime.now(UTC))
    updated_at: DateTime(default=lambda: datetime.now(UTC))

    @invariant.post
    def stock_counters_are_never_negative(self):
        if self.quantity is not None and self.quantity < 0:
            raise ValidationError({"quantity": ["Available quantity cannot be negative"]})
        if self.reserved_quantity is not None and self.reserved_quantity < 0:
            raise ValidationError({"reserved_quantity": ["Reserved quantity cannot be negative"]})

    @classmethod
    def initialize(cls, product_id, quantity=0, low_stock_alert=10):
        if quantity < 0:
            raise ValidationError({"quantity": ["Initial quantity cannot be negative"]})

        inventory = cls(
            product_id=str(product_id),
            quantity=quantity,
            reserved_quantity=0,
            low_stock_alert=low_stock_alert,
        )
        inventory.raise_(
            InventoryInitialized(
                inventory_id=inventory.id,
                product_id=inventory.product_id,
                quantity=quantity,
                low_stock_alert=low_stock_alert,
            )
        )
        return inventory

    @property
    def is_low_stock(self):
        return self.quantity <= self.low_stock_alert

    def _check_low_stock(self):
        if self.is_low_stock:
            self.raise_(
                LowStockDetected(
                    inventory_id=self.id,
                    product_id=self.product_id,
                    available=self.quantity,
                    low_stock_alert=self.low_stock_alert,
                    detected_at=datetime.now(UTC),
                )
            )

    @staticmethod
    def _assert_positive(quantity):
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

    def reserve(self, quantity, product_name=None):
        """Hold ``quantity`` units for an order."""
        self._assert_positive(quantity)
        if quantity > self.quantity:
            raise InsufficientStockError(self.product_id, product_name, quantity, self.quantity)

        self.quantity -= quantity
        self.reserved_quantity += quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockReserved(
                inventory_id=self.id,
                product_id=self.product_id,
                quantity=quantity,
                available=self.quantity,
                reserved=self.reserved_quantity,
            )
        )
        self._check_low_stock()

    def release(self, quantity):
        """Return a reservation to available stock."""
        self._assert_positive(quantity)
        if quantity > self.reserved_quantity:
            raise ValidationError(
                {"reserved_quantity": [f"Cannot release {quantity} units, only {self.reserved_quantity} reserved"]}
            )

        self.reserved_quantity -= quantity
        self.quantity += quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockReleased(
                inventory_id=self.id,
                product_id=self.product_id,
                quantity=quantity,
                available=self.quantity,
                reserved=self.reserved_quantity,
            )
        )

    def commit_reserved(self, quantity):
        """Shipped units leave the reservation for good."""
        self._assert_positive(quantity)
        if quantity > self.reserved_quantity:
            raise ValidationError(
                {"reserved_quantity": [f"Cannot commit {quantity} units, only {self.reserved_quantity} reserved"]}
            )

        self.reserved_quantity -= quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockCommitted(
                inventory_id=self.id,
                product_id=self.product_id,
                quantity=quantity,
                reserved=self.reserved_quantity,
            )
        )

    def restock(self, quantity, reason=None):
        self._assert_positive(quantity)

        self.quantity += quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockRestocked(
                inventory_id=self.id,
                product_id=self.product_id,
                quantity=quantity,
                available=self.quantity,
                reason=reason,
            )
        )

    def adjust(self, quantity=None, low_stock_alert=None):
        """Administrative overwrite of the available count and/or alert threshold."""
        previous = self.quantity
        if quantity is not None:
            if quantity < 0:
                raise ValidationError({"quantity": ["Quantity cannot be negative"]})
            self.quantity = quantity
        if low_stock_alert is not None:
            if low_stock_alert < 0:
                raise ValidationError({"low_stock_alert": ["Low stock alert cannot be negative"]})
            self.low_stock_alert = low_stock_alert
        self.updated_at = datetime.now(UTC)

        self.raise_(
            InventoryAdjusted(
                inventory_id=self.id,
                product_id=self.product_id,
                previous_quantity=previous,
                new_quantity=self.quantity,
                low_stock_alert=self.low_stock_alert,
            )
        )
        self._check_low_stock()
