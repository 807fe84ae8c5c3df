"""Domain events for the Inventory aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Inventory")
class InventoryInitialized:
    """Stock tracking started for a product."""

    __version__ = 1

    inventory_id: Identifier(required=True)
    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    low_stock_alert: Integer(required=True)


@storefront.event(part_of="Inventory")
class StockReserved:
    """Units were moved from available to reserved for an order."""

    __version__ = 1

    inventory_id: Identifier(required=True)
    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    available: Integer(required=True)
    reserved: Integer(required=True)


@storefront.event(part_of="Inventory")
class StockReleased:
    """A reservation was returned to available stock."""

    __version__ = 1

    inventory_id: Identifier(required=True)
    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    available: Integer(required=True)
    reserved: Integer(required=True)


@storefront.event(part_of="Inventory")
class StockCommitted:
    """Reserved units left the warehouse with a shipment."""

    __version__ = 1

    inventory_id: Identifier(required=True)
    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    reserved: Integer(required=True)


@storefront.event(part_of="Inventory")
class StockRestocked:
    """Units were added back to available stock."""

    __version__ = 1

    inventory_id: Identifier(required=True)
    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    available: Integer(required=True)
    reason: String(max_length=100)


@storefront.event(part_of="Inventory")
class InventoryAdjusted:
    """An administrator overwrote the stock count or alert threshold."""

    __version__ = 1

    inventory_id: Identifier(required=True)
    product_id: Identifier(required=True)
    previous_quantity: Integer(required=True)
    new_quantity: Integer(required=True)
    low_stock_alert: Integer(required=True)


@storefront.event(part_of="Inventory")
class LowStockDetected:
    """Available stock fell to or below the alert threshold."""

    __version__ = 1

    inventory_id: Identifier(required=True)
    product_id: Identifier(required=True)
    available: Integer(required=True)
    low_stock_alert: Integer(required=True)
    detected_at: DateTime(required=True)
