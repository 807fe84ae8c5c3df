"""Inventory lookups used by order placement and the admin screens."""

from storefront.domain import storefront
from storefront.inventory.stock.inventory import Inventory
from storefront.shared.errors import InventoryNotFound
from storefront.shared.query import fetch_all, lock_rows


@storefront.repository(part_of=Inventory)
class InventoryRepository:
    def find_for_product(self, product_id) -> Inventory | None:
        items = self._dao.query.filter(product_id=str(product_id)).all().items
        return items[0] if items else None

    def get_for_product(self, product_id) -> Inventory:
        """Inventory for ``product_id``; missing rows are an error, never created."""
        inventory = self.find_for_product(product_id)
        if inventory is None:
            raise InventoryNotFound(product_id)
        return inventory

    def lock_for_products(self, product_ids) -> None:
        """Hold the inventory rows of ``product_ids`` until the unit of work ends."""
        lock_rows(self, "product_id", product_ids)

    def low_stock_items(self) -> list[Inventory]:
        """Every inventory whose available quantity is at or below its alert threshold."""
        return [item for item in fetch_all(self) if item.is_low_stock]
