"""Inventory management — initialize, adjust and restock stock records."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import get_setting, storefront
from storefront.inventory.stock.inventory import Inventory
from storefront.shared.errors import ConflictError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Inventory")
class InitializeInventory:
    product_id: Identifier(required=True)
    quantity: Integer(default=0, min_value=0)
    low_stock_alert: Integer(min_value=0)


@storefront.command(part_of="Inventory")
class UpdateInventory:
    product_id: Identifier(required=True)
    quantity: Integer(min_value=0)
    low_stock_alert: Integer(min_value=0)


@storefront.command(part_of="Inventory")
class RestockInventory:
    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)
    reason: String(max_length=100)


def initialize_inventory(product_id, quantity=0, low_stock_alert=None):
    """Create the stock record for a product inside the caller's unit of work."""
    repo = current_domain.repository_for(Inventory)
    if repo.find_for_product(product_id) is not None:
        raise ConflictError(
            {"product_id": [f"Inventory already exists for product {product_id}"]},
            code="INVENTORY_EXISTS",
        )

    if low_stock_alert is None:
        low_stock_alert = get_setting("default_low_stock_alert", 10)

    inventory = Inventory.initialize(product_id, quantity=quantity or 0, low_stock_alert=low_stock_alert)
    repo.add(inventory)
    logger.info("inventory_initialized", product_id=str(product_id), quantity=inventory.quantity)
    return inventory


@storefront.command_handler(part_of=Inventory)
class ManageInventoryHandler:
    @handle(InitializeInventory)
    def initialize(self, command):
        from storefront.catalogue.product.product import Product

        current_domain.repository_for(Product).get(command.product_id)
        inventory = initialize_inventory(command.product_id, command.quantity, command.low_stock_alert)
        return str(inventory.id)

    @handle(UpdateInventory)
    def update(self, command):
        repo = current_domain.repository_for(Inventory)
        repo.lock_for_products([command.product_id])
        inventory = repo.get_for_product(command.product_id)
        inventory.adjust(quantity=command.quantity, low_stock_alert=command.low_stock_alert)
        repo.add(inventory)
        logger.info(
            "inventory_adjusted",
            product_id=command.product_id,
            quantity=inventory.quantity,
            low_stock_alert=inventory.low_stock_alert,
        )
        return str(inventory.id)

    @handle(RestockInventory)
    def restock(self, command):
        repo = current_domain.repository_for(Inventory)
        repo.lock_for_products([command.product_id])
        inventory = repo.get_for_product(command.product_id)
        inventory.restock(command.quantity, reason=command.reason)
        repo.add(inventory)
        logger.info("inventory_restocked", product_id=command.product_id, quantity=command.quantity)
        return str(inventory.id)
