"""Logs low-stock warnings as inventory mutations cross the alert threshold."""

from protean.utils.mixins import handle

from storefront.domain import storefront
from storefront.inventory.stock.events import LowStockDetected
from storefront.inventory.stock.inventory import Inventory
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.event_handler(part_of=Inventory)
class LowStockAlertHandler:
    @handle(LowStockDetected)
    def on_low_stock(self, event: LowStockDetected) -> None:
        logger.warning(
            "low_stock_detected",
            product_id=str(event.product_id),
            available=event.available,
            low_stock_alert=event.low_stock_alert,
        )
