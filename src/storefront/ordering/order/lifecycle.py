"""Order lifecycle — status changes, cancellation, refunds, payment status and deletion.

Stock follows the order inside the same unit of work:
    SHIPPED              reserved units are committed (leave the warehouse)
    CANCELLED / REFUNDED reservations are released, or shipped units restocked
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.inventory.stock.inventory import Inventory
from storefront.ordering.order.order import Order, OrderStatus
from storefront.shared.errors import BusinessRuleError
from storefront.shared.query import lock_rows
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class ChangeOrderStatus:
    order_id: Identifier(required=True)
    status: String(required=True, max_length=20)
    reason: String(max_length=500)


@storefront.command(part_of="Order")
class CancelOrder:
    order_id: Identifier(required=True)
    reason: String(max_length=500)


@storefront.command(part_of="Order")
class RefundOrder:
    order_id: Identifier(required=True)
    reason: String(max_length=500)


@storefront.command(part_of="Order")
class UpdatePaymentStatus:
    order_id: Identifier(required=True)
    payment_status: String(required=True, max_length=20)


@storefront.command(part_of="Order")
class DeleteOrder:
    order_id: Identifier(required=True)


def _load_order(order_id):
    """Fetch an order with its row held until the unit of work ends."""
    repo = current_domain.repository_for(Order)
    lock_rows(repo, "id", [order_id])
    return repo, repo.get(order_id)


def _commit_stock(order):
    repo = current_domain.repository_for(Inventory)
    repo.lock_for_products(order.stock_by_product())
    for product_id, quantity in order.stock_by_product().items():
        inventory = repo.get_for_product(product_id)
        inventory.commit_reserved(quantity)
        repo.add(inventory)


def _restore_stock(order, was_committed):
    """Give an order's units back: release the reservation, or restock after shipment."""
    repo = current_domain.repository_for(Inventory)
    repo.lock_for_products(order.stock_by_product())
    for product_id, quantity in order.stock_by_product().items():
        inventory = repo.get_for_product(product_id)
        if was_committed:
            inventory.restock(quantity, reason=f"Order {order.order_number} {order.status.lower()}")
        else:
            inventory.release(quantity)
        repo.add(inventory)


def _cancel(order, reason):
    was_committed = order.stock_committed
    order.cancel(reason)
    _restore_stock(order, was_committed)


def _refund(order, reason):
    was_committed = order.stock_committed
    order.refund(reason)
    _restore_stock(order, was_committed)


@storefront.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(ChangeOrderStatus)
    def change_status(self, command):
        try:
            target = OrderStatus(command.status)
        except ValueError as exc:
            raise BusinessRuleError({"status": [f"Unknown order status {command.status}"]}) from exc

        repo, order = _load_order(command.order_id)
        previous = order.status

        if target == OrderStatus.CONFIRMED:
            order.confirm()
        elif target == OrderStatus.PROCESSING:
            order.start_processing()
        elif target == OrderStatus.SHIPPED:
            order.ship()
            _commit_stock(order)
        elif target == OrderStatus.DELIVERED:
            order.deliver()
        elif target == OrderStatus.CANCELLED:
            _cancel(order, command.reason)
        elif target == OrderStatus.REFUNDED:
            _refund(order, command.reason)
        else:
            # PENDING is only ever an initial state
            order._assert_can_transition(target)

        repo.add(order)
        logger.info("order_status_changed", order_id=str(order.id), previous=previous, status=order.status)
        return str(order.id)

    @handle(CancelOrder)
    def cancel_order(self, command):
        repo, order = _load_order(command.order_id)
        _cancel(order, command.reason)
        repo.add(order)
        logger.info("order_cancelled", order_id=str(order.id), reason=command.reason)
        return str(order.id)

    @handle(RefundOrder)
    def refund_order(self, command):
        repo, order = _load_order(command.order_id)
        _refund(order, command.reason)
        repo.add(order)
        logger.info("order_refunded", order_id=str(order.id), reason=command.reason)
        return str(order.id)

    @handle(UpdatePaymentStatus)
    def update_payment_status(self, command):
        repo, order = _load_order(command.order_id)
        order.update_payment_status(command.payment_status)
        repo.add(order)
        logger.info("payment_status_changed", order_id=str(order.id), payment_status=order.payment_status)
        return str(order.id)

    @handle(DeleteOrder)
    def delete_order(self, command):
        """Remove an order. Orders still holding stock are cancelled first so their units come back."""
        repo, order = _load_order(command.order_id)

        if order.holds_stock:
            _cancel(order, "Order deleted")
            repo.add(order)

        repo._dao.delete(order)
        logger.info("order_deleted", order_id=str(order.id), order_number=order.order_number)
