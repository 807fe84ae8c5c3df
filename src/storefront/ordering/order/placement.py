"""Order placement — the one command that touches orders, stock and coupons together.

Everything in ``PlaceOrderHandler.place_order`` runs inside a single protean
unit of work. Checks happen first and every aggregate is mutated in memory
before anything is added to a repository, so a failing check leaves no
Order, OrderItem, Inventory or CouponUsage change behind.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.coupons.coupon.engine import redeem_coupon, validate_coupon
from storefront.domain import get_setting, storefront
from storefront.inventory.stock.inventory import Inventory
from storefront.ordering.order.order import Order, validate_submission
from storefront.shared.errors import BusinessRuleError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_info: Text(required=True)  # JSON object
    cart_items: Text(required=True)  # JSON list of {product_id, quantity, unit_price}
    item_total: Integer(required=True)
    delivery_fee: Integer(default=0)
    discount: Integer(default=0)
    grand_total: Integer(required=True)
    coupon_code: String(max_length=50)
    user_id: Identifier()
    notes: Text()


def _load_json(raw, field):
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError({field: ["Malformed JSON payload"]}) from exc


def _resolve_products(lines):
    """Snapshot product names, refusing unknown or inactive products."""
    repo = current_domain.repository_for(Product)
    for line in lines:
        matches = repo._dao.query.filter(id=str(line["product_id"])).all().items
        if not matches:
            raise BusinessRuleError(
                {"product_id": [f"Product {line['product_id']} does not exist"]},
                code="PRODUCT_NOT_AVAILABLE",
            )
        product = matches[0]
        if not product.is_active:
            raise BusinessRuleError(
                {"product_id": [f"{product.name} is no longer available"]},
                code="PRODUCT_NOT_AVAILABLE",
            )
        line["product_name"] = product.name


def _reserve_stock(lines):
    """Reserve every line against its inventory, in memory only.

    Returns the touched inventories; the caller persists them once all
    reservations succeeded.
    """
    repo = current_domain.repository_for(Inventory)
    needed = {}
    names = {}
    for line in lines:
        product_id = str(line["product_id"])
        needed[product_id] = needed.get(product_id, 0) + line["quantity"]
        names[product_id] = line["product_name"]

    repo.lock_for_products(needed)
    inventories = []
    for product_id, quantity in needed.items():
        inventory = repo.get_for_product(product_id)
        inventory.reserve(quantity, product_name=names[product_id])
        inventories.append(inventory)
    return inventories


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        customer_info = _load_json(command.customer_info, "customer_info")
        lines = [dict(line) for line in _load_json(command.cart_items, "cart_items") or []]
        pricing = {
            "item_total": command.item_total,
            "delivery_fee": command.delivery_fee or 0,
            "discount": command.discount or 0,
            "grand_total": command.grand_total,
        }

        # 1. Shape and arithmetic
        validate_submission(customer_info, lines, pricing)
        _resolve_products(lines)

        # 2. Coupon
        validation = None
        if command.coupon_code:
            validation = validate_coupon(command.coupon_code, pricing["item_total"])
            if pricing["discount"] != validation.discount:
                raise BusinessRuleError(
                    {"discount": [f"Discount must be {validation.discount} for coupon {validation.coupon.code}"]},
                    code="DISCOUNT_MISMATCH",
                )
            if validation.free_product is not None:
                lines.append(
                    {
                        "product_id": str(validation.free_product.id),
                        "product_name": validation.free_product.name,
                        "quantity": 1,
                        "unit_price": 0,
                        "is_free_item": True,
                    }
                )
        elif pricing["discount"]:
            raise BusinessRuleError(
                {"discount": ["A discount requires a valid coupon code"]},
                code="DISCOUNT_MISMATCH",
            )

        # 3. Stock
        inventories = _reserve_stock(lines)

        # 4. Writes
        order = Order.place(
            customer_info=customer_info,
            lines=lines,
            pricing=pricing,
            user_id=command.user_id,
            coupon_id=str(validation.coupon.id) if validation else None,
            coupon_code=validation.coupon.code if validation else None,
            notes=command.notes,
            estimated_delivery_days=get_setting("estimated_delivery_days", 5),
        )
        current_domain.repository_for(Order).add(order)

        inventory_repo = current_domain.repository_for(Inventory)
        for inventory in inventories:
            inventory_repo.add(inventory)

        if validation is not None:
            redeem_coupon(validation.coupon, order.id, validation.discount, user_id=command.user_id)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            order_number=order.order_number,
            items=len(order.items),
            grand_total=order.pricing.grand_total,
            coupon_code=order.coupon_code,
        )
        return str(order.id)
