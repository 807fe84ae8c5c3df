"""Coupon administration — create, revise, (de)activate and delete coupons."""

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.coupons.coupon.coupon import Coupon, CouponType, normalize_code
from storefront.coupons.coupon.engine import get_coupon
from storefront.coupons.coupon.usage import CouponUsage
from storefront.domain import storefront
from storefront.shared.errors import BusinessRuleError, ConflictError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Coupon")
class CreateCoupon:
    coupon_type: String(required=True, max_length=20)
    code: String(max_length=50)
    name: String(max_length=100)
    description: Text()
    discount_amount: Integer(min_value=1)
    min_order_amount: Integer(min_value=0)
    product_id: Identifier()


@storefront.command(part_of="Coupon")
class UpdateCoupon:
    coupon_id: Identifier(required=True)
    code: String(max_length=50)
    name: String(max_length=100)
    description: Text()
    discount_amount: Integer(min_value=1)
    min_order_amount: Integer(min_value=0)
    product_id: Identifier()


@storefront.command(part_of="Coupon")
class ActivateCoupon:
    coupon_id: Identifier(required=True)


@storefront.command(part_of="Coupon")
class DeactivateCoupon:
    coupon_id: Identifier(required=True)


@storefront.command(part_of="Coupon")
class DeleteCoupon:
    coupon_id: Identifier(required=True)


def _missing(command, *fields):
    return [field for field in fields if getattr(command, field) in (None, "")]


def _assert_code_free(code, coupon_id=None):
    clashes = [
        coupon
        for coupon in current_domain.repository_for(Coupon)._dao.query.filter(code=normalize_code(code)).all().items
        if str(coupon.id) != str(coupon_id)
    ]
    if clashes:
        raise ConflictError(
            {"code": [f"Coupon code {normalize_code(code)} already exists"]},
            code="DUPLICATE_COUPON_CODE",
        )


def _assert_product_available(product_id):
    products = current_domain.repository_for(Product)._dao.query.filter(id=str(product_id)).all().items
    if not products or not products[0].is_active:
        raise BusinessRuleError(
            {"product_id": [f"Product {product_id} not found or inactive"]},
            code="PRODUCT_NOT_AVAILABLE",
        )


@storefront.command_handler(part_of=Coupon)
class ManageCouponHandler:
    @handle(CreateCoupon)
    def create_coupon(self, command):
        if command.coupon_type == CouponType.DISCOUNT_CODE.value:
            missing = _missing(command, "code", "discount_amount", "min_order_amount")
            if missing:
                raise BusinessRuleError(
                    {field: ["is required for discount coupons"] for field in missing},
                    code="MISSING_REQUIRED_FIELDS",
                )
            _assert_code_free(command.code)
            coupon = Coupon.create_discount_code(
                code=command.code,
                discount_amount=command.discount_amount,
                min_order_amount=command.min_order_amount,
                name=command.name,
                description=command.description,
            )
        elif command.coupon_type == CouponType.ADDITIONAL_ITEM.value:
            missing = _missing(command, "product_id", "min_order_amount")
            if missing:
                raise BusinessRuleError(
                    {field: ["is required for free-item coupons"] for field in missing},
                    code="MISSING_REQUIRED_FIELDS",
                )
            _assert_product_available(command.product_id)
            if command.code:
                _assert_code_free(command.code)
            coupon = Coupon.create_additional_item(
                product_id=command.product_id,
                min_order_amount=command.min_order_amount,
                code=command.code,
                name=command.name,
                description=command.description,
            )
        else:
            raise BusinessRuleError(
                {"coupon_type": [f"Unknown coupon type {command.coupon_type}"]},
                code="INVALID_COUPON_TYPE",
            )

        current_domain.repository_for(Coupon).add(coupon)
        logger.info("coupon_created", coupon_id=str(coupon.id), coupon_type=coupon.coupon_type, code=coupon.code)
        return str(coupon.id)

    @handle(UpdateCoupon)
    def update_coupon(self, command):
        coupon = get_coupon(command.coupon_id)
        if command.code:
            _assert_code_free(command.code, coupon.id)
        if command.product_id and not coupon.is_discount_code:
            _assert_product_available(command.product_id)

        coupon.revise(
            code=command.code,
            name=command.name,
            description=command.description,
            discount_amount=command.discount_amount,
            product_id=command.product_id,
            min_order_amount=command.min_order_amount,
        )
        current_domain.repository_for(Coupon).add(coupon)
        return str(coupon.id)

    @handle(ActivateCoupon)
    def activate_coupon(self, command):
        coupon = get_coupon(command.coupon_id)
        coupon.activate()
        current_domain.repository_for(Coupon).add(coupon)

    @handle(DeactivateCoupon)
    def deactivate_coupon(self, command):
        coupon = get_coupon(command.coupon_id)
        coupon.deactivate()
        current_domain.repository_for(Coupon).add(coupon)

    @handle(DeleteCoupon)
    def delete_coupon(self, command):
        coupon = get_coupon(command.coupon_id)
        usages = current_domain.repository_for(CouponUsage)._dao.query.filter(coupon_id=str(coupon.id)).all()
        if usages.items:
            raise ConflictError(
                {"coupon": ["Cannot delete coupon that has been used. Consider deactivating it instead."]},
                code="COUPON_IN_USE",
            )

        current_domain.repository_for(Coupon)._dao.delete(coupon)
        logger.info("coupon_deleted", coupon_id=str(coupon.id))
