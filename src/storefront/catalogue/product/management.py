"""Product management — commands and handlers."""

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category.category import Category
from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.inventory.stock.inventory import Inventory
from storefront.inventory.stock.management import initialize_inventory
from storefront.shared.errors import ConflictError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=200)
    description: Text()
    price: Integer(required=True, min_value=0)
    category_id: Identifier()
    image_url: String(max_length=500)
    is_active: Boolean(default=True)
    initial_stock: Integer(min_value=0)
    low_stock_alert: Integer(min_value=0)


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=200)
    description: Text()
    price: Integer(min_value=0)
    category_id: Identifier()
    image_url: String(max_length=500)


@storefront.command(part_of="Product")
class ActivateProduct:
    product_id: Identifier(required=True)


@storefront.command(part_of="Product")
class DeactivateProduct:
    product_id: Identifier(required=True)


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        if command.category_id:
            current_domain.repository_for(Category).get(command.category_id)

        product = Product.create(
            name=command.name,
            price=command.price,
            description=command.description,
            category_id=command.category_id,
            image_url=command.image_url,
            is_active=command.is_active,
        )
        current_domain.repository_for(Product).add(product)

        if command.initial_stock is not None:
            initialize_inventory(product.id, command.initial_stock, command.low_stock_alert)

        logger.info("product_created", product_id=str(product.id), price=product.price)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        if command.category_id:
            current_domain.repository_for(Category).get(command.category_id)

        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            category_id=command.category_id,
            image_url=command.image_url,
        )
        repo.add(product)
        return str(product.id)

    @handle(ActivateProduct)
    def activate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.activate()
        repo.add(product)

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.deactivate()
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        inventory_repo = current_domain.repository_for(Inventory)
        inventory = inventory_repo.find_for_product(product.id)
        if inventory is not None:
            if inventory.reserved_quantity > 0:
                raise ConflictError(
                    {"product": ["Product has stock reserved for open orders. Deactivate it instead."]},
                    code="PRODUCT_IN_USE",
                )
            inventory_repo._dao.delete(inventory)

        repo._dao.delete(product)
        logger.info("product_deleted", product_id=str(product.id))
