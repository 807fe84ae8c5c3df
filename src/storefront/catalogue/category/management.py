"""Category management — commands and handlers."""

from protean import handle
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category.category import Category, assert_acyclic
from storefront.catalogue.product.product import Product
from storefront.domain import get_setting, storefront
from storefront.shared.errors import ConflictError, NotFoundError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    description: Text()
    parent_id: Identifier()


@storefront.command(part_of="Category")
class UpdateCategory:
    category_id: Identifier(required=True)
    name: String(max_length=100)
    description: Text()
    parent_id: Identifier()
    make_root: Boolean(default=False)
    is_active: Boolean()


@storefront.command(part_of="Category")
class DeleteCategory:
    category_id: Identifier(required=True)


def _get_parent(repo, parent_id):
    parent = repo._dao.query.filter(id=parent_id).all().items
    if not parent:
        raise NotFoundError({"parent_id": [f"Parent category {parent_id} does not exist"]}, code="CATEGORY_NOT_FOUND")
    return parent[0]


@storefront.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)
        if command.parent_id:
            _get_parent(repo, command.parent_id)

        category = Category.create(
            name=command.name,
            description=command.description,
            parent_id=command.parent_id,
        )
        repo.add(category)
        logger.info("category_created", category_id=str(category.id), parent_id=command.parent_id)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        category.update_details(
            name=command.name,
            description=command.description,
            is_active=command.is_active,
        )

        if command.make_root:
            category.move_under(None)
        elif command.parent_id and command.parent_id != category.parent_id:
            _get_parent(repo, command.parent_id)
            if get_setting("enforce_category_acyclic", True):
                assert_acyclic(category.id, command.parent_id, lambda cid: repo.get(cid).parent_id)
            category.move_under(command.parent_id)

        repo.add(category)
        return str(category.id)

    @handle(DeleteCategory)
    def delete_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        if repo._dao.query.filter(parent_id=str(category.id)).all().items:
            raise ConflictError({"category": ["Category has subcategories"]}, code="CATEGORY_IN_USE")
        products = current_domain.repository_for(Product)._dao.query.filter(category_id=str(category.id)).all()
        if products.items:
            raise ConflictError({"category": ["Category still has products"]}, code="CATEGORY_IN_USE")

        repo._dao.delete(category)
        logger.info("category_deleted", category_id=str(category.id))
