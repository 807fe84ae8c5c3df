"""Category aggregate root for product categorization."""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Identifier, String, Text

from storefront.catalogue.category.events import CategoryCreated, CategoryUpdated
from storefront.domain import storefront
from storefront.shared.errors import BusinessRuleError


@storefront.aggregate
class Category:
    """A node in the category tree. Roots have no parent."""

    name: String(required=True, max_length=100)
    description: Text()
    parent_id: Identifier()
    is_active: Boolean(default=True)
    created_at: DateTime(default=lambda: datetime.now(UTC))
    updated_at: DateTime(default=lambda: datetime.now(UTC))

    @classmethod
    def create(cls, name, description=None, parent_id=None):
        category = cls(name=name, description=description, parent_id=parent_id)
        category.raise_(CategoryCreated(category_id=category.id, name=name, parent_id=parent_id))
        return category

    def update_details(self, name=None, description=None, is_active=None):
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if is_active is not None:
            self.is_active = is_active
        self._touch()

    def move_under(self, parent_id):
        """Re-parent this category. ``None`` makes it a root."""
        if parent_id is not None and str(parent_id) == str(self.id):
            raise BusinessRuleError({"parent_id": ["A category cannot be its own parent"]}, code="CATEGORY_CYCLE")
        self.parent_id = parent_id
        self._touch()

    def _touch(self):
        self.updated_at = datetime.now(UTC)
        self.raise_(CategoryUpdated(category_id=self.id, name=self.name, parent_id=self.parent_id))


def assert_acyclic(category_id, new_parent_id, lookup):
    """Walk up from ``new_parent_id`` and fail if the chain reaches ``category_id``.

    ``lookup`` maps a category id to its parent id.
    """
    seen = set()
    current = new_parent_id
    while current:
        current = str(current)
        if current == str(category_id) or current in seen:
            raise BusinessRuleError(
                {"parent_id": ["Moving the category there would create a cycle"]},
                code="CATEGORY_CYCLE",
            )
        seen.add(current)
        current = lookup(current)
