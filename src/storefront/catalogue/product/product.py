"""Product aggregate — something the store sells."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from storefront.catalogue.product.events import ProductAvailabilityChanged, ProductCreated, ProductUpdated
from storefront.domain import storefront


@storefront.aggregate
class Product:
    """A sellable product. ``price`` is held in minor units (cents)."""

    name: String(required=True, max_length=200)
    description: Text()
    price: Integer(required=True, min_value=0)
    category_id: Identifier()
    image_url: String(max_length=500)
    is_active: Boolean(default=True)
    created_at: DateTime(default=lambda: datetime.now(UTC))
    updated_at: DateTime(default=lambda: datetime.now(UTC))

    @classmethod
    def create(cls, name, price, description=None, category_id=None, image_url=None, is_active=True):
        product = cls(
            name=name,
            price=price,
            description=description,
            category_id=category_id,
            image_url=image_url,
            is_active=is_active,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=name,
                price=price,
                category_id=category_id,
            )
        )
        return product

    def update_details(self, name=None, description=None, price=None, category_id=None, image_url=None):
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if price is not None:
            self.price = price
        if category_id is not None:
            self.category_id = category_id
        if image_url is not None:
            self.image_url = image_url
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductUpdated(
                product_id=self.id,
                name=self.name,
                price=self.price,
                category_id=self.category_id,
            )
        )

    def activate(self):
        if self.is_active:
            raise ValidationError({"is_active": ["Product is already active"]})
        self._set_availability(True)

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"is_active": ["Product is already inactive"]})
        self._set_availability(False)

    def _set_availability(self, is_active):
        self.is_active = is_active
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductAvailabilityChanged(product_id=self.id, is_active=is_active))
