"""Domain events for the Product aggregate."""

from protean.fields import Boolean, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    price: Integer(required=True)
    category_id: Identifier()


@storefront.event(part_of="Product")
class ProductUpdated:
    """Product details, price or category changed."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    price: Integer(required=True)
    category_id: Identifier()


@storefront.event(part_of="Product")
class ProductAvailabilityChanged:
    """A product was activated or deactivated for sale."""

    __version__ = 1

    product_id: Identifier(required=True)
    is_active: Boolean(required=True)
