"""Grain aggregate — loose grains sold by weight."""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Integer, String, Text

from storefront.domain import storefront


@storefront.aggregate
class Grain:
    name: String(required=True, max_length=100, unique=True)
    description: Text()
    price: Integer(required=True, min_value=0)
    unit: String(max_length=20, default="kg")
    is_active: Boolean(default=True)
    created_at: DateTime(default=lambda: datetime.now(UTC))
    updated_at: DateTime(default=lambda: datetime.now(UTC))

    def update_details(self, name=None, description=None, price=None, unit=None, is_active=None):
        for field, value in (
            ("name", name),
            ("description", description),
            ("price", price),
            ("unit", unit),
            ("is_active", is_active),
        ):
            if value is not None:
                setattr(self, field, value)
        self.updated_at = datetime.now(UTC)
