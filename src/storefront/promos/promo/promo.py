"""Promo aggregate — storefront banners."""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Integer, String, Text

from storefront.domain import storefront


@storefront.aggregate
class Promo:
    """A promotional banner. ``display_order`` is stored as given and never renumbered."""

    image_url: String(required=True, max_length=500)
    title: String(max_length=200)
    description: Text()
    link_url: String(max_length=500)
    is_active: Boolean(default=True)
    display_order: Integer(default=0, min_value=0)
    created_at: DateTime(default=lambda: datetime.now(UTC))
    updated_at: DateTime(default=lambda: datetime.now(UTC))

    def update_details(self, **changes):
        for field, value in changes.items():
            if value is not None:
                setattr(self, field, value)
        self.updated_at = datetime.now(UTC)
