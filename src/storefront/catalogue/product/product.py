"""Product aggregate root — catalogue details and pricing.

A product's stock lives in its ``InventoryItem`` counters, one per size,
and is read from there; the product itself stores no quantity.
"""

from protean.fields import DateTime, Float, Integer, String, Text

from storefront.domain import storefront
from storefront.shared.clock import utc_now

EDITABLE_FIELDS = ("name", "brand", "category", "price", "discount", "description", "image_url")


@storefront.aggregate
class Product:
    number: Integer(required=True, unique=True)
    name: String(required=True, max_length=255)
    brand: String(max_length=100, default="")
    category: String(max_length=100, default="")
    price: Float(required=True, min_value=0.0)
    discount: Float(default=0.0, min_value=0.0, max_value=100.0)
    description: Text(default="")
    image_url: String(max_length=500, default="")
    created_at: DateTime(default=utc_now)
    updated_at: DateTime(default=utc_now)

    @property
    def final_price(self) -> float:
        return round(self.price * (1 - (self.discount or 0.0) / 100), 2)

    def update_details(self, **changes):
        for field in EDITABLE_FIELDS:
            if changes.get(field) is not None:
                setattr(self, field, changes[field])
        self.updated_at = utc_now()
