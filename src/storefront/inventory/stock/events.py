"""Domain events for stock movements.

Raised whenever a product's counters change, whether by fulfillment, manual
adjustment or catalogue administration. Delivered to the admin channel.
"""

from protean.fields import DateTime, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="StockMovement")
class InventoryChanged:
    """The stock of a product changed.

    ``new_stock`` is the aggregate across all sizes after the change;
    ``size``/``size_stock`` identify the counter that moved, when only one did.
    """

    __version__ = 1

    product_id = Integer(required=True)
    product_name = String(required=True)
    new_stock = Integer(required=True)
    size = String()
    size_stock = Integer()
    reason = String(required=True)  # fulfillment, adjustment, created, updated, deleted
    reference = String()
    changed_at = DateTime(required=True)
