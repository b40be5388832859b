"""Domain events for the Order aggregate.

Both events go to the admin channel and to the owning customer's channel.
"""

from protean.fields import DateTime, Float, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderCreated:
    """A customer placed a new order."""

    __version__ = 1

    order_id = Integer(required=True)
    code = String(required=True)
    user_id = Integer(required=True)
    customer_name = String(required=True)
    total = Float(required=True)
    status = String(required=True)
    created_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """An administrator moved an order to a new status."""

    __version__ = 1

    order_id = Integer(required=True)
    code = String(required=True)
    user_id = Integer(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)
