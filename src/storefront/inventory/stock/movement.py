"""StockMovement aggregate — the audit record of one stock change.

Counters are changed in place by conditional UPDATEs; each change also
leaves a movement behind, which raises ``InventoryChanged``.
"""

from enum import Enum

from protean.fields import DateTime, Integer, String

from storefront.domain import storefront
from storefront.inventory.stock.events import InventoryChanged
from storefront.inventory.stock.item import size_label
from storefront.shared.clock import utc_now


class MovementReason(Enum):
    FULFILLMENT = "fulfillment"
    ADJUSTMENT = "adjustment"
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@storefront.aggregate
class StockMovement:
    product_id: Integer(required=True)
    product_name: String(max_length=255, required=True)
    reason: String(max_length=20, choices=MovementReason, required=True)
    delta: Integer(default=0)
    size: String(max_length=50)
    size_stock: Integer()
    new_stock: Integer(required=True, min_value=0)
    reference: String(max_length=50)
    recorded_at: DateTime(default=utc_now)

    @classmethod
    def record(
        cls,
        product_id,
        product_name,
        reason,
        new_stock,
        delta=0,
        size=None,
        size_stock=None,
        reference=None,
    ):
        movement = cls(
            product_id=product_id,
            product_name=product_name,
            reason=MovementReason(reason).value,
            delta=delta,
            size=size_label(size),
            size_stock=size_stock,
            new_stock=new_stock,
            reference=reference,
            recorded_at=utc_now(),
        )
        movement.raise_(
            InventoryChanged(
                product_id=movement.product_id,
                product_name=movement.product_name,
                new_stock=movement.new_stock,
                size=movement.size,
                size_stock=movement.size_stock,
                reason=movement.reason,
                reference=movement.reference,
                changed_at=movement.recorded_at,
            )
        )
        return movement
