"""Manual stock adjustment — command, handler and the stock sheet."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Integer, String
from protean.utils.globals import current_domain
from pydantic import BaseModel

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.identity.access import Actor, actor_of, require_admin
from storefront.identity.user.user import Role
from storefront.inventory.stock.item import ONE_SIZE, InventoryItem, size_label
from storefront.inventory.stock.movement import MovementReason, StockMovement

logger = structlog.get_logger(__name__)


@storefront.command(part_of="StockMovement")
class AdjustStock:
    """Correct a product's stock by a signed delta. Results below zero clamp to zero."""

    product_id: Integer(required=True)
    delta: Integer(required=True)
    size: String(max_length=50)
    actor_id: Integer(required=True)
    actor_role: String(required=True, choices=Role)


class StockLevel(BaseModel):
    product_id: int
    product_name: str
    stock: int
    size_stocks: dict[str, int]


def _counter_to_adjust(levels: dict[str, int], product_id: int, size: str | None) -> str:
    sizes = [name for name in levels if name != ONE_SIZE]
    if not sizes:
        return ONE_SIZE
    if not size:
        if len(sizes) > 1:
            raise ValidationError({"size": [f"Size is required; choose one of {', '.join(sizes)}"]})
        return sizes[0]
    if size not in sizes:
        raise ValidationError({"size": [f"Unknown size {size!r} for product {product_id}"]})
    return size


@storefront.command_handler(part_of=StockMovement)
class StockAdjustmentHandler:
    @handle(AdjustStock)
    def adjust_stock(self, command):
        actor = actor_of(command)
        require_admin(actor, "adjust stock")
        if command.delta == 0:
            raise ValidationError({"delta": ["Adjustment must be non-zero"]})

        product = current_domain.repository_for(Product).get_by_number(command.product_id)
        inventory = current_domain.repository_for(InventoryItem)
        size = _counter_to_adjust(inventory.levels(product.number), product.number, command.size)

        size_stock = inventory.adjust(product.number, size, command.delta)
        new_stock = inventory.total(product.number)
        current_domain.repository_for(StockMovement).add(
            StockMovement.record(
                product_id=product.number,
                product_name=product.name,
                reason=MovementReason.ADJUSTMENT.value,
                new_stock=new_stock,
                delta=command.delta,
                size=size,
                size_stock=size_stock,
            )
        )

        logger.info(
            "Stock adjusted",
            product_id=product.number,
            size=size_label(size),
            delta=command.delta,
            size_stock=size_stock,
            new_stock=new_stock,
            adjusted_by=actor.actor_id,
        )
        return {
            "product_id": product.number,
            "size": size_label(size),
            "size_stock": size_stock,
            "new_stock": new_stock,
        }


def list_inventory(actor: Actor) -> list[StockLevel]:
    require_admin(actor, "view inventory")
    inventory = current_domain.repository_for(InventoryItem)
    levels = []
    for product in current_domain.repository_for(Product).catalogue():
        counters = inventory.levels(product.number)
        levels.append(
            StockLevel(
                product_id=product.number,
                product_name=product.name,
                stock=sum(counters.values()),
                size_stocks=counters,
            )
        )
    return levels
