"""Inventory reconciliation — withdrawing a fulfilled order's lines from stock.

Runs inside the unit of work that marks an order Delivered, in two phases:

1. Validate the lines in order against current counters without writing
   anything. Each line adds its quantity to the running demand on its
   counter; the first line whose product is gone or whose counter cannot
   cover the demand so far aborts with ``MissingProduct`` or
   ``InsufficientStock``.
2. Withdraw each counter's total demand with a conditional UPDATE. If
   another transaction took the stock in between, the update matches no row
   and ``InsufficientStock`` is raised; the unit of work then rolls back
   every earlier withdrawal along with the status change.
"""

from dataclasses import dataclass

import structlog
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.inventory.stock.item import InventoryItem, counter_key, size_label
from storefront.inventory.stock.movement import MovementReason, StockMovement
from storefront.shared.exceptions import InsufficientStock, MissingProduct

logger = structlog.get_logger(__name__)


@dataclass
class StockDemand:
    """Total quantity an order needs from one counter."""

    product_id: int
    product_name: str
    size: str | None  # counter key; None when the line names no usable size
    requested: int
    line: int  # first order line contributing to this demand


class InventoryReconciler:
    def __init__(self):
        self.products = current_domain.repository_for(Product)
        self.inventory = current_domain.repository_for(InventoryItem)

    def validate(self, lines) -> list[StockDemand]:
        """Check every line, in order, against its counter. Writes nothing."""
        demands: dict[tuple, StockDemand] = {}
        for index, line in enumerate(lines, start=1):
            product = self.products.find_by_number(line.product_id)
            if product is None:
                logger.warning("Reconciliation rejected: product missing", product_id=line.product_id, line=index)
                raise MissingProduct(line.product_id, line.product_name, index)

            size = counter_key(self.inventory.levels(product.number), line.size)
            key = (product.number, size)
            if key not in demands:
                demands[key] = StockDemand(product.number, product.name, size, 0, index)
            demand = demands[key]
            demand.requested += line.quantity

            available = self.inventory.available(demand.product_id, demand.size)
            if available < demand.requested:
                self._reject(demand, available, line=index)

        return list(demands.values())

    def commit(self, demands: list[StockDemand], reference: str | None = None) -> list[StockMovement]:
        """Withdraw validated demands; raises if a concurrent writer got there first."""
        for demand in demands:
            if not self.inventory.withdraw(demand.product_id, demand.size, demand.requested):
                available = self.inventory.available(demand.product_id, demand.size)
                self._reject(demand, available, line=demand.line, lost_race=True)

        movements = [
            StockMovement.record(
                product_id=demand.product_id,
                product_name=demand.product_name,
                reason=MovementReason.FULFILLMENT.value,
                new_stock=self.inventory.total(demand.product_id),
                delta=-demand.requested,
                size=demand.size,
                size_stock=self.inventory.available(demand.product_id, demand.size),
                reference=reference,
            )
            for demand in demands
        ]
        repository = current_domain.repository_for(StockMovement)
        for movement in movements:
            repository.add(movement)
        return movements

    def reconcile(self, lines, reference: str | None = None) -> list[StockMovement]:
        return self.commit(self.validate(lines), reference=reference)

    def _reject(self, demand: StockDemand, available: int, line: int, lost_race: bool = False):
        logger.warning(
            "Reconciliation rejected: insufficient stock",
            product_id=demand.product_id,
            size=size_label(demand.size),
            requested=demand.requested,
            available=available,
            line=line,
            lost_race=lost_race,
        )
        raise InsufficientStock(
            demand.product_id,
            demand.product_name,
            requested=demand.requested,
            available=available,
            size=size_label(demand.size),
            line=line,
        )
