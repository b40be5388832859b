"""Stock counters — one ``InventoryItem`` per product and size.

Stock Model:
    A product sold in sizes owns one counter per size. A product sold
    without sizes has exactly one counter under ``ONE_SIZE``. A product's
    aggregate stock is always derived as the sum of its counters and is
    never stored, so it cannot drift from them.

Counters are opened and closed with the product or its sizes. Their
quantities change only through ``InventoryRepository.withdraw`` and
``InventoryRepository.adjust``, each a single conditional UPDATE on one
counter row, so concurrent writers are serialized by the database and never
see each other's intermediate state:

    withdraw:  quantity = quantity - n          WHERE quantity >= n
    adjust:    quantity = max(0, quantity + d)

Counters are never loaded, changed and saved back as aggregates.
"""

from protean.fields import Integer, String
from sqlalchemy import case, func, select, update

from storefront.domain import storefront
from storefront.shared.storage import session_for, table_for

ONE_SIZE = "one-size"


def counter_key(levels: dict[str, int], size: str | None) -> str | None:
    """Return the counter a line with ``size`` draws from, or None.

    Products without sizes always draw from ``ONE_SIZE``. A size-tracked
    product needs an explicit size; a missing one maps to no counter.
    """
    if not any(name != ONE_SIZE for name in levels):
        return ONE_SIZE
    return size or None


def size_label(size: str | None) -> str | None:
    return None if size == ONE_SIZE else size


@storefront.aggregate
class InventoryItem:
    product_id: Integer(required=True)
    size: String(required=True, max_length=50)
    quantity: Integer(default=0, min_value=0)


@storefront.repository(part_of=InventoryItem)
class InventoryRepository:
    def open_counters(self, product_id: int, quantities: dict[str, int]) -> None:
        for size, quantity in quantities.items():
            self.add(InventoryItem(product_id=product_id, size=size, quantity=quantity))

    def close_counters(self, product_id: int, sizes=None) -> None:
        """Remove the product's counters for ``sizes``, or all of them."""
        for item in self._dao.query.filter(product_id=product_id).limit(None).all().items:
            if sizes is None or item.size in sizes:
                self._dao.delete(item)

    def levels(self, product_id: int) -> dict[str, int]:
        table = table_for(self)
        stmt = (
            select(table.c.size, table.c.quantity)
            .where(table.c.product_id == product_id)
            .order_by(table.c.size)
        )
        with session_for(self) as session:
            return {size: quantity for size, quantity in session.execute(stmt)}

    def available(self, product_id: int, size: str | None) -> int:
        """Current quantity of one counter; a counter that does not exist holds 0."""
        if size is None:
            return 0
        table = table_for(self)
        stmt = select(table.c.quantity).where(table.c.product_id == product_id, table.c.size == size)
        with session_for(self) as session:
            return session.execute(stmt).scalar_one_or_none() or 0

    def total(self, product_id: int) -> int:
        table = table_for(self)
        stmt = select(func.coalesce(func.sum(table.c.quantity), 0)).where(table.c.product_id == product_id)
        with session_for(self) as session:
            return session.execute(stmt).scalar_one()

    def withdraw(self, product_id: int, size: str, quantity: int) -> bool:
        """Take ``quantity`` units from a counter if, and only if, it holds enough.

        Returns False when the counter is missing or short; nothing is written
        in that case.
        """
        table = table_for(self)
        stmt = (
            update(table)
            .where(table.c.product_id == product_id, table.c.size == size, table.c.quantity >= quantity)
            .values(quantity=table.c.quantity - quantity)
        )
        with session_for(self) as session:
            return session.execute(stmt).rowcount == 1

    def adjust(self, product_id: int, size: str, delta: int) -> int | None:
        """Add ``delta`` to a counter, clamping at zero. Returns the new quantity.

        Returns None when the counter does not exist.
        """
        table = table_for(self)
        adjusted = table.c.quantity + delta
        stmt = (
            update(table)
            .where(table.c.product_id == product_id, table.c.size == size)
            .values(quantity=case((adjusted < 0, 0), else_=adjusted))
            .returning(table.c.quantity)
        )
        with session_for(self) as session:
            return session.execute(stmt).scalar_one_or_none()
