"""Repository for the Order aggregate.

``claim_transition`` moves the status column with a compare-and-set UPDATE,
so of two administrators changing the same order at once exactly one wins;
the other sees the row already moved and re-reads it.
"""

from protean.exceptions import ObjectNotFoundError
from sqlalchemy import select, update

from storefront.domain import storefront
from storefront.ordering.order.order import Order
from storefront.shared.storage import session_for, table_for


@storefront.repository(part_of=Order)
class OrderRepository:
    def find_by_number(self, number: int) -> Order | None:
        orders = self._dao.query.filter(number=number).all().items
        return orders[0] if orders else None

    def get_by_number(self, number: int) -> Order:
        order = self.find_by_number(number)
        if order is None:
            raise ObjectNotFoundError(f"Order {number} not found")
        return order

    def for_user(self, user_id: int) -> list[Order]:
        """Orders placed by ``user_id``, newest first."""
        return self._dao.query.filter(user_id=user_id).order_by("-number").limit(None).all().items

    def everyone(self) -> list[Order]:
        return self._dao.query.order_by("-number").limit(None).all().items

    def current_status(self, number: int) -> str | None:
        table = table_for(self)
        stmt = select(table.c.status).where(table.c.number == number)
        with session_for(self) as session:
            return session.execute(stmt).scalar_one_or_none()

    def claim_transition(self, number: int, expected: str, target: str) -> bool:
        """Set the status to ``target`` only if it is still ``expected``."""
        table = table_for(self)
        stmt = (
            update(table)
            .where(table.c.number == number, table.c.status == expected)
            .values(status=target)
        )
        with session_for(self) as session:
            return session.execute(stmt).rowcount == 1
