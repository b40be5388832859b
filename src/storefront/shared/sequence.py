"""Sequential public identifiers.

Users, products and orders carry a monotonically increasing integer
``number`` that is independent of their storage identity. Each allocation is
a single ``INSERT ... ON CONFLICT DO UPDATE SET value = value + 1 ...
RETURNING value`` executed in the caller's unit of work, so two concurrent
writers can never observe the same value, and a rolled back unit gives its
number back.
"""

from protean.fields import Identifier, Integer
from sqlalchemy.dialects import postgresql, sqlite

from storefront.domain import storefront
from storefront.shared.storage import session_for, table_for

_DIALECT_INSERTS = {"sqlite": sqlite.insert, "postgresql": postgresql.insert}


@storefront.aggregate
class Counter:
    name: Identifier(identifier=True)
    value: Integer(default=0, min_value=0)


@storefront.repository(part_of=Counter)
class CounterRepository:
    def next_value(self, name: str) -> int:
        """Atomically increment counter ``name``, creating it at 1, and return the new value."""
        table = table_for(self)
        with session_for(self) as session:
            insert = _DIALECT_INSERTS[session.get_bind().dialect.name]
            stmt = (
                insert(table)
                .values(name=name, value=1)
                .on_conflict_do_update(index_elements=[table.c.name], set_={"value": table.c.value + 1})
                .returning(table.c.value)
            )
            return session.execute(stmt).scalar_one()
