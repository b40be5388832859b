"""Order aggregate root — snapshot lines and the lifecycle state machine.

Lines, total and customer details are captured when the order is placed and
never change afterwards; only ``status`` and ``updated_at`` move. A placed
order and each of its lines carry a ``seal``, a digest of their frozen
fields, and a post-invariant rejects any change that breaks it.

State Machine:
    Pending    → Processing, Shipped, Delivered, Cancelled
    Processing → Shipped, Delivered, Cancelled
    Shipped    → Delivered, Cancelled
    Delivered  (terminal, stock committed)
    Cancelled  (terminal)
"""

import hashlib
import json
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Integer, String, Text

from storefront.domain import storefront
from storefront.ordering.order.events import OrderCreated, OrderStatusChanged
from storefront.shared.clock import utc_now
from storefront.shared.exceptions import InvalidStatus


class OrderStatus(Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, value) -> "OrderStatus":
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(status.value for status in cls)
            raise InvalidStatus(f"Unknown order status {value!r}; expected one of {allowed}", status=value) from None


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {
        OrderStatus.PROCESSING,
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}

_ORDER_FROZEN_FIELDS = (
    "number",
    "code",
    "user_id",
    "customer_name",
    "customer_email",
    "address",
    "phone",
    "payment_method",
    "notes",
    "total",
)
_LINE_FROZEN_FIELDS = ("position", "product_id", "product_name", "size", "price", "quantity", "image_url")


def order_code(number: int, year: int) -> str:
    """Human readable code, e.g. ``#S20240042`` for order 42 placed in 2024."""
    return f"#S{year}{number % 10000:04d}"


def seal_of(record, fields, *extra) -> str:
    """Digest of the values a placed order or line must keep."""
    frozen = [getattr(record, field) for field in fields]
    frozen = [round(value, 2) if isinstance(value, float) else (value if value != "" else None) for value in frozen]
    return hashlib.sha256(json.dumps([*frozen, *extra], default=str).encode()).hexdigest()


def _order_seal(order) -> str:
    return seal_of(order, _ORDER_FROZEN_FIELDS, sorted(line.seal or "" for line in order.lines))


@storefront.entity(part_of="Order", limit=-1)
class OrderLine:
    """Snapshot of one purchased product. Immutable once placed."""

    position: Integer(required=True, min_value=1)
    product_id: Integer(required=True)
    product_name: String(required=True, max_length=255)
    size: String(max_length=50)
    price: Float(required=True, min_value=0.0)
    quantity: Integer(required=True, min_value=1)
    image_url: String(max_length=500, default="")
    seal: String(max_length=64)

    @invariant.post
    def snapshot_is_frozen(self):
        if self.seal and self.seal != seal_of(self, _LINE_FROZEN_FIELDS):
            raise ValidationError({"lines": ["Order lines cannot be changed once placed"]})

    @property
    def subtotal(self) -> float:
        return round(self.price * self.quantity, 2)


@storefront.aggregate
class Order:
    number: Integer(required=True, unique=True)
    code: String(required=True, max_length=20, unique=True)
    user_id: Integer(required=True)
    customer_name: String(required=True, max_length=255)
    customer_email: String(max_length=254, default="")
    address: Text(required=True)
    phone: String(required=True, max_length=30)
    payment_method: String(max_length=50, default="COD")
    notes: Text(default="")
    total: Float(required=True, min_value=0.0)
    status: String(max_length=20, choices=OrderStatus, default=OrderStatus.PENDING.value)
    lines: HasMany(OrderLine)
    seal: String(max_length=64)
    created_at: DateTime(default=utc_now)
    updated_at: DateTime(default=utc_now)

    @invariant.post
    def placed_details_are_frozen(self):
        if self.seal and self.seal != _order_seal(self):
            raise ValidationError({"_entity": ["Orders cannot be changed once placed; only the status moves"]})

    @classmethod
    def place(
        cls,
        number,
        user_id,
        customer_name,
        address,
        phone,
        total,
        lines,
        customer_email="",
        payment_method="COD",
        notes="",
    ):
        """Place a new Pending order from already validated line snapshots.

        ``lines`` is an iterable of mappings with product_id, product_name,
        size, price, quantity and image_url.
        """
        now = utc_now()
        order = cls(
            number=number,
            code=order_code(number, now.year),
            user_id=user_id,
            customer_name=customer_name,
            customer_email=customer_email or "",
            address=address,
            phone=phone,
            payment_method=payment_method or "COD",
            notes=notes or "",
            total=total,
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        for position, fields in enumerate(lines, start=1):
            line = OrderLine(
                position=position,
                product_id=fields["product_id"],
                product_name=fields["product_name"],
                size=fields.get("size") or None,
                price=fields["price"],
                quantity=fields["quantity"],
                image_url=fields.get("image_url") or "",
            )
            line.seal = seal_of(line, _LINE_FROZEN_FIELDS)
            order.add_lines(line)
        order.seal = _order_seal(order)

        order.raise_(
            OrderCreated(
                order_id=order.number,
                code=order.code,
                user_id=order.user_id,
                customer_name=order.customer_name,
                total=order.total,
                status=order.status,
                created_at=now,
            )
        )
        return order

    @property
    def ordered_lines(self) -> list:
        """Lines in the order they were placed."""
        return sorted(self.lines, key=lambda line: line.position)

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    def _assert_can_transition(self, target_status: OrderStatus):
        current = self.current_status
        if target_status not in _VALID_TRANSITIONS[current]:
            raise InvalidStatus(
                f"Cannot transition order {self.number} from {current.value} to {target_status.value}",
                order_id=self.number,
                current_status=current.value,
                requested_status=target_status.value,
            )

    def transition_to(self, target_status: OrderStatus) -> bool:
        """Move to ``target_status``. Returns False, changing nothing, when already there."""
        if target_status is self.current_status:
            return False

        self._assert_can_transition(target_status)

        previous = self.status
        now = utc_now()
        self.status = target_status.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=self.number,
                code=self.code,
                user_id=self.user_id,
                previous_status=previous,
                new_status=self.status,
                changed_at=now,
            )
        )
        return True
