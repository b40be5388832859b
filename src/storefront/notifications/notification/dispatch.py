"""Notification fan-out — routes committed domain events to channels.

Protean hands events to these handlers only after the unit of work that
raised them has committed. Delivery is best effort and at most once: a
failed or raising adapter is logged and never reaches the command that
raised the event, and nothing is retried.

Routing:
    OrderCreated, OrderStatusChanged → admin, user-<owner id>
    InventoryChanged                 → admin
"""

from datetime import datetime

import structlog
from protean.utils.mixins import handle
from protean.utils.reflection import declared_fields

from storefront.domain import storefront
from storefront.inventory.stock.events import InventoryChanged
from storefront.inventory.stock.movement import StockMovement
from storefront.notifications.channel import configured_channel
from storefront.ordering.order.events import OrderCreated, OrderStatusChanged
from storefront.ordering.order.order import Order

logger = structlog.get_logger(__name__)

ADMIN_CHANNEL = "admin"


def user_channel(user_id: int) -> str:
    return f"user-{user_id}"


def payload_of(event) -> dict:
    payload = {}
    for name in declared_fields(event):
        if name.startswith("_"):
            continue
        value = getattr(event, name)
        payload[name] = value.isoformat() if isinstance(value, datetime) else value
    return payload


def deliver(channels: list[str], event) -> None:
    """Publish ``event`` to each channel, logging rather than raising on failure."""
    event_type = event.__class__.__name__
    payload = payload_of(event)
    for channel in channels:
        try:
            result = configured_channel().publish(channel, event_type, payload)
        except Exception as exc:
            logger.error(
                "Notification delivery raised",
                channel=channel,
                event_type=event_type,
                error=str(exc),
                exc_info=True,
            )
            continue

        if result.get("status") != "sent":
            logger.warning(
                "Notification delivery failed",
                channel=channel,
                event_type=event_type,
                error=result.get("error", "Unknown dispatch error"),
            )


@storefront.event_handler(part_of=Order)
class OrderNotificationHandler:
    """Tells administrators and the ordering customer about order changes."""

    @handle(OrderCreated)
    def on_order_created(self, event: OrderCreated) -> None:
        deliver([ADMIN_CHANNEL, user_channel(event.user_id)], event)

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        deliver([ADMIN_CHANNEL, user_channel(event.user_id)], event)


@storefront.event_handler(part_of=StockMovement)
class InventoryNotificationHandler:
    @handle(InventoryChanged)
    def on_inventory_changed(self, event: InventoryChanged) -> None:
        deliver([ADMIN_CHANNEL], event)
