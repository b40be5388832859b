"""Order lifecycle — status transitions, including fulfillment."""

import structlog
from protean import handle
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.access import actor_of, require_admin
from storefront.identity.user.user import Role
from storefront.inventory.stock.reconciliation import InventoryReconciler
from storefront.ordering.order.history import order_summary
from storefront.ordering.order.order import Order, OrderStatus
from storefront.shared.exceptions import InvalidStatus

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class TransitionStatus:
    """Move an order to ``status``.

    ``status`` is free text so an unknown value is reported as
    ``InvalidStatus`` by the handler rather than as a field error.
    """

    order_id: Integer(required=True)
    status: String(required=True, max_length=20)
    actor_id: Integer(required=True)
    actor_role: String(required=True, choices=Role)


@storefront.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(TransitionStatus)
    def transition_status(self, command):
        """Apply a status change in one unit of work.

        Moving to Delivered withdraws every line from stock; if any line
        cannot be served nothing is written and the error names the line.
        Requesting the status the order already has is a no-op.
        """
        actor = actor_of(command)
        require_admin(actor, "change order status")

        repo = current_domain.repository_for(Order)
        order = repo.get_by_number(command.order_id)
        target = OrderStatus.parse(command.status.strip())
        previous = order.status

        if not order.transition_to(target):
            logger.info("Order status unchanged", order_id=order.number, status=order.status)
            return order_summary(order)

        if not repo.claim_transition(order.number, previous, target.value):
            # Someone else moved the order after it was loaded.
            current = repo.current_status(order.number)
            if current == target.value:
                logger.info("Order status unchanged", order_id=order.number, status=current)
                return order_summary(repo.get_by_number(order.number))
            raise InvalidStatus(
                f"Cannot transition order {order.number} from {current} to {target.value}",
                order_id=order.number,
                current_status=current,
                requested_status=target.value,
            )

        if target is OrderStatus.DELIVERED:
            InventoryReconciler().reconcile(order.ordered_lines, reference=order.code)

        repo.add(order)

        logger.info(
            "Order status changed",
            order_id=order.number,
            code=order.code,
            previous_status=previous,
            new_status=order.status,
            changed_by=actor.actor_id,
        )
        return order_summary(order)
