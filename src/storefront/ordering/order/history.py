"""Order queries — a customer's history and the administrator's views."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.identity.access import Actor, require_admin, require_self_or_admin
from storefront.ordering.order.order import Order
from storefront.shared.exceptions import PermissionDenied


def order_summary(order: Order) -> dict:
    return {
        "id": order.number,
        "code": order.code,
        "user_id": order.user_id,
        "customer_name": order.customer_name,
        "customer_email": order.customer_email or "",
        "address": order.address,
        "phone": order.phone,
        "payment_method": order.payment_method,
        "notes": order.notes or "",
        "total": order.total,
        "status": order.status,
        "lines": [
            {
                "product_id": line.product_id,
                "product_name": line.product_name,
                "size": line.size,
                "price": line.price,
                "quantity": line.quantity,
                "image_url": line.image_url or "",
            }
            for line in order.ordered_lines
        ],
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


def get_history(actor: Actor, user_id: int) -> list[dict]:
    """Orders placed by ``user_id``, newest first."""
    require_self_or_admin(actor, user_id)
    return [order_summary(order) for order in current_domain.repository_for(Order).for_user(user_id)]


def list_orders(actor: Actor) -> list[dict]:
    require_admin(actor, "list all orders")
    return [order_summary(order) for order in current_domain.repository_for(Order).everyone()]


def get_order(actor: Actor, order_id: int) -> dict:
    """One order. Customers see only their own; any other number is denied, existing or not."""
    order = current_domain.repository_for(Order).find_by_number(order_id)
    if actor.is_admin:
        if order is None:
            raise ObjectNotFoundError(f"Order {order_id} not found")
        return order_summary(order)

    if order is None or order.user_id != actor.actor_id:
        raise PermissionDenied("You may only access your own orders", actor_id=actor.actor_id)
    return order_summary(order)
