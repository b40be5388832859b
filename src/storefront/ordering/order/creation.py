"""Order creation — command and handler."""

import structlog
from protean import handle
from protean.fields import Float, Integer, String, Text
from protean.utils.globals import current_domain
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from storefront.domain import storefront
from storefront.identity.access import actor_of
from storefront.identity.user.user import Role, User
from storefront.ordering.order.order import Order
from storefront.shared.exceptions import PermissionDenied, validation_error_from
from storefront.shared.payload import decode
from storefront.shared.sequence import Counter

logger = structlog.get_logger(__name__)

# Totals are computed client side from floats; allow one cent of rounding.
TOTAL_TOLERANCE = 0.01


@storefront.command(part_of="Order")
class CreateOrder:
    """Place an order for the calling customer."""

    user_id: Integer(required=True)
    customer_name: String(required=True, max_length=255)
    address: Text(required=True)
    phone: String(required=True, max_length=30)
    payment_method: String(max_length=50, default="COD")
    notes: Text(default="")
    lines: Text(required=True)  # JSON: list of line dicts
    total: Float(required=True, min_value=0.0)
    actor_id: Integer(required=True)
    actor_role: String(required=True, choices=Role)


class OrderLineInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    product_id: int
    product_name: str = Field(min_length=1, max_length=255, validation_alias=AliasChoices("product_name", "name"))
    quantity: int = Field(gt=0)
    price: float = Field(ge=0)
    size: str | None = Field(default=None, max_length=50)
    image_url: str = Field(default="", max_length=500, validation_alias=AliasChoices("image_url", "image"))


class OrderLines(BaseModel):
    lines: list[OrderLineInput] = Field(min_length=1)
    total: float = Field(ge=0)

    @model_validator(mode="after")
    def total_matches_lines(self):
        expected = round(sum(line.price * line.quantity for line in self.lines), 2)
        if round(abs(expected - self.total), 2) > TOTAL_TOLERANCE:
            raise ValueError(f"Total {self.total:.2f} does not match the sum of the lines ({expected:.2f})")
        return self


def _checked_lines(command) -> list[dict]:
    try:
        checked = OrderLines(lines=decode(command.lines, "lines"), total=command.total)
    except PydanticValidationError as exc:
        raise validation_error_from(exc) from exc
    return [line.model_dump() for line in checked.lines]


@storefront.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        actor = actor_of(command)
        if command.user_id != actor.actor_id:
            raise PermissionDenied("Orders can only be placed for your own account", actor_id=actor.actor_id)

        lines = _checked_lines(command)
        owner = current_domain.repository_for(User).get_by_number(command.user_id)
        number = current_domain.repository_for(Counter).next_value("orders")

        order = Order.place(
            number=number,
            user_id=owner.number,
            customer_name=command.customer_name.strip(),
            customer_email=owner.email,
            address=command.address.strip(),
            phone=command.phone.strip(),
            payment_method=(command.payment_method or "").strip() or "COD",
            notes=command.notes or "",
            total=round(command.total, 2),
            lines=lines,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order created",
            order_id=order.number,
            code=order.code,
            user_id=order.user_id,
            lines=len(lines),
            total=order.total,
        )
        return {"order_id": order.number, "code": order.code, "status": order.status}
