"""Tests for the CreateOrder command and its line validation."""

import pytest
from protean.exceptions import ValidationError
from pydantic import ValidationError as PydanticValidationError

from storefront.identity.user.user import Role
from storefront.ordering.order.creation import CreateOrder, OrderLines, _checked_lines
from storefront.shared.payload import encode

LINES = [
    {"product_id": 1, "name": "Tee", "price": 19.99, "quantity": 3, "size": "M", "image": "tee.jpg"},
    {"product_id": 2, "product_name": "Mug", "price": 5.0, "quantity": 1},
]


def _command(**overrides):
    fields = {
        "user_id": 7,
        "customer_name": "Carla Customer",
        "address": "1 Main Street",
        "phone": "555-0100",
        "lines": encode(LINES),
        "total": 64.97,
        "actor_id": 7,
        "actor_role": Role.CUSTOMER.value,
    }
    fields.update(overrides)
    return CreateOrder(**fields)


class TestOrderLines:
    def test_valid_lines(self):
        checked = OrderLines(lines=LINES, total=64.97)
        assert checked.lines[0].product_name == "Tee"
        assert checked.lines[0].image_url == "tee.jpg"
        assert checked.lines[1].size is None

    def test_total_within_a_cent_is_accepted(self):
        OrderLines(lines=LINES, total=64.98)

    def test_total_mismatch_rejected(self):
        with pytest.raises(PydanticValidationError) as exc:
            OrderLines(lines=LINES, total=70.0)
        assert "does not match" in str(exc.value)

    def test_lines_required(self):
        with pytest.raises(PydanticValidationError):
            OrderLines(lines=[], total=0)

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_quantity_must_be_positive(self, quantity):
        with pytest.raises(PydanticValidationError):
            OrderLines(lines=[{"product_id": 1, "name": "Tee", "price": 1.0, "quantity": quantity}], total=0)

    def test_negative_price_rejected(self):
        with pytest.raises(PydanticValidationError):
            OrderLines(lines=[{"product_id": 1, "name": "Tee", "price": -1.0, "quantity": 1}], total=0)


class TestCheckedLines:
    def test_decodes_and_normalizes(self):
        lines = _checked_lines(_command())
        assert lines[0]["product_name"] == "Tee"
        assert lines[1]["image_url"] == ""

    def test_errors_are_keyed_by_field(self):
        with pytest.raises(ValidationError) as exc:
            _checked_lines(_command(total=70.0))
        assert "_entity" in exc.value.messages

    def test_malformed_json_is_a_validation_error(self):
        with pytest.raises(ValidationError) as exc:
            _checked_lines(_command(lines="[not json"))
        assert exc.value.messages == {"lines": ["Must be valid JSON"]}


class TestCreateOrderCommand:
    def test_payment_method_defaults_to_cod(self):
        assert _command().payment_method == "COD"

    @pytest.mark.parametrize("field", ["customer_name", "address", "phone", "lines"])
    def test_contact_fields_and_lines_required(self, field):
        with pytest.raises(ValidationError) as exc:
            _command(**{field: ""})
        assert field in exc.value.messages

    def test_actor_role_must_be_known(self):
        with pytest.raises(ValidationError):
            _command(actor_role="superuser")
