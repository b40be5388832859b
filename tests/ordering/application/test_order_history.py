"""Application tests for order queries."""

import pytest
from protean.exceptions import ObjectNotFoundError

from storefront.ordering.order.history import get_history, get_order, list_orders
from storefront.shared.exceptions import PermissionDenied


class TestGetHistory:
    def test_customer_sees_own_orders_newest_first(self, customer, make_product, place_order):
        product = make_product(stock=5)
        first = place_order([(product, 1)])
        second = place_order([(product, 2)])

        history = get_history(customer, customer.actor_id)
        assert [order["id"] for order in history] == [second.number, first.number]

    def test_admin_may_read_any_history(self, admin, customer, make_product, place_order):
        order = place_order([(make_product(stock=1), 1)])
        assert [o["id"] for o in get_history(admin, customer.actor_id)] == [order.number]

    def test_other_customer_is_denied_not_told_not_found(self, customer, other_customer):
        with pytest.raises(PermissionDenied):
            get_history(other_customer, customer.actor_id)

    def test_empty_history(self, customer):
        assert get_history(customer, customer.actor_id) == []


class TestAdminQueries:
    def test_list_orders_across_customers(self, admin, other_customer, make_product, place_order):
        product = make_product(stock=5)
        mine = place_order([(product, 1)])
        theirs = place_order([(product, 1)], actor=other_customer)
        assert [order["id"] for order in list_orders(admin)] == [theirs.number, mine.number]

    def test_customer_cannot_list_all_orders(self, customer):
        with pytest.raises(PermissionDenied):
            list_orders(customer)


class TestGetOrder:
    def test_owner_reads_order_with_lines(self, customer, make_product, place_order):
        product = make_product(name="Tee", stock=1)
        order = place_order([(product, 1)])
        loaded = get_order(customer, order.number)
        assert loaded["code"] == order.code
        assert loaded["lines"] == [
            {
                "product_id": product.number,
                "product_name": "Tee",
                "size": None,
                "price": product.final_price,
                "quantity": 1,
                "image_url": "",
            }
        ]

    def test_lines_are_listed_in_placement_order(self, customer, make_product, place_order):
        mug = make_product(name="Mug", stock=1)
        tee = make_product(name="Tee", stock=1)
        order = place_order([(tee, 1), (mug, 1)])
        assert [line["product_name"] for line in get_order(customer, order.number)["lines"]] == ["Tee", "Mug"]

    def test_other_customer_denied(self, other_customer, make_product, place_order):
        order = place_order([(make_product(stock=1), 1)])
        with pytest.raises(PermissionDenied):
            get_order(other_customer, order.number)

    def test_customer_asking_for_an_absent_order_is_denied(self, customer):
        with pytest.raises(PermissionDenied):
            get_order(customer, 999)

    def test_absent_and_foreign_orders_look_the_same_to_a_customer(
        self, other_customer, make_product, place_order
    ):
        order = place_order([(make_product(stock=1), 1)])
        with pytest.raises(PermissionDenied) as foreign:
            get_order(other_customer, order.number)
        with pytest.raises(PermissionDenied) as absent:
            get_order(other_customer, order.number + 1000)
        assert foreign.value.to_dict() == absent.value.to_dict()

    def test_admin_is_told_an_order_is_absent(self, admin):
        with pytest.raises(ObjectNotFoundError):
            get_order(admin, 999)
